"""Resolve tenant wording and feature flags against industry templates.

Precedence is always: tenant override, then the industry template, then
``GENERIC``.  Merges are shallow and key-by-key: a tenant override never
replaces the whole template.
"""
from __future__ import annotations

from tenants.industries import GENERIC, INDUSTRY_TEMPLATES, get_template


def _overrides(raw) -> dict:
    return raw if isinstance(raw, dict) else {}


def resolve_text(tenant, key: str) -> str:
    """Return the wording for *key* as seen by *tenant*.

    Raises ``KeyError`` only for a key that ``GENERIC`` does not define,
    which is a programming error rather than a data problem.
    """
    value = _overrides(getattr(tenant, "vocabulary", None)).get(key)
    if isinstance(value, str) and value.strip():
        return value

    value = get_template(getattr(tenant, "industry", None))["vocabulary"].get(key)
    if value:
        return value
    return INDUSTRY_TEMPLATES[GENERIC]["vocabulary"][key]


def resolve_feature(tenant, key: str) -> bool:
    """Return whether feature *key* is enabled for *tenant*."""
    value = _overrides(getattr(tenant, "config", None)).get(key)
    if isinstance(value, bool):
        return value

    value = get_template(getattr(tenant, "industry", None))["config"].get(key)
    if isinstance(value, bool):
        return value
    return INDUSTRY_TEMPLATES[GENERIC]["config"][key]


def merged_vocabulary(tenant) -> dict:
    """Full vocabulary: template defaults with tenant overrides on top.

    Blank tenant strings are ignored so that the merged view agrees with
    :func:`resolve_text`.  Tenant-only keys are kept.
    """
    merged = dict(INDUSTRY_TEMPLATES[GENERIC]["vocabulary"])
    merged.update(get_template(getattr(tenant, "industry", None))["vocabulary"])
    for key, value in _overrides(getattr(tenant, "vocabulary", None)).items():
        if isinstance(value, str) and not value.strip():
            continue
        merged[key] = value
    return merged


def merged_config(tenant) -> dict:
    """Full feature set: template defaults with tenant overrides on top."""
    merged = dict(INDUSTRY_TEMPLATES[GENERIC]["config"])
    merged.update(get_template(getattr(tenant, "industry", None))["config"])
    merged.update(_overrides(getattr(tenant, "config", None)))
    return merged

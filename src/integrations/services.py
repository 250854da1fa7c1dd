"""Read access to provider secrets, with settings fallback.

Django settings give the base values of a provider; every enabled secret
stored in the vault replaces the setting of the same key.  A fresh
deployment configured only through the environment keeps working, and a
single rotated secret does not hide the others.
"""
from __future__ import annotations

import logging

from django.conf import settings

from integrations.models import Integration
from integrations.vault import VaultError, decrypt, mask_secret

logger = logging.getLogger("pointage")

SETTINGS_FALLBACK = {
    Integration.Provider.WHATSAPP: {
        "TOKEN": "WHATSAPP_TOKEN",
        "PHONE_ID": "WHATSAPP_PHONE_ID",
        "VERIFY_TOKEN": "WHATSAPP_VERIFY_TOKEN",
    },
}


class Status:
    OK = "OK"
    CORRUPTED = "CORRUPTED"
    DISABLED = "DISABLED"


def _from_settings(provider) -> dict:
    result = {}
    for key, setting_name in SETTINGS_FALLBACK.get(provider, {}).items():
        value = getattr(settings, setting_name, "")
        if value:
            result[key] = value
    return result


def get_provider_config(provider) -> dict:
    """Return ``{key: plaintext}`` for *provider*.

    Values that fail to decrypt are logged and keep their settings value.
    """
    result = _from_settings(provider)
    for row in Integration.objects.filter(provider=provider, is_enabled=True):
        try:
            result[row.key] = decrypt(row.value)
        except VaultError:
            logger.error("Integration secret %s.%s cannot be decrypted", provider, row.key)
    return result


def get_config_value(provider, key, default=None):
    row = Integration.objects.filter(provider=provider, key=key, is_enabled=True).first()
    if row is not None:
        try:
            return decrypt(row.value)
        except VaultError:
            logger.error("Integration secret %s.%s cannot be decrypted", provider, key)
    setting_name = SETTINGS_FALLBACK.get(provider, {}).get(key)
    if setting_name:
        return getattr(settings, setting_name, "") or default
    return default


def store_secret(provider, key, plaintext, *, enabled=True) -> Integration:
    """Create or replace the encrypted secret *provider*.*key*."""
    integration = Integration.objects.filter(provider=provider, key=key).first()
    if integration is None:
        integration = Integration(provider=provider, key=key)
    integration.set_secret(plaintext)
    integration.is_enabled = enabled
    integration.save()
    logger.info("Integration secret %s.%s stored", provider, key)
    return integration


def describe_integrations() -> list[dict]:
    """Status of every stored secret; never exposes plaintext."""
    described = []
    for row in Integration.objects.all():
        entry = {
            "id": str(row.pk),
            "provider": row.provider,
            "key": row.key,
            "is_enabled": row.is_enabled,
            "updated_at": row.updated_at,
        }
        try:
            entry["preview"] = mask_secret(decrypt(row.value))
            entry["status"] = Status.OK if row.is_enabled else Status.DISABLED
        except VaultError:
            entry["preview"] = None
            entry["status"] = Status.CORRUPTED
        described.append(entry)
    return described

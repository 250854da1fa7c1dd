import importlib
import string
import sys

import pytest
from django.core.exceptions import ImproperlyConfigured

from config.settings import base


@pytest.fixture
def prod_env(monkeypatch):
    monkeypatch.setattr(base, "SECRET_KEY", "prod-" + string.ascii_letters + string.digits)
    monkeypatch.setattr(base, "ENCRYPTION_KEY", "QnKt2vJ0d0m3n6fC8lQW8JvHkq3m0c9a1xk7b2Pq4yE=")
    monkeypatch.setattr(base, "WHATSAPP_VERIFY_TOKEN", "prod-verify")
    monkeypatch.delitem(sys.modules, "config.settings.prod", raising=False)
    return monkeypatch


def load_prod():
    return importlib.import_module("config.settings.prod")


def test_prod_uses_the_storages_setting(prod_env):
    prod = load_prod()

    assert not hasattr(prod, "STATICFILES_STORAGE")
    assert prod.STORAGES["staticfiles"]["BACKEND"] == (
        "django.contrib.staticfiles.storage.ManifestStaticFilesStorage"
    )
    assert prod.STORAGES["default"]["BACKEND"] == "django.core.files.storage.FileSystemStorage"
    assert prod.DEBUG is False


@pytest.mark.parametrize("name", ["SECRET_KEY", "ENCRYPTION_KEY", "WHATSAPP_VERIFY_TOKEN"])
def test_prod_refuses_to_start_without_secrets(prod_env, name):
    prod_env.setattr(base, name, "")

    with pytest.raises(ImproperlyConfigured):
        load_prod()

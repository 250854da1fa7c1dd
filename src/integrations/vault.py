"""Symmetric encryption of provider secrets (Fernet, key from settings)."""
from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class VaultError(ValueError):
    """A stored secret could not be decrypted (wrong key or corrupted value)."""


def get_fernet() -> Fernet:
    key = settings.ENCRYPTION_KEY
    if not key:
        raise ImproperlyConfigured("ENCRYPTION_KEY must be set to store integration secrets.")
    try:
        return Fernet(key)
    except ValueError:
        raise ImproperlyConfigured("ENCRYPTION_KEY must be a urlsafe base64-encoded 32-byte key.")


def encrypt(plaintext: str) -> str:
    return get_fernet().encrypt(plaintext.encode("utf-8")).decode("ascii")


def decrypt(token: str) -> str:
    try:
        return get_fernet().decrypt(token.encode("ascii")).decode("utf-8")
    except (InvalidToken, UnicodeError):
        raise VaultError("Secret illisible (cle de chiffrement differente ou valeur corrompue).")


def mask_secret(value: str) -> str:
    """Preview showing only the last four characters."""
    if len(value) <= 4:
        return "●" * 4
    return "●" * 8 + value[-4:]

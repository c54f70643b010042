"""Field-level encryption for provider credentials stored per tenant.

Uses Fernet symmetric encryption. Encrypted values carry an ``enc:`` prefix so
rows written before a key was configured stay readable.
"""

import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from app.settings import settings

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "enc:"


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""


class FieldCipher:
    """Encrypts and decrypts single string fields."""

    def __init__(self, key: str | None) -> None:
        self._fernet: Fernet | None = None
        if not key:
            logger.warning("No FIELD_ENCRYPTION_KEY configured - credentials stored in plaintext")
            return
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid FIELD_ENCRYPTION_KEY format: {e}")

    @property
    def is_enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        if not plaintext or self._fernet is None:
            return plaintext
        token = self._fernet.encrypt(plaintext.encode()).decode()
        return f"{ENCRYPTED_PREFIX}{token}"

    def decrypt(self, value: str) -> str:
        if not value or not value.startswith(ENCRYPTED_PREFIX):
            return value
        if self._fernet is None:
            raise EncryptionError("Cannot decrypt: encryption key not configured")
        try:
            return self._fernet.decrypt(value[len(ENCRYPTED_PREFIX):].encode()).decode()
        except InvalidToken as e:
            raise EncryptionError("Failed to decrypt: invalid token or wrong key") from e


@lru_cache
def get_field_cipher() -> FieldCipher:
    """Get the process-wide cipher built from settings."""
    return FieldCipher(settings.field_encryption_key)


def encrypt_field(value: str | None) -> str | None:
    if value is None:
        return None
    return get_field_cipher().encrypt(value)


def decrypt_field(value: str | None) -> str | None:
    if value is None:
        return None
    return get_field_cipher().decrypt(value)

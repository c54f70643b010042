"""Custom SQLAlchemy types for the application."""

from typing import Optional

from sqlalchemy import String, TypeDecorator

from app.core.encryption import decrypt_field, encrypt_field


class EncryptedString(TypeDecorator):
    """String column that is encrypted at rest.

    Usage:
        ultramsg_token = Column(EncryptedString(255), nullable=True)

    Ciphertext is longer than the plaintext, so the underlying column is
    sized at three times the requested length (minimum 512).
    """

    impl = String
    cache_ok = True

    def __init__(self, length: Optional[int] = None):
        super().__init__(max((length or 0) * 3, 512))

    def process_bind_param(self, value: Optional[str], dialect) -> Optional[str]:
        return encrypt_field(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[str]:
        return decrypt_field(value)

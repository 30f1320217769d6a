"""Provider API key encryption.

API keys are stored with Fernet symmetric encryption and only decrypted when
an outbound request is built.
"""

from cryptography.fernet import Fernet, InvalidToken

from .config import get_settings_instance
from .exceptions import EncryptionError
from .logging import get_logger

logger = get_logger(__name__)


class ApiKeyEncryptionService:
    """Service for encrypting and decrypting provider API keys."""

    def __init__(self, encryption_key: str | None = None) -> None:
        key = encryption_key or get_settings_instance().encryption_key
        if not key:
            raise EncryptionError("Encryption key not configured. Set LLMADMIN_ENCRYPTION_KEY environment variable.")

        try:
            self.fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            raise EncryptionError(f"Invalid encryption key: {e}") from e

    def encrypt(self, api_key: str) -> str:
        """Encrypt an API key for storage.

        Raises:
            EncryptionError: If the key is empty

        """
        if not api_key:
            raise EncryptionError("Cannot encrypt empty API key")
        return self.fernet.encrypt(api_key.encode()).decode()

    def decrypt(self, encrypted_key: str) -> str:
        """Decrypt a stored API key.

        Raises:
            EncryptionError: If the value was not produced with the configured key

        """
        if not encrypted_key:
            raise EncryptionError("Cannot decrypt empty API key")

        try:
            return self.fernet.decrypt(encrypted_key.encode()).decode()
        except InvalidToken as e:
            logger.error("Failed to decrypt API key: invalid token or key")
            raise EncryptionError("API key decryption failed: invalid token or key") from e


# Global encryption service instance
_encryption_service: ApiKeyEncryptionService | None = None


def get_encryption_service() -> ApiKeyEncryptionService:
    """Get the global encryption service instance."""
    global _encryption_service  # noqa: PLW0603
    if _encryption_service is None:
        _encryption_service = ApiKeyEncryptionService()
    return _encryption_service

"""Custom exceptions for the LLM admin backend.

This module defines all custom exceptions used throughout the application.
Every exception carries the HTTP status it maps to; the API layer renders
them as ``{"success": false, "error": message}``.
"""

from typing import Any


class LLMAdminException(Exception):
    """Base exception class for the LLM admin backend."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Generic Exceptions
class NotFoundError(LLMAdminException):
    """Generic exception for when a resource is not found."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details,
        )


class ConflictError(LLMAdminException):
    """Generic exception for when a resource conflict occurs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=409,
            details=details,
        )


class ValidationError(LLMAdminException):
    """Raised when input validation fails.

    The message is shown to the caller verbatim.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


class EntityNotFoundError(NotFoundError):
    """Raised when a well-formed uid does not resolve to an entity."""

    def __init__(self, kind: str, uid: int | str | None = None):
        super().__init__(
            message=f"{kind.capitalize()} not found",
            details={"kind": kind, "uid": uid} if uid is not None else {"kind": kind},
        )


class DuplicateIdentifierError(ConflictError):
    """Raised when an identifier is already taken within a collection."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(
            message=f"{kind.capitalize()} identifier '{identifier}' is already in use",
            details={"kind": kind, "identifier": identifier},
        )


# Database Exceptions
class DatabaseConnectionError(LLMAdminException):
    """Raised when the database cannot be reached."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Database connection error: {reason}",
            error_code="DATABASE_CONNECTION_ERROR",
            status_code=503,
            details=details or {"reason": reason},
        )


class DatabaseSessionError(LLMAdminException):
    """Raised when a session or transaction fails."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"Database session error: {reason}",
            error_code="DATABASE_SESSION_ERROR",
            status_code=500,
            details=details or {"reason": reason},
        )


class EncryptionError(LLMAdminException):
    """Raised when a provider API key cannot be encrypted or decrypted."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="ENCRYPTION_ERROR",
            status_code=500,
            details=details,
        )


# LLM-specific exceptions
class LLMError(LLMAdminException):
    """Base exception for LLM-related errors."""

    pass


class LLMProviderError(LLMError):
    """Exception raised when LLM provider operations fail."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=f"LLM provider error: {message}",
            error_code="LLM_PROVIDER_ERROR",
            status_code=500,
            details=details,
        )


class LLMConfigurationError(LLMError):
    """Exception raised when a provider, model or configuration is unusable."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="LLM_CONFIGURATION_ERROR",
            status_code=400,
            details=details,
        )


class LLMAuthenticationError(LLMError):
    """Exception raised when provider authentication fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="LLM_AUTHENTICATION_ERROR",
            status_code=401,
            details=details,
        )


class LLMRateLimitError(LLMError):
    """Exception raised when provider rate limits are exceeded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="LLM_RATE_LIMIT_ERROR",
            status_code=429,
            details=details,
        )


class LLMTimeoutError(LLMError):
    """Exception raised when a provider request times out."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="LLM_TIMEOUT_ERROR",
            status_code=504,
            details=details,
        )

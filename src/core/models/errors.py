"""Custom exception classes for the profile media service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_CONFIGURATION_INVALID,
    ERROR_CODE_IMAGE_DECODE_FAILED,
    ERROR_CODE_IMAGE_SIZE_CEILING_UNREACHABLE,
    ERROR_CODE_RECORD_FETCH_FAILED,
    ERROR_CODE_RECORD_STORE,
    ERROR_CODE_RECORD_UPDATE_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_STORAGE_DELETE_FAILED,
    ERROR_CODE_STORAGE_TIMEOUT,
    ERROR_CODE_STORAGE_WRITE_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
)


class ProfileMediaError(Exception):
    """
    Base exception for all profile media errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ProfileMediaError):
    """Raised when input is missing, empty or of an unsupported type."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class NotFoundError(ProfileMediaError):
    """Raised when the owner record does not exist."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class DecodeError(ProfileMediaError):
    """Raised when the uploaded bytes cannot be read as an image."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_DECODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class EncodingError(ProfileMediaError):
    """Raised when no encoding meets the size ceiling.

    `achieved_size` is the smallest size (in bytes) reached before giving up,
    or None when no attempt completed.
    """

    achieved_size: int | None

    def __init__(
        self,
        *,
        message: str,
        achieved_size: int | None = None,
        error_code: str = ERROR_CODE_IMAGE_SIZE_CEILING_UNREACHABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.achieved_size = achieved_size
        merged = {"achieved_size": achieved_size, **(details or {})}
        super().__init__(message=message, error_code=error_code, details=merged)


class StorageError(ProfileMediaError):
    """Raised when a storage backend operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageWriteError(StorageError):
    """Raised when an object cannot be written."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_WRITE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageTimeoutError(StorageWriteError):
    """Raised when the storage backend does not answer in time."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_TIMEOUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class StorageDeleteError(StorageError):
    """Raised when an object cannot be deleted."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_DELETE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RecordStoreError(ProfileMediaError):
    """Raised when a profile record operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RECORD_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RecordFetchError(RecordStoreError):
    """Raised when the current profile record cannot be read."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RECORD_FETCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class RecordUpdateError(RecordStoreError):
    """Raised when the profile record cannot be pointed at a new key."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RECORD_UPDATE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


class ConfigurationError(ProfileMediaError):
    """Raised at startup when required configuration is missing or invalid."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONFIGURATION_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)

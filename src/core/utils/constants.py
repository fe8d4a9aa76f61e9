"""Global constants used throughout the application.

This module centralizes the magic numbers, string literals and environment
variable names shared across modules. The encoder thresholds in particular
are part of the storage contract: changing them changes which images fit.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_EMPTY_PAYLOAD = "EMPTY_PAYLOAD"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Image Processing Errors
ERROR_CODE_IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
ERROR_CODE_IMAGE_SIZE_CEILING_UNREACHABLE = "IMAGE_SIZE_CEILING_UNREACHABLE"
ERROR_CODE_IMAGE_ENCODING_TIMEOUT = "IMAGE_ENCODING_TIMEOUT"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
ERROR_CODE_STORAGE_DELETE_FAILED = "STORAGE_DELETE_FAILED"
ERROR_CODE_STORAGE_TIMEOUT = "STORAGE_TIMEOUT"
ERROR_CODE_STORAGE_INVALID_KEY = "STORAGE_INVALID_KEY"

# Record Store Errors
ERROR_CODE_RECORD_STORE = "RECORD_STORE_ERROR"
ERROR_CODE_RECORD_FETCH_FAILED = "RECORD_FETCH_FAILED"
ERROR_CODE_RECORD_UPDATE_FAILED = "RECORD_UPDATE_FAILED"

# Configuration
ERROR_CODE_CONFIGURATION_INVALID = "CONFIGURATION_INVALID"


# ============================================================================
# Upload Constraints
# ============================================================================

MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB in bytes, before re-encoding

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset({"image/jpeg", "image/png"})

USER_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


# ============================================================================
# Encoder Parameters
# ============================================================================

SIZE_CEILING: Final[int] = 10 * 1024  # 10KB hard limit on the stored artifact
INITIAL_QUALITY: Final[int] = 80
INITIAL_WIDTH: Final[int] = 200
MIN_QUALITY: Final[int] = 10
QUALITY_STEP: Final[int] = 10

# Low-resolution regime, entered at most once
REGIME_SWITCH_QUALITY: Final[int] = 30
REDUCED_WIDTH: Final[int] = 100
REDUCED_WIDTH_QUALITY: Final[int] = 60

# Last resort after the search loop
FORCED_WIDTH: Final[int] = 80
FORCED_QUALITY: Final[int] = 10

ENCODED_CONTENT_TYPE: Final[str] = "image/jpeg"


# ============================================================================
# Object Keys & Storage
# ============================================================================

PROFILE_IMAGE_KEY_PREFIX: Final[str] = "pp"
PROFILE_IMAGE_KEY_EXTENSION: Final[str] = "jpg"
KEY_SUFFIX_UPPER_BOUND: Final[int] = 10000
FALLBACK_KEY_LABEL: Final[str] = "user"

CACHE_CONTROL_LONG_LIVED: Final[str] = "max-age=31536000"  # 1 year

STORAGE_MODE_LOCAL: Final[str] = "local"
STORAGE_MODE_REMOTE: Final[str] = "remote"


# ============================================================================
# Timeouts
# ============================================================================

DEFAULT_UPLOAD_TIMEOUT_SECONDS: Final[float] = 10.0
DEFAULT_STORAGE_TIMEOUT_SECONDS: Final[float] = 5.0


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
DEFAULT_CONTENT_TYPE = "application/json"

METRIC_PROFILE_IMAGE_UPLOADED = "ProfileImageUploaded"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_AWS_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_AWS_REGION = "AWS_REGION"
ENV_AWS_BUCKET_NAME = "AWS_BUCKET_NAME"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_LOCAL_STORAGE_ROOT = "LOCAL_STORAGE_ROOT"
ENV_MEDIA_BASE_URL = "MEDIA_BASE_URL"
ENV_PROFILE_TABLE_NAME = "PROFILE_TABLE_NAME"
ENV_UPLOAD_TIMEOUT_SECONDS = "UPLOAD_TIMEOUT_SECONDS"
ENV_STORAGE_TIMEOUT_SECONDS = "STORAGE_TIMEOUT_SECONDS"

DEFAULT_LOCAL_STORAGE_ROOT = "uploads"
DEFAULT_PROFILE_TABLE_NAME = "profiles"


# ============================================================================
# Helper Functions
# ============================================================================


def get_max_upload_size_mb() -> int:
    """Get maximum upload size in megabytes."""
    return MAX_UPLOAD_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} TB"

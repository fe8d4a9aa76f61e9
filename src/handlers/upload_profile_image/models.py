"""Pydantic models for profile image upload request/response."""

import base64
import binascii
from typing import Literal

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.utils.constants import MAX_UPLOAD_SIZE, USER_ID_PATTERN, get_max_upload_size_mb
from core.utils.mime import detect_mime_type

logger = Logger(UTC=True)


class ProfileImageUploadRequest(BaseModel):
    """Validation model for profile image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    user_id: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=USER_ID_PATTERN,
        description="User identifier (alphanumeric, underscore, hyphen)",
    )
    display_name: str = Field(
        ..., min_length=1, max_length=100, description="Display name, used in the object key"
    )
    content_type: Literal["image/jpeg", "image/png"] = Field(
        ..., description="Declared MIME type of the upload"
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must not exceed MAX_UPLOAD_SIZE once decoded
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = base64.b64decode(value, validate=True)
        except binascii.Error as e:
            logger.error(f"File validation error: Invalid base64 - {e}")
            raise ValueError("Invalid base64 encoded file") from e

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_UPLOAD_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(f"File size exceeds {get_max_upload_size_mb()}MB limit")

        return value

    @model_validator(mode="after")
    def validate_signature(self) -> "ProfileImageUploadRequest":
        """The file's magic bytes must agree with the declared content type."""
        try:
            detected = detect_mime_type(self.file_data)
        except ValueError as e:
            raise ValueError("File is not a JPEG or PNG image") from e

        if detected != self.content_type:
            raise ValueError(
                f"File content ({detected}) does not match content_type ({self.content_type})"
            )
        return self

    @property
    def file_data(self) -> bytes:
        return base64.b64decode(self.file)


class ProfileImageUploadResponse(BaseModel):
    """Response model for successful profile image upload."""

    user_id: str = Field(..., description="User ID")
    profile_image_key: str = Field(..., description="Object key of the new image")
    profile_image_url: str | None = Field(None, description="Public URL of the new image")
    storage_mode: str = Field(..., description="Active storage backend (local or remote)")
    message: str = Field(..., description="Success message")

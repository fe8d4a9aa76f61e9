"""Shared profile image models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from core.utils.constants import (
    ENCODED_CONTENT_TYPE,
    STORAGE_MODE_LOCAL,
    STORAGE_MODE_REMOTE,
)


class StorageMode(str, Enum):
    """Which storage backend is active for the process."""

    LOCAL = STORAGE_MODE_LOCAL
    REMOTE = STORAGE_MODE_REMOTE


class EncodingAttempt(BaseModel):
    """One step of the size-bounded search. Never persisted."""

    model_config = ConfigDict(frozen=True)

    quality: StrictInt = Field(..., description="JPEG quality used")
    width: StrictInt = Field(..., description="Square output width in pixels")
    size: StrictInt = Field(..., description="Encoded size in bytes")


class EncodingResult(BaseModel):
    """Encoded bytes plus the attempts that led to them."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="Encoded JPEG bytes")
    attempts: tuple[EncodingAttempt, ...] = Field(..., description="Search trace")

    @property
    def final_attempt(self) -> EncodingAttempt:
        return self.attempts[-1]

    @property
    def width_reduced(self) -> bool:
        """True when the search left the initial resolution."""
        return any(a.width < self.attempts[0].width for a in self.attempts)


class ImageAsset(BaseModel):
    """A stored profile image, identified only by its object key."""

    key: StrictStr = Field(..., description="Backend-agnostic object key")
    content_type: StrictStr = Field(ENCODED_CONTENT_TYPE, description="Stored MIME type")
    url: StrictStr | None = Field(None, description="Public URL resolved from the key")


class ProfileRecord(BaseModel):
    """The slice of a user record this service reads and writes."""

    user_id: StrictStr = Field(..., description="Owner user identifier")
    name: StrictStr | None = Field(None, description="Display name")
    profile_image_key: StrictStr | None = Field(None, description="Current image key")
    updated_at: StrictStr | None = Field(None, description="ISO-8601 last update timestamp (UTC)")

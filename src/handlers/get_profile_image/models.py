"""Pydantic models for the profile view request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import USER_ID_PATTERN


class GetProfileImageRequest(BaseModel):
    """Validation model for get profile image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: StrictStr = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=USER_ID_PATTERN,
        description="User whose profile image is requested",
    )


class ProfileImageResponse(BaseModel):
    """Current profile image of a user."""

    user_id: str = Field(..., description="User ID")
    name: str | None = Field(None, description="Display name")
    profile_image_key: str | None = Field(None, description="Object key of the current image")
    profile_image_url: str | None = Field(None, description="Public URL of the current image")
    storage_mode: str = Field(..., description="Active storage backend (local or remote)")

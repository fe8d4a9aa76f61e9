"""Process-wide configuration, resolved once at startup.

`MediaSettings.from_env()` is the only place environment variables are read.
The resulting object is immutable and is passed explicitly to the factory and
the services that need it.
"""

from collections.abc import Mapping
import os

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ConfigurationError
from core.models.image import StorageMode
from core.utils.constants import (
    DEFAULT_LOCAL_STORAGE_ROOT,
    DEFAULT_PROFILE_TABLE_NAME,
    DEFAULT_STORAGE_TIMEOUT_SECONDS,
    DEFAULT_UPLOAD_TIMEOUT_SECONDS,
    ENV_AWS_ACCESS_KEY_ID,
    ENV_AWS_BUCKET_NAME,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_AWS_SECRET_ACCESS_KEY,
    ENV_LOCAL_STORAGE_ROOT,
    ENV_MEDIA_BASE_URL,
    ENV_PROFILE_TABLE_NAME,
    ENV_STORAGE_TIMEOUT_SECONDS,
    ENV_UPLOAD_TIMEOUT_SECONDS,
    INITIAL_QUALITY,
    INITIAL_WIDTH,
    SIZE_CEILING,
)


class MediaSettings(BaseModel):
    """Immutable configuration for storage, encoding and record access."""

    model_config = ConfigDict(frozen=True)

    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str | None = None
    aws_bucket_name: str | None = None
    aws_endpoint_url: str | None = None

    local_storage_root: str = DEFAULT_LOCAL_STORAGE_ROOT
    media_base_url: str = Field(..., min_length=1)
    profile_table_name: str = DEFAULT_PROFILE_TABLE_NAME

    size_ceiling: PositiveInt = SIZE_CEILING
    initial_quality: PositiveInt = INITIAL_QUALITY
    initial_width: PositiveInt = INITIAL_WIDTH

    upload_timeout_seconds: PositiveFloat = DEFAULT_UPLOAD_TIMEOUT_SECONDS
    storage_timeout_seconds: PositiveFloat = DEFAULT_STORAGE_TIMEOUT_SECONDS

    @property
    def _remote_values(self) -> dict[str, str | None]:
        return {
            ENV_AWS_ACCESS_KEY_ID: self.aws_access_key_id,
            ENV_AWS_SECRET_ACCESS_KEY: self.aws_secret_access_key,
            ENV_AWS_REGION: self.aws_region,
            ENV_AWS_BUCKET_NAME: self.aws_bucket_name,
        }

    @property
    def missing_remote_settings(self) -> list[str]:
        """Names of remote storage variables that are not set."""
        return [name for name, value in self._remote_values.items() if not value]

    @property
    def remote_configured(self) -> bool:
        return not self.missing_remote_settings

    @property
    def remote_partially_configured(self) -> bool:
        """Some, but not all, remote storage variables are set."""
        missing = len(self.missing_remote_settings)
        return 0 < missing < len(self._remote_values)

    @property
    def storage_mode(self) -> StorageMode:
        return StorageMode.REMOTE if self.remote_configured else StorageMode.LOCAL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MediaSettings":
        """Build settings from environment variables.

        Empty strings are treated as unset.

        Raises:
            ConfigurationError: If MEDIA_BASE_URL is missing or a numeric
                value cannot be parsed
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        values: dict[str, object] = {
            "aws_access_key_id": read(ENV_AWS_ACCESS_KEY_ID),
            "aws_secret_access_key": read(ENV_AWS_SECRET_ACCESS_KEY),
            "aws_region": read(ENV_AWS_REGION),
            "aws_bucket_name": read(ENV_AWS_BUCKET_NAME),
            "aws_endpoint_url": read(ENV_AWS_ENDPOINT_URL),
        }

        media_base_url = read(ENV_MEDIA_BASE_URL)
        if not media_base_url:
            raise ConfigurationError(
                message=f"{ENV_MEDIA_BASE_URL} environment variable is not set",
                details={"missing": [ENV_MEDIA_BASE_URL]},
            )
        values["media_base_url"] = media_base_url.rstrip("/")

        optional: dict[str, str] = {
            "local_storage_root": ENV_LOCAL_STORAGE_ROOT,
            "profile_table_name": ENV_PROFILE_TABLE_NAME,
            "upload_timeout_seconds": ENV_UPLOAD_TIMEOUT_SECONDS,
            "storage_timeout_seconds": ENV_STORAGE_TIMEOUT_SECONDS,
        }
        for field_name, env_name in optional.items():
            value = read(env_name)
            if value is not None:
                values[field_name] = value

        try:
            return cls.model_validate(values)
        except PydanticValidationError as exc:
            raise ConfigurationError(
                message="Invalid media service configuration",
                details={
                    "errors": [
                        {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                        for err in exc.errors()
                    ]
                },
            ) from exc

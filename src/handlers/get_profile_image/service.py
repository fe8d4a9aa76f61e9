"""Business logic for the profile view.

Resolves an owner's current profile image key into a public URL. The URL is
always built from the configured media base URL, so it does not depend on
which backend stored the object.
"""

from aws_lambda_powertools import Logger

from core.bootstrap import Dependencies
from core.models.errors import NotFoundError
from core.models.image import ImageAsset, ProfileRecord, StorageMode
from core.repositories.profile_repository import ProfileRecordRepository
from core.repositories.storage_repository import StorageBackend

logger = Logger(UTC=True)


class ProfileImageQueryService:
    """Application service responsible for reading the current profile image."""

    def __init__(self, *, storage: StorageBackend, records: ProfileRecordRepository) -> None:
        self.storage = storage
        self.records = records

    @classmethod
    def from_dependencies(cls, deps: Dependencies) -> "ProfileImageQueryService":
        return cls(storage=deps.storage, records=deps.records)

    @property
    def storage_mode(self) -> StorageMode:
        return self.storage.mode

    def get_profile(self, *, owner_id: str) -> ProfileRecord:
        """Fetch the owner's record.

        Raises:
            NotFoundError: If the owner does not exist
            RecordFetchError: If the read fails
        """
        record = self.records.fetch_profile(owner_id=owner_id)

        if record is None:
            logger.warning("Profile not found", extra={"user_id": owner_id})
            raise NotFoundError(
                message="User not found",
                details={"user_id": owner_id},
            )

        return record

    def current_image(self, *, owner_id: str) -> ImageAsset | None:
        """Return the owner's current image, or None if they have none."""
        record = self.get_profile(owner_id=owner_id)

        if not record.profile_image_key:
            return None

        return ImageAsset(
            key=record.profile_image_key,
            url=self.storage.url_for(record.profile_image_key),
        )

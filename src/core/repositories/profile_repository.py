"""Abstract contract for the user record that owns the current image key."""

from abc import ABC, abstractmethod

from core.models.errors import NotFoundError
from core.models.image import ProfileRecord


class ProfileRecordRepository(ABC):
    """Contract for reading and swapping an owner's current image key.

    Implementations could be DynamoDB, PostgreSQL, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def fetch_profile(self, *, owner_id: str) -> ProfileRecord | None:
        """Fetch the owner's record.

        Returns:
            The record, or None if the owner does not exist

        Raises:
            RecordFetchError: If the read fails
        """

    def get_current_key(self, *, owner_id: str) -> str | None:
        """Return the owner's current image key.

        Raises:
            NotFoundError: If the owner does not exist
            RecordFetchError: If the read fails
        """
        record = self.fetch_profile(owner_id=owner_id)
        if record is None:
            raise NotFoundError(
                message="User not found",
                details={"user_id": owner_id},
            )
        return record.profile_image_key

    @abstractmethod
    def set_current_key(self, *, owner_id: str, key: str) -> None:
        """Point the owner's record at key.

        Raises:
            RecordUpdateError: If the update fails
        """

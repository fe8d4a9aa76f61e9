"""Abstract contract for profile image storage."""

from abc import ABC, abstractmethod

from core.models.image import StorageMode


class StorageBackend(ABC):
    """Contract for storing and retiring image objects by key.

    Implementations could be S3, local disk, etc.
    Services depend on this interface, not the implementation. Keys are
    produced by the caller and are the same whichever backend stores them.
    """

    mode: StorageMode

    def __init__(self, *, media_base_url: str) -> None:
        self._media_base_url = media_base_url.rstrip("/")

    @abstractmethod
    def put(self, *, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key and return the key.

        Args:
            key: Object key, e.g. 'pp/alice-42.jpg'
            data: Binary content
            content_type: MIME type (e.g., 'image/jpeg')

        Returns:
            The key the object was stored under

        Raises:
            StorageWriteError: If the write fails
            StorageTimeoutError: If the backend does not answer in time
        """

    @abstractmethod
    def delete(self, *, key: str) -> None:
        """Delete the object stored under key.

        Deleting a key that was never written succeeds.

        Raises:
            StorageDeleteError: If deletion fails
        """

    def url_for(self, key: str | None) -> str | None:
        """Return the public URL for key, or None when there is no key."""
        if not key:
            return None
        return f"{self._media_base_url}/{key.lstrip('/')}"

"""Business logic for profile image ingestion.

This module coordinates validation, size-bounded encoding, storage and the
record update for a profile image upload, then retires the image it replaced.
The object-store write and the record update are independent steps: if the
record update fails after a successful write, the new object is left orphaned.
"""

from aws_lambda_powertools import Logger

from core.bootstrap import Dependencies
from core.imaging.encoder import SizeBoundedEncoder
from core.models.errors import (
    RecordUpdateError,
    StorageWriteError,
    ValidationError,
)
from core.models.image import StorageMode
from core.repositories.profile_repository import ProfileRecordRepository
from core.repositories.storage_repository import StorageBackend
from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    ENCODED_CONTENT_TYPE,
    ERROR_CODE_EMPTY_PAYLOAD,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    MAX_UPLOAD_SIZE,
)
from core.utils.keys import AssetKeyGenerator
from core.utils.time import deadline_after

logger = Logger(UTC=True)


class ProfileImageIngestionService:
    """Application service responsible for profile image uploads.

    This service orchestrates:
    - Input validation (before any I/O)
    - Reading the owner's current key
    - Re-encoding under the size ceiling
    - Writing the new object and pointing the record at it
    - Best-effort deletion of the previous object

    It holds no per-request state and can be shared across threads.
    """

    def __init__(
        self,
        *,
        encoder: SizeBoundedEncoder,
        storage: StorageBackend,
        records: ProfileRecordRepository,
        key_generator: AssetKeyGenerator | None = None,
        upload_timeout_seconds: float | None = None,
    ) -> None:
        self.encoder = encoder
        self.storage = storage
        self.records = records
        self.key_generator = key_generator or AssetKeyGenerator()
        self.upload_timeout_seconds = upload_timeout_seconds

    @classmethod
    def from_dependencies(cls, deps: Dependencies) -> "ProfileImageIngestionService":
        return cls(
            encoder=SizeBoundedEncoder.from_settings(deps.settings),
            storage=deps.storage,
            records=deps.records,
            upload_timeout_seconds=deps.settings.upload_timeout_seconds,
        )

    @property
    def storage_mode(self) -> StorageMode:
        return self.storage.mode

    @staticmethod
    def validate_upload(
        *,
        owner_id: str,
        raw_bytes: bytes | None,
        content_type: str | None = None,
    ) -> bytes:
        """Reject uploads that cannot succeed and return the payload.

        Raises:
            ValidationError: If the owner id is blank, the payload is empty or
                too large, or the content type is not JPEG/PNG
        """
        if not owner_id or not owner_id.strip():
            raise ValidationError(message="User id is required")

        if not raw_bytes:
            raise ValidationError(
                message="No image file provided",
                error_code=ERROR_CODE_EMPTY_PAYLOAD,
            )

        if len(raw_bytes) > MAX_UPLOAD_SIZE:
            raise ValidationError(
                message="Image file is too large",
                error_code=ERROR_CODE_FILE_SIZE_EXCEEDED,
                details={"size": len(raw_bytes), "max_size": MAX_UPLOAD_SIZE},
            )

        if content_type is not None and content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message="Unsupported image type",
                error_code=ERROR_CODE_UNSUPPORTED_MIME_TYPE,
                details={"content_type": content_type},
            )

        return raw_bytes

    def ingest(
        self,
        *,
        owner_id: str,
        owner_label: str,
        raw_bytes: bytes | None,
        content_type: str | None = None,
    ) -> str:
        """Store a new profile image and make it the owner's current one.

        The ingestion flow is:
        1. Validate the input
        2. Read the owner's current key
        3. Encode under the size ceiling
        4. Write the encoded bytes under a fresh key
        5. Point the owner's record at the new key
        6. Delete the previous object (failures are logged, not raised)

        Args:
            owner_id: Owner user identifier
            owner_label: Display label used to make the key readable
            raw_bytes: Uploaded image bytes
            content_type: Declared MIME type, if the caller has one

        Returns:
            The new object key

        Raises:
            ValidationError: If the input is rejected
            NotFoundError: If the owner does not exist
            RecordFetchError: If the current key cannot be read
            DecodeError: If the bytes are not a readable image
            EncodingError: If the size ceiling cannot be met in time
            StorageWriteError: If the write fails (record untouched)
            RecordUpdateError: If the record update fails (new object orphaned)
        """
        raw_bytes = self.validate_upload(
            owner_id=owner_id, raw_bytes=raw_bytes, content_type=content_type
        )

        logger.debug(
            "Starting profile image ingestion",
            extra={"user_id": owner_id, "size": len(raw_bytes)},
        )

        deadline = (
            deadline_after(self.upload_timeout_seconds)
            if self.upload_timeout_seconds is not None
            else None
        )

        # Step 1: Read the current key before anything is mutated
        previous_key = self.records.get_current_key(owner_id=owner_id)

        # Step 2: Encode (no side effects on failure)
        result = self.encoder.encode_with_attempts(raw_bytes, deadline=deadline)
        logger.info(
            "Profile image encoded",
            extra={
                "user_id": owner_id,
                "original_size": len(raw_bytes),
                "encoded_size": len(result.data),
                "attempts": len(result.attempts),
                "width": result.final_attempt.width,
                "quality": result.final_attempt.quality,
            },
        )

        # Step 3: Write the new object
        new_key = self.key_generator.generate_key(owner_label)
        try:
            self.storage.put(key=new_key, data=result.data, content_type=ENCODED_CONTENT_TYPE)
        except StorageWriteError:
            raise
        except Exception as exc:
            logger.exception("Image upload to storage failed", extra={"key": new_key})
            raise StorageWriteError(
                message="Unable to upload image",
                details={"key": new_key},
            ) from exc

        # Step 4: Make it current
        try:
            self.records.set_current_key(owner_id=owner_id, key=new_key)
        except Exception as exc:
            logger.exception(
                "Failed to update profile record, stored image is orphaned",
                extra={"user_id": owner_id, "orphaned_key": new_key},
            )
            if isinstance(exc, RecordUpdateError):
                raise
            raise RecordUpdateError(
                message="Unable to update user profile",
                details={"user_id": owner_id},
            ) from exc

        # Step 5: Retire the previous object
        if previous_key and previous_key != new_key:
            self._retire(previous_key, owner_id=owner_id)

        logger.info(
            "Profile image ingested",
            extra={"user_id": owner_id, "key": new_key, "storage_mode": self.storage_mode.value},
        )
        return new_key

    def _retire(self, key: str, *, owner_id: str) -> None:
        """Delete a superseded object; the new key is already authoritative."""
        try:
            self.storage.delete(key=key)
        except Exception:
            logger.warning(
                "Failed to delete previous profile image",
                extra={"user_id": owner_id, "orphaned_key": key},
                exc_info=True,
            )

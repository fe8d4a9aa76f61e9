"""S3-backed implementation of StorageBackend."""

from aws_lambda_powertools import Logger
from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from core.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from core.models.errors import (
    StorageDeleteError,
    StorageTimeoutError,
    StorageWriteError,
)
from core.models.image import StorageMode
from core.repositories.storage_repository import StorageBackend
from core.utils.constants import CACHE_CONTROL_LONG_LIVED

logger = Logger(UTC=True)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3ImageStorage(StorageBackend):
    """Image storage implementation backed by Amazon S3.

    All botocore errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    mode = StorageMode.REMOTE

    def __init__(self, adapter: S3AdapterProtocol, *, media_base_url: str) -> None:
        """Create storage using the provided S3 adapter."""
        super().__init__(media_base_url=media_base_url)
        self._s3 = adapter

    def put(self, *, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes to S3 with a long-lived Cache-Control header."""
        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                cache_control=CACHE_CONTROL_LONG_LIVED,
            )
            logger.info("Image uploaded successfully", extra={"key": key})
            return key

        except (ConnectTimeoutError, ReadTimeoutError) as exc:
            logger.error("S3 upload timed out", extra={"key": key})
            raise StorageTimeoutError(
                message="Image storage did not respond in time",
                details={"key": key},
            ) from exc

        except ClientError as exc:
            logger.error(
                "S3 upload failed",
                extra={"key": key, "error_code": exc.response.get("Error", {}).get("Code")},
            )
            raise StorageWriteError(
                message="Unable to upload image at this time",
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise StorageWriteError(
                message="Unable to upload image at this time",
                details={"key": key},
            ) from exc

    def delete(self, *, key: str) -> None:
        """Delete an image object from S3; absent keys succeed."""
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in _MISSING_KEY_CODES:
                logger.debug("Image already absent from S3", extra={"key": key})
                return

            logger.error("S3 deletion failed", extra={"key": key, "error_code": code})
            raise StorageDeleteError(
                message="Unable to delete image at this time",
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageDeleteError(
                message="Unable to delete image at this time",
                details={"key": key},
            ) from exc

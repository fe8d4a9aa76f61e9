"""Storage backend factory: creates the local or S3 backend from settings."""

from aws_lambda_powertools import Logger

from core.config import MediaSettings
from core.infrastructure.storage.local_storage import LocalFileStorage
from core.models.image import StorageMode
from core.repositories.storage_repository import StorageBackend

logger = Logger(UTC=True)


def create_storage_backend(settings: MediaSettings) -> StorageBackend:
    """Create the storage backend for the resolved storage mode.

    The S3 client is only constructed when every remote setting is present.
    A partial remote configuration falls back to local storage and is logged
    as a warning with the names of the missing settings.

    Args:
        settings: Application settings, resolved once at startup

    Returns:
        LocalFileStorage or S3ImageStorage
    """
    if settings.storage_mode is StorageMode.REMOTE:
        # Imported here so local-only deployments never build a boto3 client
        from core.infrastructure.adapters.s3_adapter import S3Adapter
        from core.infrastructure.aws.s3_image_storage import S3ImageStorage

        logger.info(
            "Using remote object storage",
            extra={"storage_mode": settings.storage_mode.value, "bucket": settings.aws_bucket_name},
        )
        return S3ImageStorage(
            S3Adapter.from_settings(settings),
            media_base_url=settings.media_base_url,
        )

    if settings.remote_partially_configured:
        logger.warning(
            "Partial remote storage configuration detected, using local storage instead",
            extra={
                "storage_mode": settings.storage_mode.value,
                "missing": settings.missing_remote_settings,
            },
        )
    else:
        logger.info(
            "Remote storage not configured, using local storage",
            extra={"storage_mode": settings.storage_mode.value},
        )

    return LocalFileStorage(
        root=settings.local_storage_root,
        media_base_url=settings.media_base_url,
    )

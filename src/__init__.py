"""Profile Media Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Profile image ingestion: size-bounded JPEG encoding with local or S3 storage"
)

__all__ = ["handlers", "core"]

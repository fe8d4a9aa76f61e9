"""Filesystem-backed implementation of StorageBackend."""

import os
from pathlib import Path
import tempfile

from aws_lambda_powertools import Logger

from core.models.errors import StorageDeleteError, StorageWriteError
from core.models.image import StorageMode
from core.repositories.storage_repository import StorageBackend
from core.utils.constants import ERROR_CODE_STORAGE_INVALID_KEY

logger = Logger(UTC=True)


class LocalFileStorage(StorageBackend):
    """Stores objects as files under a root directory.

    Keys map to relative paths (``pp/alice-42.jpg`` becomes
    ``<root>/pp/alice-42.jpg``). Writes go to a temp file in the target
    directory and are renamed into place, so readers never see a partial file.
    """

    mode = StorageMode.LOCAL

    def __init__(self, *, root: str | Path, media_base_url: str) -> None:
        super().__init__(media_base_url=media_base_url)
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Path | None:
        """Resolve key under root, or None if it escapes the root."""
        path = (self.root / key).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            return None
        if path == self.root:
            return None
        return path

    def put(self, *, key: str, data: bytes, content_type: str) -> str:
        """Write bytes to <root>/<key>, creating parent directories."""
        path = self._path_for(key)
        if path is None:
            logger.error("Rejected storage key outside root", extra={"key": key})
            raise StorageWriteError(
                message="Invalid storage key",
                error_code=ERROR_CODE_STORAGE_INVALID_KEY,
                details={"key": key},
            )

        logger.debug(
            "Writing image to local storage",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=path.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                # mkstemp creates 0600; the media server reads these as another user
                os.chmod(temp_path, 0o644)
                os.replace(temp_path, path)
            except BaseException:
                Path(temp_path).unlink(missing_ok=True)
                raise

        except OSError as exc:
            logger.exception("Local storage write failed", extra={"key": key})
            raise StorageWriteError(
                message="Unable to store image at this time",
                details={"key": key},
            ) from exc

        logger.info("Image stored locally", extra={"key": key, "size": len(data)})
        return key

    def delete(self, *, key: str) -> None:
        """Remove <root>/<key>; a missing file is not an error."""
        path = self._path_for(key)
        if path is None:
            logger.error("Rejected storage key outside root", extra={"key": key})
            raise StorageDeleteError(
                message="Invalid storage key",
                error_code=ERROR_CODE_STORAGE_INVALID_KEY,
                details={"key": key},
            )

        try:
            path.unlink()
            logger.info("Image deleted from local storage", extra={"key": key})

        except FileNotFoundError:
            logger.debug("Image already absent from local storage", extra={"key": key})

        except OSError as exc:
            logger.exception("Local storage delete failed", extra={"key": key})
            raise StorageDeleteError(
                message="Unable to delete image at this time",
                details={"key": key},
            ) from exc

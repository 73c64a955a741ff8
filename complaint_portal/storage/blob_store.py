"""
Blob storage abstraction.

Services depend on the ``BlobStore`` protocol; the filesystem store is the
default backend and serves files back through the files endpoint.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from complaint_portal.config.settings import settings
from complaint_portal.core.exceptions import (
    ErrorCode,
    FileValidationError,
    ResourceNotFoundError,
)
from complaint_portal.core.logging import get_logger
from complaint_portal.utils.file_handler import (
    FileHandlerError,
    build_blob_key,
    validate_file_extension,
    validate_file_size,
)

logger = get_logger(__name__)


@dataclass
class UploadedFile:
    """An uploaded file read into memory."""

    filename: str
    data: bytes
    content_type: Optional[str] = None

    @classmethod
    def read_from(
        cls,
        filename: str,
        stream: BinaryIO,
        content_type: Optional[str] = None,
        max_size: Optional[int] = None,
    ) -> "UploadedFile":
        """
        Read an upload stream, stopping one byte past ``max_size``.

        Raises:
            FileValidationError: when the stream is larger than ``max_size``
        """
        limit = settings.MAX_UPLOAD_SIZE if max_size is None else max_size
        data = stream.read(limit + 1)
        if len(data) > limit:
            raise FileValidationError(
                f"File must be between 1 byte and {limit} bytes",
                ErrorCode.FILE_TOO_LARGE,
            )
        return cls(filename=filename, data=data, content_type=content_type)


class BlobStore(Protocol):
    """
    Storage for uploaded binary objects addressed by key.
    """

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...

    def open(self, key: str) -> Path:
        """Return a local path for reading the object."""
        ...

    def delete(self, key: str) -> bool:
        """Remove the object; False when it did not exist."""
        ...

    def key_from_url(self, url: str) -> Optional[str]:
        """Reverse of the URL returned by ``save``; None for foreign URLs."""
        ...


class LocalBlobStore:
    """Filesystem-backed blob store rooted at ``UPLOAD_DIR``."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if path == self.root or self.root not in path.parents:
            raise FileValidationError("Invalid storage key", ErrorCode.INVALID_FORMAT)
        return path

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Stored blob {key} ({len(data)} bytes, {content_type or 'unknown type'})")
        return self.url_for(key)

    def open(self, key: str) -> Path:
        path = self._path_for(key)
        if not path.is_file():
            raise ResourceNotFoundError("File", key)
        return path

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.is_file():
            return False
        path.unlink()
        logger.info(f"Deleted blob {key}")
        return True

    def key_from_url(self, url: str) -> Optional[str]:
        prefix = f"{self.base_url}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None


def store_image(
    store: BlobStore,
    prefix: str,
    owner_id: str,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> str:
    """
    Validate an uploaded image and store it under ``prefix/owner_id``.

    Raises:
        FileValidationError: on a bad name, extension or size
    """
    if not validate_file_size(len(data), settings.MAX_UPLOAD_SIZE):
        raise FileValidationError(
            f"File must be between 1 byte and {settings.MAX_UPLOAD_SIZE} bytes",
            ErrorCode.FILE_TOO_LARGE,
        )
    if not validate_file_extension(filename, settings.allowed_extensions):
        allowed = ", ".join(sorted(settings.allowed_extensions))
        raise FileValidationError(f"File type not allowed. Allowed types: {allowed}")
    try:
        key = build_blob_key(prefix, owner_id, filename)
    except FileHandlerError as e:
        raise FileValidationError(str(e), ErrorCode.INVALID_FORMAT) from e
    return store.save(key, data, content_type)


@lru_cache()
def get_blob_store() -> LocalBlobStore:
    """Process-wide blob store built from settings."""
    return LocalBlobStore(settings.UPLOAD_DIR, f"{settings.API_V1_STR}/files")

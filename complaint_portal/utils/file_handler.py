"""
File handling utilities:
- Filename sanitization and blob key generation.
- Validation of file extensions and sizes.
"""

import os
from typing import Iterable, Optional

from complaint_portal.utils.datetime_utils import DateTimeHelper

SAFE_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._- ")


class FileHandlerError(Exception):
    """Raised when a filename or blob key is unusable."""


def safe_filename(filename: str) -> str:
    """Generate a safe filename by stripping directory components and unsafe chars."""
    if not filename or not isinstance(filename, str):
        raise FileHandlerError("Filename must be a non-empty string")

    # Get basename to prevent directory traversal
    name = os.path.basename(filename.replace("\\", "/"))
    name = "".join(ch for ch in name if ch in SAFE_CHARS)
    name = name.strip().lstrip(".-").replace(" ", "_")

    if not name:
        raise FileHandlerError("Filename contains no valid characters")

    if len(name) > 200:
        stem, ext = os.path.splitext(name)
        name = stem[:200 - len(ext)] + ext

    return name


def file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower().lstrip(".")


def validate_file_extension(filename: str, allowed: Iterable[str]) -> bool:
    """Validate file extension against the allowed set (extensions without dots)."""
    return file_extension(filename) in {ext.lower() for ext in allowed}


def validate_file_size(size: int, max_size: int) -> bool:
    return 0 < size <= max_size


def build_blob_key(prefix: str, owner_id: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Storage key ``{prefix}/{owner_id}/{timestamp_ms}_{filename}``.

    Example: ``complaints/3f2a.../1718000000000_leak.jpg``
    """
    if timestamp_ms is None:
        timestamp_ms = DateTimeHelper.timestamp_ms()
    return f"{prefix}/{owner_id}/{timestamp_ms}_{safe_filename(filename)}"

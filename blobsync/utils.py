"""Utility functions for blobsync."""

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

# =============================================================================
# Constants for file operations
# =============================================================================

# Read size used when hashing files (1 MB)
HASH_CHUNK_SIZE: int = 1024 * 1024

# Page size requested from the remote listing
DEFAULT_LISTING_PAGE_SIZE: int = 5000


# =============================================================================
# Hash calculation utilities
# =============================================================================


def file_md5(path: Path) -> bytes:
    """Calculate the MD5 digest of a file's content.

    The file is read in chunks so large files are never held in memory.

    Args:
        path: Path to the file

    Returns:
        16-byte MD5 digest

    Raises:
        OSError: If the file cannot be read
    """
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.digest()


def format_checksum(checksum: Optional[bytes]) -> str:
    """Format a content checksum for display.

    Examples:
        >>> format_checksum(bytes.fromhex("d41d8cd98f00b204e9800998ecf8427e"))
        'd41d8cd98f00b204e9800998ecf8427e'
        >>> format_checksum(None)
        'none'
    """
    if checksum is None:
        return "none"
    return bytes(checksum).hex()


# =============================================================================
# Timestamp formatting utilities
# =============================================================================


def format_timestamp(value: Union[float, datetime]) -> str:
    """Format a Unix timestamp or datetime as an ISO 8601 UTC string.

    Examples:
        >>> format_timestamp(0)
        '1970-01-01T00:00:00+00:00'
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"

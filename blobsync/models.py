"""Data models for remote object listings."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RemoteObjectRecord:
    """One object currently stored in the remote container."""

    key: str
    """Object path relative to the container root (forward slashes)"""

    last_modified: datetime
    """Storage-side time the object was last written"""

    content_md5: Optional[bytes]
    """MD5 digest of the stored bytes, if the store recorded one"""

    size: int = 0
    """Object size in bytes"""

    @property
    def mtime(self) -> float:
        """Last modification time (Unix timestamp)."""
        return self.last_modified.timestamp()


@dataclass
class ListingPage:
    """A single page of a remote container listing."""

    records: list[RemoteObjectRecord] = field(default_factory=list)
    continuation_token: Optional[str] = None
    """Token for the next page, None once the listing is exhausted"""

"""Shared fixtures for blobsync tests."""

import hashlib
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from blobsync.exceptions import RemoteStoreError
from blobsync.models import ListingPage, RemoteObjectRecord
from blobsync.output import OutputFormatter

# Reference point for remote timestamps in tests
REMOTE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

OLDER = (REMOTE_TIME - timedelta(hours=1)).timestamp()
SAME = REMOTE_TIME.timestamp()
NEWER = (REMOTE_TIME + timedelta(hours=1)).timestamp()


@dataclass
class StoredObject:
    content: bytes
    content_type: str
    content_md5: bytes
    last_modified: datetime


class InMemoryStore:
    """RemoteStore fake keeping objects in a dict, listed in sorted pages."""

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.objects: dict[str, StoredObject] = {}
        self.fail_on_page: Optional[int] = None
        self.fail_keys: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def add(
        self,
        key: str,
        content: bytes,
        last_modified: datetime = REMOTE_TIME,
        content_type: str = "application/octet-stream",
    ) -> None:
        self.objects[key] = StoredObject(
            content=content,
            content_type=content_type,
            content_md5=hashlib.md5(content).digest(),
            last_modified=last_modified,
        )

    def check_access(self) -> None:
        pass

    def list_objects(self, continuation_token: Optional[str] = None) -> ListingPage:
        start = int(continuation_token or 0)
        page_num = start // self.page_size + 1
        if self.fail_on_page == page_num:
            raise RemoteStoreError(f"listing page {page_num} timed out")

        keys = sorted(self.objects)[start : start + self.page_size]
        records = [
            RemoteObjectRecord(
                key=key,
                last_modified=self.objects[key].last_modified,
                content_md5=self.objects[key].content_md5,
                size=len(self.objects[key].content),
            )
            for key in keys
        ]
        next_start = start + self.page_size
        token = str(next_start) if next_start < len(self.objects) else None
        return ListingPage(records=records, continuation_token=token)

    def put_object(
        self, key: str, content: bytes, content_type: str, content_md5: bytes
    ) -> None:
        self.calls.append(("put", key))
        if key in self.fail_keys:
            raise RemoteStoreError("upload rejected", key=key)
        self.objects[key] = StoredObject(
            content=content,
            content_type=content_type,
            content_md5=content_md5,
            last_modified=datetime.now(tz=timezone.utc),
        )

    def delete_object(self, key: str) -> None:
        self.calls.append(("delete", key))
        if key in self.fail_keys:
            raise RemoteStoreError("delete rejected", key=key)
        del self.objects[key]


def write_file(root: Path, relative_path: str, content: bytes, mtime: float) -> Path:
    """Create a file below root with an explicit modification time."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    os.utime(path, (mtime, mtime))
    return path


def make_record(
    key: str,
    content: bytes,
    last_modified: datetime = REMOTE_TIME,
) -> RemoteObjectRecord:
    """Build a remote record whose checksum matches ``content``."""
    return RemoteObjectRecord(
        key=key,
        last_modified=last_modified,
        content_md5=hashlib.md5(content).digest(),
        size=len(content),
    )


@pytest.fixture
def store():
    """Provide an empty in-memory remote store."""
    return InMemoryStore()


@pytest.fixture
def quiet_output():
    """Provide an output formatter that prints nothing but results."""
    return OutputFormatter(quiet=True)


@pytest.fixture
def local_root(tmp_path):
    """Provide an empty local sync root."""
    root = tmp_path / "local"
    root.mkdir()
    return root

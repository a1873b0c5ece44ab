"""Remote store capability used by the sync core.

The reconciler and executor only talk to a remote container through
this protocol, so any object store (or an in-memory fake) can be used.
"""

from typing import Optional, Protocol

from .models import ListingPage


class RemoteStore(Protocol):
    """Minimal capability interface of a remote object container.

    Implementations raise ``RemoteStoreError`` for any failed call.
    """

    def check_access(self) -> None:
        """Make a cheap read-only call to confirm the container is reachable."""
        ...

    def list_objects(self, continuation_token: Optional[str] = None) -> ListingPage:
        """Fetch one page of the container listing.

        Args:
            continuation_token: Token returned with the previous page,
                None for the first page
        """
        ...

    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
        content_md5: bytes,
    ) -> None:
        """Store ``content`` under ``key``, overwriting any existing object."""
        ...

    def delete_object(self, key: str) -> None:
        """Remove the object stored under ``key``."""
        ...

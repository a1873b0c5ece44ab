"""Remote object index built from a paginated container listing."""

import logging
from typing import Optional

from ..exceptions import RemoteListingError, RemoteStoreError
from ..models import RemoteObjectRecord
from ..store import RemoteStore

logger = logging.getLogger(__name__)


def fetch_remote_index(store: RemoteStore) -> dict[str, RemoteObjectRecord]:
    """Fetch every object in the remote container, following all pages.

    The result is all-or-nothing: if any page fails the records gathered
    from earlier pages are discarded, so a reconciliation never runs
    against an incomplete remote view.

    Args:
        store: Remote store to list

    Returns:
        Dictionary mapping object key to RemoteObjectRecord

    Raises:
        RemoteListingError: If any page fetch fails, or the listing repeats a
            key
    """
    index: dict[str, RemoteObjectRecord] = {}
    continuation_token: Optional[str] = None
    page_num = 0

    while True:
        page_num += 1
        try:
            page = store.list_objects(continuation_token)
        except RemoteStoreError as e:
            raise RemoteListingError(
                f"Failed to fetch listing page {page_num}: {e}", page=page_num
            ) from e

        for record in page.records:
            if record.key in index:
                raise RemoteListingError(
                    f"Listing page {page_num} repeats key {record.key!r}",
                    page=page_num,
                )
            index[record.key] = record

        logger.debug(
            "Listing page %d: %d object(s) (total: %d)",
            page_num,
            len(page.records),
            len(index),
        )

        if not page.continuation_token:
            break
        continuation_token = page.continuation_token

    return index

"""Azure Blob Storage implementation of the remote store."""

from __future__ import annotations

import logging
from typing import Any

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContainerClient, ContentSettings

from .config import AccountCredentials
from .exceptions import RemoteConnectError, RemoteStoreError
from .models import ListingPage, RemoteObjectRecord
from .utils import DEFAULT_LISTING_PAGE_SIZE

logger = logging.getLogger(__name__)


class AzureBlobStore:
    """Remote store backed by a single Azure Blob container."""

    def __init__(
        self,
        credentials: AccountCredentials,
        page_size: int = DEFAULT_LISTING_PAGE_SIZE,
        container_client: ContainerClient | None = None,
    ):
        """Initialize the store.

        Args:
            credentials: Account credentials and container name
            page_size: Number of blobs requested per listing page
            container_client: Optional pre-built container client
        """
        self.credentials = credentials
        self.page_size = page_size
        if container_client is None:
            container_client = ContainerClient(
                credentials.account_url,
                container_name=credentials.container_name,
                credential={
                    "account_name": credentials.account_name,
                    "account_key": credentials.account_key,
                },
            )
        self._container = container_client

    @classmethod
    def connect(
        cls,
        credentials: AccountCredentials,
        page_size: int = DEFAULT_LISTING_PAGE_SIZE,
    ) -> AzureBlobStore:
        """Create a store and confirm the container is reachable.

        Raises:
            RemoteConnectError: If the client cannot be built or the
                container cannot be accessed with these credentials
        """
        try:
            store = cls(credentials, page_size=page_size)
            store.check_access()
        except (ValueError, RemoteStoreError) as e:
            raise RemoteConnectError(
                f"Cannot access container '{credentials.container_name}' "
                f"at {credentials.account_url}: {e}"
            ) from e
        logger.debug("Connected to container %s", credentials.container_name)
        return store

    def check_access(self) -> None:
        # Result is irrelevant, this only proves the credentials and names work
        try:
            self._container.get_container_properties()
        except AzureError as e:
            raise self._translate_error(e) from e

    def list_objects(self, continuation_token: str | None = None) -> ListingPage:
        try:
            pager = self._container.list_blobs(
                results_per_page=self.page_size
            ).by_page(continuation_token=continuation_token)
            try:
                page = next(pager)
            except StopIteration:
                return ListingPage()
            records = [self._to_record(blob) for blob in page]
            return ListingPage(
                records=records, continuation_token=pager.continuation_token or None
            )
        except AzureError as e:
            raise self._translate_error(e) from e

    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
        content_md5: bytes,
    ) -> None:
        try:
            self._container.upload_blob(
                name=key,
                data=content,
                overwrite=True,
                content_settings=ContentSettings(
                    content_type=content_type,
                    content_md5=bytearray(content_md5),
                ),
            )
        except AzureError as e:
            raise self._translate_error(e, key) from e

    def delete_object(self, key: str) -> None:
        try:
            self._container.delete_blob(key)
        except ResourceNotFoundError:
            logger.warning("Blob %s was already gone", key)
        except AzureError as e:
            raise self._translate_error(e, key) from e

    @staticmethod
    def _to_record(blob: Any) -> RemoteObjectRecord:
        content_md5 = None
        if blob.content_settings is not None and blob.content_settings.content_md5:
            content_md5 = bytes(blob.content_settings.content_md5)
        return RemoteObjectRecord(
            key=blob.name,
            last_modified=blob.last_modified,
            content_md5=content_md5,
            size=blob.size or 0,
        )

    @staticmethod
    def _translate_error(
        error: AzureError, key: str | None = None
    ) -> RemoteStoreError:
        if isinstance(error, ClientAuthenticationError):
            message = f"Authentication failed: {error.message}"
        elif isinstance(error, HttpResponseError) and error.status_code == 403:
            message = f"Access forbidden: {error.message}"
        elif isinstance(error, ResourceNotFoundError):
            message = f"Not found: {error.message}"
        else:
            message = str(error.message or error)
        if key is not None:
            message = f"{key}: {message}"
        return RemoteStoreError(message, key=key)

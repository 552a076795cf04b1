"""Google Cloud Storage backend.

The google-cloud-storage client is synchronous; every call runs in a worker
thread so the event loop stays free and a cancelled request stops waiting
on it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from story_api.storage.backends.base import StorageBackend
from story_api.storage.content_types import content_type_for
from story_api.storage.errors import ObjectExistsError, ObjectNotFoundError, StorageError

logger = logging.getLogger(__name__)


class GCSStorageBackend(StorageBackend):
    """Object store backed by a single GCS bucket.

    Attributes:
        bucket_name: Name of the bucket holding story content.
        extended_content_types: Use the extended content-type table.
    """

    name = "gcs"

    def __init__(
        self,
        bucket_name: str,
        client: Any | None = None,
        extended_content_types: bool = True,
    ) -> None:
        self.bucket_name = bucket_name
        self.extended_content_types = extended_content_types
        self._client = client or storage.Client()
        self._bucket = self._client.bucket(bucket_name)

    async def read_file(self, path: str) -> bytes:
        """Download an object's content."""
        blob = self._bucket.blob(path)
        try:
            return await asyncio.to_thread(blob.download_as_bytes)
        except gcs_exceptions.NotFound as e:
            raise ObjectNotFoundError(f"Object not found: {path}", path=path) from e
        except gcs_exceptions.GoogleAPIError as e:
            raise StorageError(f"Reading gs://{self.bucket_name}/{path} failed: {e}", path=path) from e

    async def write_file(
        self,
        path: str,
        data: bytes,
        owner: str | None = None,
        create_only: bool = False,
    ) -> None:
        """Upload an object with content type and team metadata."""
        blob = self._bucket.blob(path)
        if owner:
            blob.metadata = {"team": owner}
        try:
            await asyncio.to_thread(
                blob.upload_from_string,
                data,
                content_type=content_type_for(path, extended=self.extended_content_types),
                if_generation_match=0 if create_only else None,
            )
        except gcs_exceptions.PreconditionFailed as e:
            raise ObjectExistsError(f"Object already exists: {path}", path=path) from e
        except gcs_exceptions.GoogleAPIError as e:
            raise StorageError(f"Writing gs://{self.bucket_name}/{path} failed: {e}", path=path) from e

    async def list_files(self, prefix: str = "", suffix: str | None = None) -> list[str]:
        """List object names, filtering by suffix on the server side."""
        match_glob = f"**{suffix}" if suffix else None

        def _list() -> list[str]:
            blobs = self._client.list_blobs(
                self.bucket_name,
                prefix=prefix or None,
                match_glob=match_glob,
            )
            return [blob.name for blob in blobs]

        try:
            names = await asyncio.to_thread(_list)
        except gcs_exceptions.GoogleAPIError as e:
            raise StorageError(f"Listing gs://{self.bucket_name}/{prefix} failed: {e}", path=prefix) from e

        if suffix:
            names = [name for name in names if name.endswith(suffix)]
        return sorted(names)

    async def delete_file(self, path: str) -> None:
        """Delete an object, ignoring objects that are already gone."""
        blob = self._bucket.blob(path)
        try:
            await asyncio.to_thread(blob.delete)
        except gcs_exceptions.NotFound:
            logger.debug(f"Object already deleted: {path}")
        except gcs_exceptions.GoogleAPIError as e:
            raise StorageError(f"Deleting gs://{self.bucket_name}/{path} failed: {e}", path=path) from e

"""Tests for story_api.storage.backends.gcs module.

The google-cloud-storage client is replaced with MagicMock objects.

Covers:
    - error translation (NotFound, PreconditionFailed, other API errors)
    - content type and team metadata on upload
    - create-only writes use a generation precondition
    - listing with a server-side glob
"""

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcs_exceptions

from story_api.storage.backends.gcs import GCSStorageBackend
from story_api.storage.errors import ObjectExistsError, ObjectNotFoundError, StorageError


def _make_blob(name="fortelling/a/index.html"):
    blob = MagicMock()
    blob.name = name
    blob.metadata = None
    return blob


@pytest.fixture
def blob():
    return _make_blob()


@pytest.fixture
def client(blob):
    client = MagicMock()
    client.bucket.return_value.blob.return_value = blob
    return client


@pytest.fixture
def backend(client):
    return GCSStorageBackend(bucket_name="story-bucket", client=client)


class TestReadFile:
    """Tests for GCSStorageBackend.read_file()."""

    @pytest.mark.asyncio
    async def test_returns_content(self, backend, blob):
        blob.download_as_bytes.return_value = b"<html></html>"
        assert await backend.read_file("fortelling/a/index.html") == b"<html></html>"

    @pytest.mark.asyncio
    async def test_not_found_translated(self, backend, blob):
        blob.download_as_bytes.side_effect = gcs_exceptions.NotFound("no such object")
        with pytest.raises(ObjectNotFoundError):
            await backend.read_file("fortelling/a/nada_metadata.json")

    @pytest.mark.asyncio
    async def test_other_errors_are_storage_errors(self, backend, blob):
        blob.download_as_bytes.side_effect = gcs_exceptions.Forbidden("denied")
        with pytest.raises(StorageError) as exc_info:
            await backend.read_file("fortelling/a/nada_metadata.json")
        assert not isinstance(exc_info.value, ObjectNotFoundError)


class TestWriteFile:
    """Tests for GCSStorageBackend.write_file()."""

    @pytest.mark.asyncio
    async def test_sets_content_type_and_owner(self, backend, blob):
        await backend.write_file("fortelling/a/index.html", b"<html></html>", owner="finance")

        assert blob.metadata == {"team": "finance"}
        blob.upload_from_string.assert_called_once_with(
            b"<html></html>",
            content_type="text/html",
            if_generation_match=None,
        )

    @pytest.mark.asyncio
    async def test_create_only_uses_generation_precondition(self, backend, blob):
        await backend.write_file("fortelling/a/nada_metadata.json", b"{}", create_only=True)
        assert blob.upload_from_string.call_args.kwargs["if_generation_match"] == 0

    @pytest.mark.asyncio
    async def test_precondition_failure_is_exists_error(self, backend, blob):
        blob.upload_from_string.side_effect = gcs_exceptions.PreconditionFailed("exists")
        with pytest.raises(ObjectExistsError):
            await backend.write_file("fortelling/a/nada_metadata.json", b"{}", create_only=True)

    @pytest.mark.asyncio
    async def test_upload_failure_is_storage_error(self, backend, blob):
        blob.upload_from_string.side_effect = gcs_exceptions.ServiceUnavailable("down")
        with pytest.raises(StorageError):
            await backend.write_file("fortelling/a/index.html", b"x")


class TestListFiles:
    """Tests for GCSStorageBackend.list_files()."""

    @pytest.mark.asyncio
    async def test_lists_with_prefix(self, backend, client):
        client.list_blobs.return_value = [_make_blob("fortelling/a/b.css"), _make_blob("fortelling/a/a.html")]

        names = await backend.list_files(prefix="fortelling/a/")

        assert names == ["fortelling/a/a.html", "fortelling/a/b.css"]
        client.list_blobs.assert_called_once_with("story-bucket", prefix="fortelling/a/", match_glob=None)

    @pytest.mark.asyncio
    async def test_suffix_uses_match_glob(self, backend, client):
        client.list_blobs.return_value = [_make_blob("fortelling/a/nada_metadata.json")]

        names = await backend.list_files(prefix="fortelling/", suffix="/nada_metadata.json")

        assert names == ["fortelling/a/nada_metadata.json"]
        assert client.list_blobs.call_args.kwargs["match_glob"] == "**/nada_metadata.json"

    @pytest.mark.asyncio
    async def test_list_failure_is_storage_error(self, backend, client):
        client.list_blobs.side_effect = gcs_exceptions.InternalServerError("boom")
        with pytest.raises(StorageError):
            await backend.list_files(prefix="fortelling/")


class TestDeleteFile:
    """Tests for GCSStorageBackend.delete_file()."""

    @pytest.mark.asyncio
    async def test_deletes_blob(self, backend, blob):
        await backend.delete_file("fortelling/a/index.html")
        blob.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_object_ignored(self, backend, blob):
        blob.delete.side_effect = gcs_exceptions.NotFound("gone")
        await backend.delete_file("fortelling/a/index.html")

    @pytest.mark.asyncio
    async def test_other_failures_raise(self, backend, blob):
        blob.delete.side_effect = gcs_exceptions.Forbidden("denied")
        with pytest.raises(StorageError):
            await backend.delete_file("fortelling/a/index.html")

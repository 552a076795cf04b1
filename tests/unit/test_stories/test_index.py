"""Tests for story_api.stories.index module.

Covers:
    - find_by_id: match, no match, repeatable reads, error propagation
    - exists_by_slug: absent, present, read failures surfaced
    - list_assets: metadata excluded, prefix isolation
"""

from unittest.mock import AsyncMock

import pytest

from story_api.storage.errors import ObjectNotFoundError, StorageError
from story_api.stories.errors import MetadataParseError
from story_api.stories.index import StoryIndex
from story_api.stories.schemas import StoryMetadata


def _meta(**overrides) -> StoryMetadata:
    fields = {
        "title": "Budget 2024",
        "slug": "Budget+2024",
        "id": "11111111-1111-4111-8111-111111111111",
        "team": "finance",
        "published": "2024-01-01",
        "tags": ["budget"],
    }
    fields.update(overrides)
    return StoryMetadata(**fields)


async def _store(backend, meta: StoryMetadata):
    await backend.write_file(
        f"fortelling/{meta.slug}/nada_metadata.json",
        meta.model_dump_json().encode("utf-8"),
    )


@pytest.fixture
def index(local_backend):
    return StoryIndex(local_backend, root="fortelling")


class TestFindById:
    """Tests for StoryIndex.find_by_id()."""

    @pytest.mark.asyncio
    async def test_finds_matching_story(self, index, local_backend):
        await _store(local_backend, _meta(slug="a", id="id-a"))
        await _store(local_backend, _meta(slug="b", id="id-b"))

        found = await index.find_by_id("id-b")
        assert found is not None
        assert found.slug == "b"

    @pytest.mark.asyncio
    async def test_returns_none_when_absent(self, index, local_backend):
        await _store(local_backend, _meta(slug="a", id="id-a"))
        assert await index.find_by_id("id-unknown") is None

    @pytest.mark.asyncio
    async def test_empty_store(self, index):
        assert await index.find_by_id("id-a") is None

    @pytest.mark.asyncio
    async def test_repeated_reads_identical(self, index, local_backend):
        await _store(local_backend, _meta())
        first = await index.find_by_id(_meta().id)
        second = await index.find_by_id(_meta().id)
        assert first.model_dump_json() == second.model_dump_json()

    @pytest.mark.asyncio
    async def test_ignores_assets_with_similar_names(self, index, local_backend):
        await _store(local_backend, _meta(slug="a", id="id-a"))
        await local_backend.write_file("fortelling/a/old_nada_metadata.json", b"not json")
        assert (await index.find_by_id("id-a")).slug == "a"

    @pytest.mark.asyncio
    async def test_null_tags_accepted(self, index, local_backend):
        await local_backend.write_file(
            "fortelling/a/nada_metadata.json",
            b'{"title":"","slug":"a","id":"id-a","team":"finance","published":"","tags":null}',
        )
        assert (await index.find_by_id("id-a")).tags == []

    @pytest.mark.asyncio
    async def test_unparseable_metadata_raises(self, index, local_backend):
        await local_backend.write_file("fortelling/a/nada_metadata.json", b"{broken")
        with pytest.raises(MetadataParseError):
            await index.find_by_id("id-a")

    @pytest.mark.asyncio
    async def test_listing_failure_raises(self):
        backend = AsyncMock()
        backend.list_files.side_effect = StorageError("listing failed")
        with pytest.raises(StorageError):
            await StoryIndex(backend, root="fortelling").find_by_id("id-a")

    @pytest.mark.asyncio
    async def test_vanished_object_skipped(self):
        backend = AsyncMock()
        backend.list_files.return_value = [
            "fortelling/a/nada_metadata.json",
            "fortelling/b/nada_metadata.json",
        ]
        backend.read_file.side_effect = [
            ObjectNotFoundError("gone"),
            _meta(slug="b", id="id-b").model_dump_json().encode(),
        ]
        found = await StoryIndex(backend, root="fortelling").find_by_id("id-b")
        assert found.slug == "b"


class TestExistsBySlug:
    """Tests for StoryIndex.exists_by_slug()."""

    @pytest.mark.asyncio
    async def test_absent(self, index):
        assert await index.exists_by_slug("Budget+2024") is False

    @pytest.mark.asyncio
    async def test_present(self, index, local_backend):
        await _store(local_backend, _meta())
        assert await index.exists_by_slug("Budget+2024") is True

    @pytest.mark.asyncio
    async def test_assets_alone_do_not_count(self, index, local_backend):
        await local_backend.write_file("fortelling/Budget+2024/index.html", b"x")
        assert await index.exists_by_slug("Budget+2024") is False

    @pytest.mark.asyncio
    async def test_read_failure_is_not_absence(self):
        backend = AsyncMock()
        backend.read_file.side_effect = StorageError("permission denied")
        with pytest.raises(StorageError):
            await StoryIndex(backend, root="fortelling").exists_by_slug("a")


class TestListAssets:
    """Tests for StoryIndex.list_assets()."""

    @pytest.mark.asyncio
    async def test_excludes_metadata(self, index, local_backend):
        await _store(local_backend, _meta(slug="a"))
        await local_backend.write_file("fortelling/a/index.html", b"x")
        await local_backend.write_file("fortelling/a/assets/app.js", b"x")

        assert await index.list_assets("a") == [
            "fortelling/a/assets/app.js",
            "fortelling/a/index.html",
        ]

    @pytest.mark.asyncio
    async def test_other_stories_excluded(self, index, local_backend):
        await local_backend.write_file("fortelling/a/index.html", b"x")
        await local_backend.write_file("fortelling/ab/index.html", b"x")
        assert await index.list_assets("a") == ["fortelling/a/index.html"]

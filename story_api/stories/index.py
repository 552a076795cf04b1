"""Story directory index over the object store.

There is no separate index object: stories are found by listing metadata
objects and reading them. Lookup by id is linear in the number of stories.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from story_api.storage.backends.base import StorageBackend
from story_api.storage.errors import ObjectNotFoundError
from story_api.stories.errors import MetadataParseError
from story_api.stories.naming import (
    METADATA_FILENAME,
    is_metadata_object,
    metadata_path,
    story_prefix,
)
from story_api.stories.schemas import StoryMetadata

logger = logging.getLogger(__name__)


class StoryIndex:
    """Locates stories and their assets in the object store.

    Attributes:
        backend: Storage backend holding the stories.
        root: Object-name root under which stories live.
    """

    def __init__(self, backend: StorageBackend, root: str) -> None:
        self.backend = backend
        self.root = root

    async def _read(self, path: str) -> StoryMetadata:
        data = await self.backend.read_file(path)
        try:
            return StoryMetadata.model_validate_json(data)
        except ValidationError as e:
            raise MetadataParseError(path) from e

    async def find_by_id(self, story_id: str) -> StoryMetadata | None:
        """Find a story's metadata by id.

        Scans every metadata object under the root and returns the first
        whose id matches.

        Args:
            story_id: Story id to look up.

        Returns:
            The metadata, or None if no story has this id.

        Raises:
            StorageError: If listing or reading fails.
            MetadataParseError: If a scanned record is invalid.
        """
        paths = await self.backend.list_files(prefix=f"{self.root}/", suffix=f"/{METADATA_FILENAME}")
        for path in paths:
            try:
                meta = await self._read(path)
            except ObjectNotFoundError:
                # Listed but deleted since; listings are eventually consistent
                logger.warning(f"Metadata object vanished during scan: {path}")
                continue
            if meta.id == story_id:
                return meta
        return None

    async def exists_by_slug(self, slug: str) -> bool:
        """Check whether a story with this slug exists.

        Only an explicit "object does not exist" counts as absent; any other
        read failure is raised.
        """
        try:
            await self.backend.read_file(metadata_path(self.root, slug))
        except ObjectNotFoundError:
            return False
        return True

    async def list_assets(self, slug: str) -> list[str]:
        """List every object of a story except its metadata object."""
        paths = await self.backend.list_files(prefix=story_prefix(self.root, slug))
        return [path for path in paths if not is_metadata_object(path)]

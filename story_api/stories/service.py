"""Story publishing workflow: create, full replace and files-only update.

The object store has no transactions, so updates are not atomic. A full
replace deletes the current assets and then uploads the new set; if a step
fails the story keeps whatever the completed steps produced, and the
failure is reported without rollback or retry.

Examples:
    >>> service = StoryService(backend, tokens, root="fortelling")
    >>> meta = await service.create("Bearer s3cret", b'{"title": "Budget 2024"}')
    >>> meta.slug
    'Budget+2024'
    >>> story = await service.authorize_update(meta.id, "Bearer s3cret")
    >>> await service.replace_files(story, {"index.html": b"<html></html>"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError

from story_api.storage.backends.base import StorageBackend
from story_api.storage.errors import ObjectExistsError, StorageError
from story_api.stories.errors import (
    BadRequest,
    InternalError,
    MetadataParseError,
    StoryConflict,
    StoryNotFound,
    Unauthorized,
)
from story_api.stories.index import StoryIndex
from story_api.stories.locks import KeyedLocks
from story_api.stories.naming import (
    METADATA_FILENAME,
    asset_path,
    derive_slug,
    metadata_path,
    new_story_id,
)
from story_api.stories.schemas import StoryCreate, StoryMetadata

if TYPE_CHECKING:
    from story_api.auth.tokens import TeamTokens

logger = logging.getLogger(__name__)


@dataclass
class UpdatePlan:
    """Objects an update will touch, computed before any mutation.

    Attributes:
        deletes: Existing asset object names to delete, in order.
        uploads: Asset object name to content, in upload order.
    """

    deletes: list[str] = field(default_factory=list)
    uploads: dict[str, bytes] = field(default_factory=dict)


def validate_asset_name(name: str) -> str:
    """Check that a multipart part name is usable as an asset name.

    Nested names such as ``assets/app.js`` are allowed. The metadata
    filename is reserved.

    Raises:
        BadRequest: If the name is empty, absolute, contains ``.``/``..``
            segments or backslashes, or names the metadata object.
    """
    if not name or name.startswith("/") or "\\" in name:
        raise BadRequest(f"invalid file name '{name}'")
    segments = name.split("/")
    if any(segment in ("", ".", "..") for segment in segments):
        raise BadRequest(f"invalid file name '{name}'")
    if segments[-1] == METADATA_FILENAME:
        raise BadRequest(f"file name '{METADATA_FILENAME}' is reserved")
    return name


class StoryService:
    """Orchestrates story creation and updates against the object store.

    Attributes:
        backend: Storage backend for story objects.
        tokens: Token-to-team mapping used to resolve callers.
        root: Object-name root under which stories live.
        index: Directory index over the same backend.
        locks: Per-slug locks serializing work within this process.
    """

    def __init__(
        self,
        backend: StorageBackend,
        tokens: TeamTokens,
        root: str = "fortelling",
        locks: KeyedLocks | None = None,
    ) -> None:
        self.backend = backend
        self.tokens = tokens
        self.root = root
        self.index = StoryIndex(backend, root)
        self.locks = locks if locks is not None else KeyedLocks()

    async def create(self, authorization: str | None, body: bytes) -> StoryMetadata:
        """Create a story from caller metadata.

        Only the metadata object is written; assets follow via an update.

        Args:
            authorization: Authorization header value.
            body: JSON metadata payload.

        Returns:
            The stored metadata, including the new id.

        Raises:
            Unauthorized: If the credential does not resolve to a team.
            BadRequest: If the payload is malformed.
            StoryConflict: If a story with the derived slug exists.
            InternalError: If checking or writing the store fails.
        """
        team = self.tokens.resolve(authorization)

        try:
            request = StoryCreate.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Unmarshalling story metadata: {e.error_count()} error(s)")
            raise BadRequest("unmarshalling story metadata") from e

        story_id = new_story_id()
        meta = StoryMetadata(
            title=request.title,
            slug=derive_slug(request, story_id),
            id=story_id,
            team=team,
            published=request.published,
            tags=request.tags,
        )

        async with self.locks.hold(meta.slug):
            try:
                exists = await self.index.exists_by_slug(meta.slug)
            except StorageError as e:
                logger.exception(f"Checking existence of story with slug {meta.slug}")
                raise InternalError() from e
            if exists:
                logger.error(f"There already exists a story with slug {meta.slug}")
                raise StoryConflict(meta.slug)

            try:
                await self.backend.write_file(
                    metadata_path(self.root, meta.slug),
                    meta.model_dump_json().encode("utf-8"),
                    owner=team,
                    create_only=True,
                )
            except ObjectExistsError as e:
                logger.error(f"Story with slug {meta.slug} was created concurrently")
                raise StoryConflict(meta.slug) from e
            except StorageError as e:
                logger.exception(f"Unable to create story {meta.slug}")
                raise InternalError(f"unable to create story {meta.slug}") from e

        logger.info(f"Created story {meta.slug} ({meta.id}) for team {team}")
        return meta

    async def authorize_update(self, story_id: str, authorization: str | None) -> StoryMetadata:
        """Look up a story and check the caller's team owns it.

        The story is resolved before the credential, so an unknown id is
        NotFound whatever the credential.

        Raises:
            StoryNotFound: If no story has this id.
            Unauthorized: If the credential is invalid or another team owns
                the story.
            InternalError: If the lookup fails.
        """
        try:
            meta = await self.index.find_by_id(story_id)
        except (StorageError, MetadataParseError) as e:
            logger.exception(f"Getting story metadata for story with ID {story_id}")
            raise InternalError() from e
        if meta is None:
            logger.error(f"No story exists for id {story_id}")
            raise StoryNotFound(story_id)

        team = self.tokens.resolve(authorization)
        if team != meta.team:
            logger.warning(f"Team {team} is not authorized to update story with slug {meta.slug}")
            raise Unauthorized()
        return meta

    async def plan_update(
        self,
        meta: StoryMetadata,
        files: Mapping[str, bytes],
        replace: bool,
    ) -> UpdatePlan:
        """Compute the deletes and uploads of an update without mutating.

        Args:
            meta: Story being updated.
            files: Asset name to content.
            replace: Delete current assets first (full replace).

        Raises:
            BadRequest: If a file name is invalid.
            InternalError: If listing current assets fails.
        """
        uploads = {
            asset_path(self.root, meta.slug, validate_asset_name(name)): content
            for name, content in files.items()
        }

        deletes: list[str] = []
        if replace:
            try:
                deletes = await self.index.list_assets(meta.slug)
            except StorageError as e:
                logger.exception(f"Listing files of story '{meta.slug}'")
                raise InternalError(f"error deleting story '{meta.slug}' before updating") from e

        return UpdatePlan(deletes=deletes, uploads=uploads)

    async def apply_plan(self, meta: StoryMetadata, plan: UpdatePlan) -> None:
        """Run an update plan: sequential deletes, then sequential uploads.

        The first failure aborts the rest of its phase. Nothing is rolled
        back; objects already deleted or written stay that way.

        Raises:
            InternalError: If a delete or upload fails.
        """
        for path in plan.deletes:
            try:
                await self.backend.delete_file(path)
            except StorageError as e:
                logger.exception(f"Error deleting {path} of story '{meta.slug}' before updating")
                raise InternalError(f"error deleting story '{meta.slug}' before updating") from e

        for path, content in plan.uploads.items():
            try:
                await self.backend.write_file(path, content, owner=meta.team)
            except StorageError as e:
                logger.exception(f"Error uploading {path} of story '{meta.slug}'")
                raise InternalError(f"error uploading story with slug '{meta.slug}' to bucket") from e

    async def update_files(
        self,
        meta: StoryMetadata,
        files: Mapping[str, bytes],
        replace: bool,
    ) -> None:
        """Plan and apply an update to an authorized story.

        Args:
            meta: Story returned by authorize_update.
            files: Asset name to content.
            replace: Delete current assets first (full replace).
        """
        async with self.locks.hold(meta.slug):
            plan = await self.plan_update(meta, files, replace=replace)
            await self.apply_plan(meta, plan)

        logger.info(
            f"Updated story {meta.slug}: {len(plan.deletes)} deleted, {len(plan.uploads)} uploaded"
        )

    async def replace_files(self, meta: StoryMetadata, files: Mapping[str, bytes]) -> None:
        """Full replace: delete every current asset, then upload files."""
        await self.update_files(meta, files, replace=True)

    async def patch_files(self, meta: StoryMetadata, files: Mapping[str, bytes]) -> None:
        """Files-only update: upload files, keep other current assets."""
        await self.update_files(meta, files, replace=False)

"""Story publishing: identity, directory index and the update workflow."""

from story_api.stories.errors import (
    BadRequest,
    InternalError,
    StoryConflict,
    StoryError,
    StoryNotFound,
    Unauthorized,
)
from story_api.stories.index import StoryIndex
from story_api.stories.locks import KeyedLocks
from story_api.stories.naming import METADATA_FILENAME, derive_slug, metadata_path, new_story_id
from story_api.stories.schemas import StoryCreate, StoryMetadata, StoryResponse
from story_api.stories.service import StoryService, UpdatePlan

__all__ = [
    "BadRequest",
    "InternalError",
    "KeyedLocks",
    "METADATA_FILENAME",
    "StoryConflict",
    "StoryCreate",
    "StoryError",
    "StoryIndex",
    "StoryMetadata",
    "StoryNotFound",
    "StoryResponse",
    "StoryService",
    "Unauthorized",
    "UpdatePlan",
    "derive_slug",
    "metadata_path",
    "new_story_id",
]

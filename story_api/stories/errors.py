"""Workflow errors, each carrying the HTTP status and caller-safe message.

Messages on these exceptions are returned to callers verbatim, so they
never include storage paths, SDK errors or other internal detail.
"""

from __future__ import annotations

from fastapi import status

UNAUTHORIZED_MESSAGE = "missing or invalid authorization token"
INTERNAL_MESSAGE = "internal server error"


class StoryError(Exception):
    """Base class for failures reported to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(StoryError):
    """Missing, malformed or unknown credential, or wrong owning team."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE) -> None:
        super().__init__(message)


class BadRequest(StoryError):
    """Malformed request payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class StoryNotFound(StoryError):
    """No story exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, story_id: str) -> None:
        super().__init__(f"no story exists for id {story_id}")
        self.story_id = story_id


class StoryConflict(StoryError):
    """A story with the derived slug already exists."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, slug: str) -> None:
        super().__init__(f"there already exists a story {slug}")
        self.slug = slug


class InternalError(StoryError):
    """Unexpected storage, transport or serialization failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = INTERNAL_MESSAGE) -> None:
        super().__init__(message)


class MetadataParseError(Exception):
    """A stored metadata object could not be parsed."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Unparseable story metadata at {path}")
        self.path = path

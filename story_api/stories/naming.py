"""Story identity, slug derivation and object paths.

Layout in the object store:

    {root}/{slug}/nada_metadata.json   - metadata record (JSON)
    {root}/{slug}/{asset}              - story assets

Examples:
    >>> from story_api.stories.naming import derive_slug, metadata_path
    >>> derive_slug(StoryCreate(title="Budget 2024"), "a1b2")
    'Budget+2024'
    >>> metadata_path("fortelling", "Budget+2024")
    'fortelling/Budget+2024/nada_metadata.json'
"""

from __future__ import annotations

import uuid
from urllib.parse import quote_plus

from story_api.stories.schemas import StoryCreate

METADATA_FILENAME = "nada_metadata.json"


def new_story_id() -> str:
    """Generate a fresh random story id (UUID4)."""
    return str(uuid.uuid4())


def _escape(value: str) -> str:
    """Query-escape a value, percent-encoding dot-only results."""
    escaped = quote_plus(value)
    # "." and ".." are path segments, not names
    if not escaped.strip("."):
        return escaped.replace(".", "%2E")
    return escaped


def derive_slug(meta: StoryCreate, story_id: str) -> str:
    """Derive the storage slug for a new story.

    Precedence:
        - caller slug, query-escaped
        - title, query-escaped
        - the story id as-is

    A result made only of dots ("." or "..") has its dots percent-encoded
    so the slug is never a relative path segment. Never fails; the same input always gives the same slug.

    Args:
        meta: Caller-supplied metadata.
        story_id: The server-generated id for the story.

    Returns:
        URL-safe slug.
    """
    if meta.slug:
        return _escape(meta.slug)
    if meta.title:
        return _escape(meta.title)
    return story_id


def story_prefix(root: str, slug: str) -> str:
    """Return the object-name prefix holding every object of a story."""
    return f"{root}/{slug}/"


def metadata_path(root: str, slug: str) -> str:
    """Return the canonical metadata object name for a story."""
    return f"{story_prefix(root, slug)}{METADATA_FILENAME}"


def asset_path(root: str, slug: str, name: str) -> str:
    """Return the object name for a story asset."""
    return f"{story_prefix(root, slug)}{name}"


def is_metadata_object(path: str) -> bool:
    """Check whether an object name is a story metadata object."""
    return path.rsplit("/", 1)[-1] == METADATA_FILENAME

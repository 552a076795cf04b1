"""Story data models.

StoryMetadata is the record persisted as the story's metadata object.
StoryCreate is what a caller may send when creating a story; fields it
does not declare (``id``, ``team``) are dropped.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StoryCreate(BaseModel):
    """Caller-supplied metadata for a new story."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", description="Human readable title")
    slug: str = Field(default="", description="Preferred URL path segment")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    published: str = Field(default="", description="Publication date or marker")

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, v: object) -> object:
        return [] if v is None else v


class StoryMetadata(BaseModel):
    """Authoritative record for one story.

    Attributes:
        title: Human readable title
        slug: URL-safe storage path segment, unique among stories
        id: Server-generated identifier, immutable
        team: Owning team, set at creation, immutable
        published: Publication date or marker
        tags: Free-form tags
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    slug: str
    id: str
    team: str
    published: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, v: object) -> object:
        """Records written without tags store null."""
        return [] if v is None else v


class StoryResponse(BaseModel):
    """Response body for every story endpoint, success or error."""

    status: str
    message: str

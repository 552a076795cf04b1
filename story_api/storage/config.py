"""Storage configuration model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BackendType(str, Enum):
    """Supported object store backends."""

    GCS = "gcs"
    LOCAL = "local"


class StorageConfig(BaseModel):
    """Configuration for the story object store.

    Attributes:
        backend: Which backend to use.
        bucket: GCS bucket name (gcs backend only).
        local_root: Directory holding objects (local backend only).
        extended_content_types: Use the extended content-type table.
    """

    backend: BackendType = Field(default=BackendType.LOCAL, description="Storage backend")
    bucket: str | None = Field(default=None, description="GCS bucket for story content")
    local_root: str = Field(default="./output/stories", description="Local storage root directory")
    extended_content_types: bool = Field(default=True, description="Recognize image/xml/json/sheet types")

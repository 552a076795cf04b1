"""Object storage package for story bundles.

Provides an async backend abstraction over GCS and the local filesystem,
plus content-type assignment by file extension.

Examples:
    >>> from story_api.storage import StorageConfig, create_backend
    >>> backend = create_backend(StorageConfig(local_root="/tmp/stories"))
    >>> await backend.write_file("fortelling/demo/index.html", b"<html></html>")
"""

from story_api.storage.backends.base import StorageBackend
from story_api.storage.backends.local import LocalStorageBackend
from story_api.storage.config import BackendType, StorageConfig
from story_api.storage.content_types import content_type_for
from story_api.storage.errors import ObjectExistsError, ObjectNotFoundError, StorageError
from story_api.storage.factory import create_backend

__all__ = [
    "BackendType",
    "LocalStorageBackend",
    "ObjectExistsError",
    "ObjectNotFoundError",
    "StorageBackend",
    "StorageConfig",
    "StorageError",
    "content_type_for",
    "create_backend",
]

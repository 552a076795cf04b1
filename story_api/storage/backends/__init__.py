"""Storage backends for story objects."""

from story_api.storage.backends.base import StorageBackend
from story_api.storage.backends.local import LocalStorageBackend

__all__ = ["StorageBackend", "LocalStorageBackend"]

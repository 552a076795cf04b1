"""Storage-layer exceptions.

Backends translate SDK and filesystem errors into these so callers never
depend on a particular storage library.
"""

from __future__ import annotations


class StorageError(Exception):
    """Any failure talking to the object store."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ObjectNotFoundError(StorageError):
    """The requested object does not exist."""


class ObjectExistsError(StorageError):
    """A create-only write hit an existing object."""

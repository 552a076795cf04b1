"""Abstract base class for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract object store for story blobs.

    Object names are slash-separated paths such as
    ``fortelling/my-story/index.html``. Implementations must translate
    their own errors into storage errors:
    ``ObjectNotFoundError`` for missing objects, ``ObjectExistsError`` for
    failed create-only writes and ``StorageError`` for everything else.
    """

    name: str = "abstract"

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Read an object.

        Args:
            path: Object name.

        Returns:
            Object content.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            StorageError: On any other failure.
        """

    @abstractmethod
    async def write_file(
        self,
        path: str,
        data: bytes,
        owner: str | None = None,
        create_only: bool = False,
    ) -> None:
        """Write an object, replacing any existing one.

        Args:
            path: Object name.
            data: Content to store.
            owner: Team recorded as per-object metadata, where supported.
            create_only: Fail with ObjectExistsError if the object exists.
        """

    @abstractmethod
    async def list_files(self, prefix: str = "", suffix: str | None = None) -> list[str]:
        """List object names under a prefix.

        Args:
            prefix: Name prefix to list under.
            suffix: Only return names ending with this string.

        Returns:
            Sorted list of object names.
        """

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        """Delete an object. Deleting a missing object is not an error.

        Args:
            path: Object name.
        """

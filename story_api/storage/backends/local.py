"""Local filesystem storage backend using pathlib.

Object names map to files below a root directory. Per-object owner
metadata is not persisted.
"""

from __future__ import annotations

import logging
from pathlib import Path

from story_api.storage.backends.base import StorageBackend
from story_api.storage.errors import ObjectExistsError, ObjectNotFoundError, StorageError

logger = logging.getLogger(__name__)


class LocalStorageBackend(StorageBackend):
    """Pathlib-based local filesystem storage backend.

    Attributes:
        root: Directory that holds all objects.
    """

    name = "local"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        """Map an object name to a file below root."""
        if any(part in (".", "..") for part in path.split("/")):
            raise StorageError(f"Object name has a relative segment: {path}", path=path)
        target = (self.root / path.lstrip("/")).resolve()
        if target != self.root and self.root not in target.parents:
            raise StorageError(f"Object name escapes storage root: {path}", path=path)
        return target

    async def read_file(self, path: str) -> bytes:
        """Read a local file."""
        p = self._resolve(path)
        try:
            return p.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ObjectNotFoundError(f"Object not found: {path}", path=path) from e
        except OSError as e:
            raise StorageError(f"Reading {path} failed: {e}", path=path) from e

    async def write_file(
        self,
        path: str,
        data: bytes,
        owner: str | None = None,
        create_only: bool = False,
    ) -> None:
        """Write binary data to a local file."""
        p = self._resolve(path)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with p.open("xb" if create_only else "wb") as f:
                f.write(data)
        except FileExistsError as e:
            raise ObjectExistsError(f"Object already exists: {path}", path=path) from e
        except OSError as e:
            raise StorageError(f"Writing {path} failed: {e}", path=path) from e

    async def list_files(self, prefix: str = "", suffix: str | None = None) -> list[str]:
        """List files under root whose names match prefix and suffix."""
        # Start walking at the deepest directory the prefix fully names
        start = self.root
        if "/" in prefix:
            start = self._resolve(prefix.rsplit("/", 1)[0])
        if not start.is_dir():
            return []

        names = []
        for p in start.rglob("*"):
            if not p.is_file():
                continue
            name = p.relative_to(self.root).as_posix()
            if not name.startswith(prefix):
                continue
            if suffix is not None and not name.endswith(suffix):
                continue
            names.append(name)
        return sorted(names)

    async def delete_file(self, path: str) -> None:
        """Delete a local file and prune directories it leaves empty."""
        p = self._resolve(path)
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Deleting {path} failed: {e}", path=path) from e

        # Stop at the first directory that still holds objects
        parent = p.parent
        while parent != self.root and self.root in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent

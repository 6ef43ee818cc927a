"""Abstract hierarchical store the notification repository is built on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FileInfo:
    name: str
    is_dir: bool
    size: int = 0


class FileSystem(ABC):
    """A tree of named directories and files addressed by ``/``-separated paths.

    Paths are relative to the store root and never start with ``/``.
    Missing paths raise :class:`FileNotFoundError`; creating a directory
    that already exists raises :class:`FileExistsError`. Any other failure
    is an :class:`OSError` and is propagated to callers unchanged.
    """

    @abstractmethod
    async def mkdir(self, path: str) -> None:
        """Create a single directory. The parent must exist."""
        ...

    @abstractmethod
    async def stat(self, path: str) -> FileInfo:
        ...

    @abstractmethod
    async def read_dir(self, path: str) -> list[FileInfo]:
        """List the children of a directory, sorted by name."""
        ...

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        ...

    @abstractmethod
    async def write_file(self, path: str, data: bytes) -> None:
        """Create or truncate the file at *path*. The parent must exist."""
        ...

    @abstractmethod
    async def remove_all(self, path: str) -> None:
        """Remove *path* and, if it is a directory, everything below it."""
        ...

    @abstractmethod
    async def rename(self, old_path: str, new_path: str) -> None:
        """Atomically move *old_path* to *new_path*, replacing any file there."""
        ...

    async def mkdir_all(self, path: str) -> None:
        """Create *path* and any missing parents. Existing directories are fine."""
        parts = [p for p in path.split("/") if p]
        for i in range(1, len(parts) + 1):
            try:
                await self.mkdir("/".join(parts[:i]))
            except FileExistsError:
                continue

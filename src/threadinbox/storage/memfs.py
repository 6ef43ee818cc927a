"""In-memory FileSystem implementation."""

from __future__ import annotations

from threadinbox.storage.base import FileInfo, FileSystem

# A directory is a dict of child name -> node; a file is its bytes.
_Node = dict | bytes


def _split(path: str) -> list[str]:
    return [p for p in path.split("/") if p and p != "."]


class MemFS(FileSystem):
    """A FileSystem held entirely in process memory.

    Every method completes without suspending, so each call is atomic with
    respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._root: dict = {}

    def _lookup(self, parts: list[str]) -> _Node:
        node: _Node = self._root
        for i, name in enumerate(parts):
            if not isinstance(node, dict):
                raise NotADirectoryError("/".join(parts[:i]))
            if name not in node:
                raise FileNotFoundError("/".join(parts[: i + 1]))
            node = node[name]
        return node

    def _parent(self, path: str) -> tuple[dict, str]:
        parts = _split(path)
        if not parts:
            raise PermissionError("operation not permitted on the root directory")
        parent = self._lookup(parts[:-1])
        if not isinstance(parent, dict):
            raise NotADirectoryError("/".join(parts[:-1]))
        return parent, parts[-1]

    async def mkdir(self, path: str) -> None:
        parent, name = self._parent(path)
        if name in parent:
            raise FileExistsError(path)
        parent[name] = {}

    async def stat(self, path: str) -> FileInfo:
        parts = _split(path)
        node = self._lookup(parts)
        name = parts[-1] if parts else ""
        if isinstance(node, dict):
            return FileInfo(name=name, is_dir=True)
        return FileInfo(name=name, is_dir=False, size=len(node))

    async def read_dir(self, path: str) -> list[FileInfo]:
        node = self._lookup(_split(path))
        if not isinstance(node, dict):
            raise NotADirectoryError(path)
        return [
            FileInfo(name=name, is_dir=isinstance(child, dict), size=0 if isinstance(child, dict) else len(child))
            for name, child in sorted(node.items())
        ]

    async def read_file(self, path: str) -> bytes:
        node = self._lookup(_split(path))
        if isinstance(node, dict):
            raise IsADirectoryError(path)
        return node

    async def write_file(self, path: str, data: bytes) -> None:
        parent, name = self._parent(path)
        if isinstance(parent.get(name), dict):
            raise IsADirectoryError(path)
        parent[name] = bytes(data)

    async def remove_all(self, path: str) -> None:
        parent, name = self._parent(path)
        if name not in parent:
            raise FileNotFoundError(path)
        del parent[name]

    async def rename(self, old_path: str, new_path: str) -> None:
        old_parent, old_name = self._parent(old_path)
        if old_name not in old_parent:
            raise FileNotFoundError(old_path)
        new_parent, new_name = self._parent(new_path)
        if isinstance(new_parent.get(new_name), dict):
            raise IsADirectoryError(new_path)
        new_parent[new_name] = old_parent.pop(old_name)

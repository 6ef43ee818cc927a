"""FileSystem implementation backed by a directory on local disk."""

from __future__ import annotations

import os
import shutil
import stat as statmode
from pathlib import Path

import anyio

from threadinbox.storage.base import FileInfo, FileSystem


class LocalFS(FileSystem):
    """Stores the tree under *root*; blocking calls run in worker threads."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p and p != "."]
        if ".." in parts:
            raise PermissionError(f"path escapes store root: {path}")
        return self._root.joinpath(*parts)

    async def mkdir(self, path: str) -> None:
        await anyio.to_thread.run_sync(self._resolve(path).mkdir)

    async def stat(self, path: str) -> FileInfo:
        target = self._resolve(path)
        st = await anyio.to_thread.run_sync(os.lstat, target)
        is_dir = statmode.S_ISDIR(st.st_mode)
        return FileInfo(name=target.name, is_dir=is_dir, size=0 if is_dir else st.st_size)

    async def read_dir(self, path: str) -> list[FileInfo]:
        return await anyio.to_thread.run_sync(self._read_dir_sync, self._resolve(path))

    @staticmethod
    def _read_dir_sync(target: Path) -> list[FileInfo]:
        infos = []
        with os.scandir(target) as entries:
            for entry in entries:
                is_dir = entry.is_dir(follow_symlinks=False)
                size = 0 if is_dir else entry.stat(follow_symlinks=False).st_size
                infos.append(FileInfo(name=entry.name, is_dir=is_dir, size=size))
        return sorted(infos, key=lambda fi: fi.name)

    async def read_file(self, path: str) -> bytes:
        return await anyio.to_thread.run_sync(self._resolve(path).read_bytes)

    async def write_file(self, path: str, data: bytes) -> None:
        await anyio.to_thread.run_sync(self._resolve(path).write_bytes, data)

    async def remove_all(self, path: str) -> None:
        target = self._resolve(path)
        if target == self._root:
            raise PermissionError("operation not permitted on the root directory")
        await anyio.to_thread.run_sync(self._remove_all_sync, target)

    @staticmethod
    def _remove_all_sync(target: Path) -> None:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    async def rename(self, old_path: str, new_path: str) -> None:
        await anyio.to_thread.run_sync(os.replace, self._resolve(old_path), self._resolve(new_path))

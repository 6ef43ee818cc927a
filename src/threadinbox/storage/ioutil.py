"""Helpers for reading and writing records through a FileSystem."""

from __future__ import annotations

import posixpath

from pydantic import ValidationError as PydanticValidationError

from threadinbox.errors.exceptions import EncodingError
from threadinbox.storage.base import FileInfo, FileSystem
from threadinbox.storage.schema import StoredNotification


async def json_encode_file(fs: FileSystem, path: str, record: StoredNotification) -> None:
    """Encode *record* into the file at *path*, overwriting or creating it."""
    data = record.model_dump_json().encode("utf-8") + b"\n"
    await fs.write_file(path, data)


async def json_decode_file(fs: FileSystem, path: str) -> StoredNotification:
    """Decode the record stored at *path*.

    Store failures propagate unchanged; malformed content raises
    EncodingError.
    """
    data = await fs.read_file(path)
    try:
        return StoredNotification.model_validate_json(data)
    except PydanticValidationError as exc:
        raise EncodingError(path, f"{exc.error_count()} invalid field(s): {exc.errors()[0]['msg']}") from exc


async def create_empty_file(fs: FileSystem, path: str) -> None:
    """Create an empty file at *path*, creating parent directories if needed.

    An existing file is left untouched.
    """
    try:
        info = await fs.stat(path)
    except FileNotFoundError:
        info = None
    if info is not None:
        if info.is_dir:
            raise IsADirectoryError(path)
        return
    try:
        await fs.write_file(path, b"")
    except FileNotFoundError:
        await fs.mkdir_all(posixpath.dirname(path))
        await fs.write_file(path, b"")


async def ensure_dir(fs: FileSystem, path: str) -> None:
    """Create *path* and any missing parents; an existing directory is success."""
    try:
        await fs.mkdir(path)
    except FileExistsError:
        return
    except FileNotFoundError:
        await fs.mkdir_all(path)


async def read_dir_or_empty(fs: FileSystem, path: str) -> list[FileInfo]:
    try:
        return await fs.read_dir(path)
    except FileNotFoundError:
        return []


async def remove_if_exists(fs: FileSystem, path: str) -> bool:
    try:
        await fs.remove_all(path)
    except FileNotFoundError:
        return False
    return True


async def remove_dir_if_empty(fs: FileSystem, path: str) -> None:
    try:
        entries = await fs.read_dir(path)
    except FileNotFoundError:
        return
    if not entries:
        await fs.remove_all(path)


async def exists(fs: FileSystem, path: str) -> bool:
    try:
        await fs.stat(path)
    except FileNotFoundError:
        return False
    return True

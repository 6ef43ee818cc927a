"""Tests for the FileSystem backends and record I/O helpers.

Every backend test runs against both MemFS and LocalFS so the two stay
interchangeable under NotificationRepository.
"""

import pytest

from factories import request as make_request, thread
from threadinbox.errors.exceptions import EncodingError
from threadinbox.storage.ioutil import (
    create_empty_file,
    ensure_dir,
    json_decode_file,
    json_encode_file,
    read_dir_or_empty,
    remove_dir_if_empty,
    remove_if_exists,
)
from threadinbox.storage.localfs import LocalFS
from threadinbox.storage.memfs import MemFS
from threadinbox.storage.schema import from_request


@pytest.fixture(params=["memory", "local"])
def fs(request, tmp_path):
    if request.param == "memory":
        return MemFS()
    return LocalFS(tmp_path)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_mkdir_and_stat(fs):
    await fs.mkdir("a")
    info = await fs.stat("a")
    assert info.is_dir
    assert info.name == "a"


@pytest.mark.asyncio
async def test_mkdir_existing_raises(fs):
    await fs.mkdir("a")
    with pytest.raises(FileExistsError):
        await fs.mkdir("a")


@pytest.mark.asyncio
async def test_mkdir_without_parent_raises(fs):
    with pytest.raises(FileNotFoundError):
        await fs.mkdir("a/b")


@pytest.mark.asyncio
async def test_mkdir_all(fs):
    await fs.mkdir("a")
    await fs.mkdir_all("a/b/c")
    await fs.mkdir_all("a/b/c")
    assert (await fs.stat("a/b/c")).is_dir


@pytest.mark.asyncio
async def test_write_and_read_file(fs):
    await fs.write_file("f", b"hello")
    assert await fs.read_file("f") == b"hello"
    await fs.write_file("f", b"bye")
    assert await fs.read_file("f") == b"bye"
    info = await fs.stat("f")
    assert not info.is_dir
    assert info.size == 3


@pytest.mark.asyncio
async def test_read_missing_file_raises(fs):
    with pytest.raises(FileNotFoundError):
        await fs.read_file("nope")
    with pytest.raises(FileNotFoundError):
        await fs.stat("nope/deeper")


@pytest.mark.asyncio
async def test_read_dir_is_sorted(fs):
    await fs.mkdir("d")
    for name in ("c", "a", "b"):
        await fs.write_file(f"d/{name}", b"")
    await fs.mkdir("d/sub")

    infos = await fs.read_dir("d")
    assert [fi.name for fi in infos] == ["a", "b", "c", "sub"]
    assert [fi.is_dir for fi in infos] == [False, False, False, True]


@pytest.mark.asyncio
async def test_remove_all_is_recursive(fs):
    await fs.mkdir_all("a/b")
    await fs.write_file("a/b/f", b"x")
    await fs.remove_all("a")
    with pytest.raises(FileNotFoundError):
        await fs.stat("a")
    with pytest.raises(FileNotFoundError):
        await fs.remove_all("a")


@pytest.mark.asyncio
async def test_rename_replaces_target(fs):
    await fs.mkdir("src")
    await fs.mkdir("dst")
    await fs.write_file("src/k", b"new")
    await fs.write_file("dst/k", b"old")

    await fs.rename("src/k", "dst/k")

    assert await fs.read_file("dst/k") == b"new"
    assert await fs.read_dir("src") == []


@pytest.mark.asyncio
async def test_rename_missing_source_raises(fs):
    with pytest.raises(FileNotFoundError):
        await fs.rename("nope", "other")


@pytest.mark.asyncio
async def test_root_cannot_be_removed(fs):
    with pytest.raises(PermissionError):
        await fs.remove_all("")


@pytest.mark.asyncio
async def test_localfs_rejects_parent_traversal(tmp_path):
    fs = LocalFS(tmp_path / "root")
    with pytest.raises(PermissionError):
        await fs.read_file("../secret")


@pytest.mark.asyncio
async def test_localfs_writes_under_root(tmp_path):
    fs = LocalFS(tmp_path)
    await fs.mkdir_all("notifications/1@example.org")
    await fs.write_file("notifications/1@example.org/k", b"{}")
    assert (tmp_path / "notifications" / "1@example.org" / "k").read_bytes() == b"{}"


@pytest.mark.asyncio
async def test_localfs_stat_agrees_with_read_dir_on_symlinks(tmp_path):
    (tmp_path / "real").mkdir()
    (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
    fs = LocalFS(tmp_path)

    listed = {fi.name: fi.is_dir for fi in await fs.read_dir("")}
    assert listed == {"link": False, "real": True}
    assert (await fs.stat("link")).is_dir is False
    assert (await fs.stat("real")).is_dir is True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_json_file_round_trip(fs):
    record = from_request(thread(), make_request("Issue 1"), participating=True)
    await json_encode_file(fs, "record", record)
    assert await json_decode_file(fs, "record") == record


@pytest.mark.asyncio
async def test_json_decode_malformed_raises_encoding_error(fs):
    await fs.write_file("bad", b'{"title": 3}')
    with pytest.raises(EncodingError) as exc_info:
        await json_decode_file(fs, "bad")
    assert exc_info.value.code == "ENCODING_ERROR"
    assert exc_info.value.path == "bad"


@pytest.mark.asyncio
async def test_json_decode_missing_raises_not_found(fs):
    with pytest.raises(FileNotFoundError):
        await json_decode_file(fs, "missing")


@pytest.mark.asyncio
async def test_create_empty_file_creates_parents_and_is_idempotent(fs):
    await create_empty_file(fs, "x/y/z/marker")
    await fs.write_file("x/y/z/other", b"keep")
    await create_empty_file(fs, "x/y/z/marker")

    assert await fs.read_file("x/y/z/marker") == b""
    assert [fi.name for fi in await fs.read_dir("x/y/z")] == ["marker", "other"]


@pytest.mark.asyncio
async def test_ensure_dir(fs):
    await ensure_dir(fs, "a/b")
    await ensure_dir(fs, "a/b")
    assert (await fs.stat("a/b")).is_dir


@pytest.mark.asyncio
async def test_missing_paths_are_empty(fs):
    assert await read_dir_or_empty(fs, "nope") == []
    assert await remove_if_exists(fs, "nope") is False
    await remove_dir_if_empty(fs, "nope")


@pytest.mark.asyncio
async def test_remove_dir_if_empty(fs):
    await fs.mkdir_all("full/empty")
    await remove_dir_if_empty(fs, "full")
    assert (await fs.stat("full")).is_dir

    await remove_dir_if_empty(fs, "full/empty")
    assert await fs.read_dir("full") == []

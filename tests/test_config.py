"""Tests for settings, wiring and logging configuration."""

import io
import json
import logging
from datetime import timedelta

import pytest

from factories import GOPHER1, GOPHER2, request, thread
from threadinbox.config import Settings
from threadinbox.dependencies import build_filesystem, build_repository
from threadinbox.logging_config import configure_logging, inbox_context
from threadinbox.storage.localfs import LocalFS
from threadinbox.storage.memfs import MemFS


def test_settings_defaults(monkeypatch):
    for name in ("STORAGE_BACKEND", "ROOT_DIR", "RETENTION_DAYS", "ARCHIVE_READ"):
        monkeypatch.delenv(f"THREADINBOX_{name}", raising=False)
    s = Settings(_env_file=None)
    assert s.storage_backend == "local"
    assert s.retention_days == 30
    assert s.archive_read is True


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("THREADINBOX_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("THREADINBOX_RETENTION_DAYS", "7")
    monkeypatch.setenv("THREADINBOX_ARCHIVE_READ", "false")
    s = Settings(_env_file=None)
    assert s.storage_backend == "memory"
    assert s.retention_days == 7
    assert s.archive_read is False


def test_build_filesystem_local_creates_root(tmp_path):
    root = tmp_path / "inbox"
    fs = build_filesystem(Settings(_env_file=None, storage_backend="local", root_dir=str(root)))
    assert isinstance(fs, LocalFS)
    assert root.is_dir()


def test_build_repository_applies_settings(users):
    repo = build_repository(
        users,
        Settings(_env_file=None, storage_backend="memory", retention_days=7, archive_read=False),
    )
    assert isinstance(repo.fs, MemFS)
    assert repo.retention == timedelta(days=7)
    assert repo.archive_read is False


@pytest.mark.asyncio
async def test_local_repository_end_to_end(tmp_path, users):
    repo = build_repository(users, Settings(_env_file=None, root_dir=str(tmp_path)))
    await repo.subscribe(thread(repo="github.com/user/repo"), [GOPHER1])
    with users.acting_as(GOPHER2):
        await repo.notify(thread(repo="github.com/user/repo"), request("Issue 1"))

    assert await repo.count(GOPHER1) == 1
    await repo.mark_read(GOPHER1, thread(repo="github.com/user/repo"))
    assert (tmp_path / "read" / "1@example.org" / "github.com%2Fuser%2Frepo-issues-1").is_file()
    assert not (tmp_path / "notifications" / "1@example.org").exists()


def test_json_logging_includes_bound_context():
    stream = io.StringIO()
    configure_logging(log_level="debug", json_output=True, stream=stream)
    try:
        with inbox_context(user="1@example.org", operation="list"):
            logging.getLogger("threadinbox.test").info("Listed %d notifications", 3)
    finally:
        logging.getLogger("threadinbox").handlers.clear()

    entry = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert entry["event"] == "Listed 3 notifications"
    assert entry["user"] == "1@example.org"
    assert entry["operation"] == "list"
    assert entry["level"] == "info"

"""Construction of repositories from settings."""

from datetime import timedelta
from pathlib import Path

from threadinbox.config import Settings, settings as default_settings
from threadinbox.identity.base import UsersService
from threadinbox.repositories.notification_repo import NotificationRepository
from threadinbox.storage.base import FileSystem
from threadinbox.storage.localfs import LocalFS
from threadinbox.storage.memfs import MemFS


def build_filesystem(settings: Settings | None = None) -> FileSystem:
    """Return the storage backend selected by ``storage_backend``.

    The local backend's root directory is created if missing.
    """
    settings = settings or default_settings
    if settings.storage_backend == "memory":
        return MemFS()
    root = Path(settings.root_dir)
    root.mkdir(parents=True, exist_ok=True)
    return LocalFS(root)


def build_repository(users: UsersService, settings: Settings | None = None) -> NotificationRepository:
    """Wire a NotificationRepository; construct one per backing store."""
    settings = settings or default_settings
    return NotificationRepository(
        build_filesystem(settings),
        users,
        retention=timedelta(days=settings.retention_days),
        archive_read=settings.archive_read,
    )

"""Notification repository: a per-user inbox stored in a FileSystem.

Each user has an unread area and a read area; a notification's read state is
encoded by which area its file lives in. See ``threadinbox.storage.layout``
for the tree layout.

Read records older than the retention window are pruned only when someone
lists their inbox with ``include_read``. An inbox nobody reads keeps expired
records until its next such listing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Protocol

from threadinbox.errors.exceptions import EncodingError, ValidationError
from threadinbox.identity.base import UsersService
from threadinbox.logging_config import inbox_context
from threadinbox.models.notification import (
    ListOptions,
    Notification,
    NotificationRequest,
    RepoSpec,
    ThreadRef,
)
from threadinbox.models.user import User, UserSpec
from threadinbox.repositories.base import BaseRepository
from threadinbox.storage import layout
from threadinbox.storage.base import FileSystem
from threadinbox.storage.ioutil import (
    create_empty_file,
    ensure_dir,
    exists,
    json_decode_file,
    json_encode_file,
    read_dir_or_empty,
    remove_dir_if_empty,
    remove_if_exists,
)
from threadinbox.storage.schema import from_notification, from_request, to_notification

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=30)


class NotificationSource(Protocol):
    async def list(self, caller: UserSpec, options: ListOptions | None = None) -> list[Notification]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def sort_newest_first(notifications: list[Notification]) -> None:
    """Sort in place by update time, most recent first; ties ordered by key."""
    notifications.sort(key=lambda n: (layout.notification_key(n.thread), n.read))
    notifications.sort(key=lambda n: n.updated_at, reverse=True)


class NotificationRepository(BaseRepository):
    """Inbox operations over a FileSystem, guarded by one readers-writer lock.

    Args:
        fs: Backing store.
        users: Identity resolver; also supplies the acting user for
            notify() and subscribe().
        retention: How long read notifications are kept.
        archive_read: If True, marking read moves a notification to the read
            area. If False, it is deleted outright and no read area is kept.
        clock: Returns the current time; used for retention.
    """

    def __init__(
        self,
        fs: FileSystem,
        users: UsersService,
        *,
        retention: timedelta = DEFAULT_RETENTION,
        archive_read: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ):
        super().__init__(fs, users)
        self.retention = retention
        self.archive_read = archive_read
        self._clock = clock

    # ── Reads ──────────────────────────────────────────────────────────────────

    async def list(self, caller: UserSpec, options: ListOptions | None = None) -> list[Notification]:
        """List the caller's notifications, newest first.

        Unread notifications are always included; read ones only with
        ``options.include_read``. Listing read notifications deletes those
        older than the retention window.
        """
        self.require_authenticated(caller)
        options = options or ListOptions()
        users: dict[UserSpec, User] = {}

        with inbox_context(user=str(caller), operation="list"):
            async with self._lock.read():
                notifications = await self._list_unread(caller, options.repo, users)
                if options.include_read and self.archive_read:
                    notifications += await self._list_read(caller, options.repo, users)

        sort_newest_first(notifications)
        return notifications

    async def _list_unread(
        self, caller: UserSpec, repo: RepoSpec | None, users: dict[UserSpec, User]
    ) -> list[Notification]:
        notifications = []
        for fi in await read_dir_or_empty(self.fs, layout.notifications_dir(caller)):
            if fi.is_dir:
                continue
            stored = await json_decode_file(self.fs, layout.notification_path(caller, fi.name))
            if repo is not None and stored.repo != repo.uri:
                continue
            actor = await self.resolve_user(stored.actor_spec, users)
            notifications.append(to_notification(stored, actor, read=False))
        return notifications

    async def _list_read(
        self, caller: UserSpec, repo: RepoSpec | None, users: dict[UserSpec, User]
    ) -> list[Notification]:
        cutoff = self._clock() - self.retention
        notifications = []
        for fi in await read_dir_or_empty(self.fs, layout.read_dir(caller)):
            if fi.is_dir:
                continue
            path = layout.read_path(caller, fi.name)
            try:
                stored = await json_decode_file(self.fs, path)
            except FileNotFoundError:
                # Pruned by a concurrent listing.
                continue

            if stored.updated_at < cutoff:
                if await remove_if_exists(self.fs, path):
                    logger.info("Pruned expired read notification %s", path)
                continue

            if repo is not None and stored.repo != repo.uri:
                continue
            actor = await self.resolve_user(stored.actor_spec, users)
            notifications.append(to_notification(stored, actor, read=True))

        await self._remove_dir_if_empty(layout.read_dir(caller))
        return notifications

    async def count(self, caller: UserSpec) -> int:
        """Return the number of unread notifications. Never prunes."""
        self.require_authenticated(caller)
        async with self._lock.read():
            entries = await read_dir_or_empty(self.fs, layout.notifications_dir(caller))
        return sum(1 for fi in entries if not fi.is_dir)

    # ── Writes ─────────────────────────────────────────────────────────────────

    async def notify(self, thread: ThreadRef, request: NotificationRequest) -> int:
        """Deliver a notification about *thread* to everyone interested in it.

        Recipients are the repository's watchers and the thread's subscribers,
        except the acting user. Thread subscribers are delivered with
        ``participating=True``, watchers-only with ``participating=False``.
        A previously read notification for the same thread is replaced, so
        the thread shows up as unread again.

        There is no atomicity across recipients: if a write fails the error
        propagates and recipients already written stay notified.

        Returns the number of recipients written.
        """
        if thread.is_whole_repo:
            raise ValidationError("notify requires a thread, not a whole repository")
        actor = await self.authenticated_user()
        key = layout.notification_key(thread)

        with inbox_context(user=str(actor), operation="notify"):
            async with self._lock.write():
                subscribers = await self._subscribers(thread)
                delivered = 0
                for subscriber in sorted(subscribers, key=lambda u: (u.domain, u.id)):
                    if subscriber == actor:
                        # Don't notify users of their own actions.
                        continue
                    await remove_if_exists(self.fs, layout.read_path(subscriber, key))
                    await ensure_dir(self.fs, layout.notifications_dir(subscriber))
                    record = from_request(thread, request, participating=subscribers[subscriber])
                    await json_encode_file(self.fs, layout.notification_path(subscriber, key), record)
                    delivered += 1

            logger.debug("Delivered %s to %d of %d subscribers", key, delivered, len(subscribers))
        return delivered

    async def _subscribers(self, thread: ThreadRef) -> dict[UserSpec, bool]:
        """Map each interested user to their participating flag."""
        subscribers: dict[UserSpec, bool] = {}
        # Thread subscribers are read after repo watchers so they take precedence.
        scopes = [(ThreadRef.whole_repo(thread.repo), False), (thread, True)]
        for scope, participating in scopes:
            for fi in await read_dir_or_empty(self.fs, layout.subscribers_dir(scope)):
                if fi.is_dir:
                    continue
                try:
                    subscriber = layout.unmarshal_user_spec(fi.name)
                except ValidationError:
                    continue
                subscribers[subscriber] = participating
        return subscribers

    async def subscribe(self, thread: ThreadRef, subscribers: Iterable[UserSpec]) -> None:
        """Subscribe users to *thread*, or watch the repo for a whole-repo ref.

        Subscribing someone who is already subscribed is a no-op.
        """
        actor = await self.authenticated_user()
        with inbox_context(user=str(actor), operation="subscribe"):
            async with self._lock.write():
                for subscriber in subscribers:
                    await create_empty_file(self.fs, layout.subscriber_path(thread, subscriber))

    async def mark_read(self, caller: UserSpec, thread: ThreadRef) -> None:
        """Mark the caller's notification about *thread* read.

        Missing notifications are ignored, so this is safe to retry.
        """
        self.require_authenticated(caller)
        key = layout.notification_key(thread)

        with inbox_context(user=str(caller), operation="mark_read"):
            async with self._lock.write():
                if not await exists(self.fs, layout.notification_path(caller, key)):
                    return
                await self._retire(caller, key)
                await self._remove_dir_if_empty(layout.notifications_dir(caller))

    async def mark_all_read(self, caller: UserSpec, repo: RepoSpec) -> int:
        """Mark every unread notification of the caller in *repo* read.

        Records that cannot be decoded are logged and left in place.
        Returns the number of notifications marked read.
        """
        self.require_authenticated(caller)
        marked = 0

        with inbox_context(user=str(caller), operation="mark_all_read"):
            async with self._lock.write():
                for fi in await read_dir_or_empty(self.fs, layout.notifications_dir(caller)):
                    if fi.is_dir:
                        continue
                    try:
                        ref = layout.parse_notification_key(fi.name)
                    except ValidationError:
                        logger.warning("Skipping stray inbox entry %s", fi.name)
                        continue
                    if ref.repo != repo:
                        continue
                    path = layout.notification_path(caller, fi.name)
                    try:
                        stored = await json_decode_file(self.fs, path)
                    except EncodingError as exc:
                        logger.warning("Skipping unreadable notification: %s", exc)
                        continue
                    if stored.thread != ref:
                        logger.warning("Skipping notification %s stored under another key", path)
                        continue
                    await self._retire(caller, fi.name)
                    marked += 1

                await self._remove_dir_if_empty(layout.notifications_dir(caller))
        return marked

    async def copy_from(
        self,
        src: NotificationSource,
        caller: UserSpec,
        dst: UserSpec,
        options: ListOptions | None = None,
    ) -> int:
        """Copy the notifications *caller* can see in *src* into *dst*'s unread area.

        Used to migrate an inbox between backends. Returns the number copied.
        """
        if not dst.is_authenticated:
            raise ValidationError("copy destination must be a registered user")
        notifications = await src.list(caller, options)

        with inbox_context(user=str(dst), operation="copy_from"):
            async with self._lock.write():
                await ensure_dir(self.fs, layout.notifications_dir(dst))
                for n in notifications:
                    key = layout.notification_key(n.thread)
                    await remove_if_exists(self.fs, layout.read_path(dst, key))
                    await json_encode_file(self.fs, layout.notification_path(dst, key), from_notification(n))
            logger.info("Copied %d notifications", len(notifications))
        return len(notifications)

    # ── Helpers ────────────────────────────────────────────────────────────────

    async def _retire(self, user: UserSpec, key: str) -> None:
        """Move an unread notification to the read area, or delete it."""
        if not self.archive_read:
            await self.fs.remove_all(layout.notification_path(user, key))
            return
        await ensure_dir(self.fs, layout.read_dir(user))
        await self.fs.rename(layout.notification_path(user, key), layout.read_path(user, key))

    async def _remove_dir_if_empty(self, path: str) -> None:
        try:
            await remove_dir_if_empty(self.fs, path)
        except FileNotFoundError:
            # Removed concurrently.
            pass

"""Base repository with plumbing shared by FileSystem-backed repositories."""

from __future__ import annotations

import logging

from threadinbox.concurrency import RWLock
from threadinbox.errors.exceptions import PermissionDeniedError
from threadinbox.identity.base import UsersService
from threadinbox.models.user import User, UserSpec
from threadinbox.storage.base import FileSystem

logger = logging.getLogger(__name__)


class BaseRepository:
    """Owns a FileSystem, an identity resolver and the lock guarding both.

    The lock is private: subclasses take ``self._lock.read()`` or
    ``self._lock.write()`` around each public operation and never hand it out.
    """

    def __init__(self, fs: FileSystem, users: UsersService):
        self.fs = fs
        self.users = users
        self._lock = RWLock()

    @staticmethod
    def require_authenticated(user: UserSpec) -> UserSpec:
        if not user.is_authenticated:
            raise PermissionDeniedError()
        return user

    async def authenticated_user(self) -> UserSpec:
        """Return the acting user from the identity resolver, or raise."""
        return self.require_authenticated(await self.users.get_authenticated_spec())

    async def resolve_user(self, spec: UserSpec, cache: dict[UserSpec, User] | None = None) -> User:
        """Resolve display attributes, falling back to a synthesized user."""
        if cache is not None and spec in cache:
            return cache[spec]
        try:
            user = await self.users.get(spec)
        except Exception as exc:
            logger.warning("Falling back to placeholder for user %s: %s", spec, exc)
            user = User.fallback(spec)
        if cache is not None:
            cache[spec] = user
        return user

"""In-process UsersService backed by a fixed registry of users."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from threadinbox.identity.base import UsersService
from threadinbox.models.user import User, UserSpec

ANONYMOUS = UserSpec(id=0, domain="")


class StaticUsersService(UsersService):
    def __init__(self, users: Iterable[User] = (), current: UserSpec = ANONYMOUS) -> None:
        self._users: dict[UserSpec, User] = {u.spec: u for u in users}
        self.current = current

    async def get(self, user: UserSpec) -> User:
        try:
            return self._users[user]
        except KeyError:
            raise LookupError(f"user {user} not found") from None

    async def get_authenticated_spec(self) -> UserSpec:
        return self.current

    @contextmanager
    def acting_as(self, user: UserSpec) -> Iterator[UserSpec]:
        """Temporarily switch the authenticated user."""
        previous = self.current
        self.current = user
        try:
            yield user
        finally:
            self.current = previous

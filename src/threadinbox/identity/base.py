"""Abstract identity resolver consumed by the notification repository."""

from __future__ import annotations

from abc import ABC, abstractmethod

from threadinbox.models.user import User, UserSpec


class UsersService(ABC):
    """Resolves user specs to display attributes and reports who is acting."""

    @abstractmethod
    async def get(self, user: UserSpec) -> User:
        """Return display attributes for *user*.

        Raises:
            LookupError: If the user is unknown to this service.
        """
        ...

    @abstractmethod
    async def get_authenticated_spec(self) -> UserSpec:
        """Return the acting user, or a spec with id 0 if nobody is authenticated."""
        ...

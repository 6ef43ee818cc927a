"""Shared test fixtures."""

import pytest

from factories import GOPHER1, GOPHER2, FrozenClock
from threadinbox.identity.static import StaticUsersService
from threadinbox.models.user import User
from threadinbox.repositories.notification_repo import NotificationRepository
from threadinbox.storage.memfs import MemFS


@pytest.fixture
def users():
    """Two known users; gopher1 is authenticated."""
    return StaticUsersService(
        [
            User(spec=GOPHER1, login="gopher1", avatar_url="https://example.org/1.png"),
            User(spec=GOPHER2, login="gopher2"),
        ],
        current=GOPHER1,
    )


@pytest.fixture
def memfs():
    return MemFS()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def repo(memfs, users, clock):
    return NotificationRepository(memfs, users, clock=clock)

"""Constants and builders shared by the test modules."""

from datetime import datetime, timedelta, timezone

from threadinbox.models.notification import NotificationRequest, RepoSpec, ThreadRef
from threadinbox.models.user import UserSpec

GOPHER1 = UserSpec(id=1, domain="example.org")
GOPHER2 = UserSpec(id=2, domain="example.org")
GOPHER3 = UserSpec(id=3, domain="example.org")
ANONYMOUS = UserSpec(id=0, domain="")

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Settable clock handed to the repository for retention checks."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def thread(repo: str = "repo", thread_type: str = "issues", thread_id: int = 1) -> ThreadRef:
    return ThreadRef(repo=RepoSpec(uri=repo), thread_type=thread_type, thread_id=thread_id)


def request(title: str, actor: UserSpec = GOPHER2, updated_at: datetime = NOW, **kwargs) -> NotificationRequest:
    return NotificationRequest(title=title, actor=actor, updated_at=updated_at, **kwargs)

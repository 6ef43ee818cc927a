"""Pydantic models for threads and notifications."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from threadinbox.models.user import User, UserSpec


class RepoSpec(BaseModel):
    """Opaque repository identifier, e.g. ``github.com/user/repo``."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(min_length=1)

    def __str__(self) -> str:
        return self.uri


class ThreadRef(BaseModel):
    """Subject of a notification: (repo, thread type, thread id).

    An empty thread type with a zero thread id refers to the whole
    repository and is only meaningful as a subscription scope.
    """

    model_config = ConfigDict(frozen=True)

    repo: RepoSpec
    thread_type: str = ""
    thread_id: int = Field(0, ge=0)

    @classmethod
    def whole_repo(cls, repo: RepoSpec) -> "ThreadRef":
        return cls(repo=repo)

    @property
    def is_whole_repo(self) -> bool:
        return self.thread_type == "" and self.thread_id == 0


class RGB(BaseModel):
    """24-bit color without alpha channel."""

    model_config = ConfigDict(frozen=True)

    r: int = Field(0, ge=0, le=255)
    g: int = Field(0, ge=0, le=255)
    b: int = Field(0, ge=0, le=255)

    def hex(self) -> str:
        """Return a hexadecimal color string, e.g. ``#ff0000`` for red."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


# ── Request models ─────────────────────────────────────────────────────────────

class NotificationRequest(BaseModel):
    """Content of a notification, as supplied by a producer to notify()."""

    title: str
    icon: str = ""
    color: RGB = Field(default_factory=RGB)
    actor: UserSpec
    updated_at: datetime
    html_url: str = ""


class ListOptions(BaseModel):
    repo: RepoSpec | None = None
    include_read: bool = False


# ── Response models ────────────────────────────────────────────────────────────

class Notification(BaseModel):
    repo: RepoSpec
    thread_type: str
    thread_id: int
    title: str
    icon: str
    color: RGB
    actor: User
    updated_at: datetime
    read: bool = False
    html_url: str = ""
    participating: bool = False

    @property
    def thread(self) -> ThreadRef:
        return ThreadRef(repo=self.repo, thread_type=self.thread_type, thread_id=self.thread_id)

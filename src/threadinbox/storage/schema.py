"""On-disk representation of notifications.

These models are the persisted format only. They are kept apart from the
public models in ``threadinbox.models`` so the storage format can evolve
without touching the public contract; the functions below map between the
two.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from threadinbox.models.notification import (
    RGB,
    Notification,
    NotificationRequest,
    RepoSpec,
    ThreadRef,
)
from threadinbox.models.user import User, UserSpec


class StoredUserSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int = Field(ge=0)
    domain: str = ""


class StoredRGB(BaseModel):
    model_config = ConfigDict(extra="ignore")

    r: int = Field(0, ge=0, le=255)
    g: int = Field(0, ge=0, le=255)
    b: int = Field(0, ge=0, le=255)


class StoredNotification(BaseModel):
    """One notification file. The read state is never stored; it is implied
    by whether the file lives in the unread or the read area."""

    model_config = ConfigDict(extra="ignore")

    repo: str = Field(min_length=1)
    thread_type: str = ""
    thread_id: int = Field(0, ge=0)
    title: str
    icon: str = ""
    color: StoredRGB = Field(default_factory=StoredRGB)
    actor: StoredUserSpec
    updated_at: datetime
    html_url: str = ""
    participating: bool = False

    @field_validator("updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def thread(self) -> ThreadRef:
        return ThreadRef(
            repo=RepoSpec(uri=self.repo),
            thread_type=self.thread_type,
            thread_id=self.thread_id,
        )

    @property
    def actor_spec(self) -> UserSpec:
        return UserSpec(id=self.actor.id, domain=self.actor.domain)


def from_user_spec(user: UserSpec) -> StoredUserSpec:
    return StoredUserSpec(id=user.id, domain=user.domain)


def from_rgb(color: RGB) -> StoredRGB:
    return StoredRGB(r=color.r, g=color.g, b=color.b)


def to_rgb(color: StoredRGB) -> RGB:
    return RGB(r=color.r, g=color.g, b=color.b)


def from_request(
    thread: ThreadRef,
    request: NotificationRequest,
    participating: bool,
) -> StoredNotification:
    """Build the record written for one subscriber by notify()."""
    return StoredNotification(
        repo=thread.repo.uri,
        thread_type=thread.thread_type,
        thread_id=thread.thread_id,
        title=request.title,
        icon=request.icon,
        color=from_rgb(request.color),
        actor=from_user_spec(request.actor),
        updated_at=request.updated_at,
        html_url=request.html_url,
        participating=participating,
    )


def from_notification(notification: Notification) -> StoredNotification:
    return StoredNotification(
        repo=notification.repo.uri,
        thread_type=notification.thread_type,
        thread_id=notification.thread_id,
        title=notification.title,
        icon=notification.icon,
        color=from_rgb(notification.color),
        actor=from_user_spec(notification.actor.spec),
        updated_at=notification.updated_at,
        html_url=notification.html_url,
        participating=notification.participating,
    )


def to_notification(stored: StoredNotification, actor: User, read: bool) -> Notification:
    return Notification(
        repo=RepoSpec(uri=stored.repo),
        thread_type=stored.thread_type,
        thread_id=stored.thread_id,
        title=stored.title,
        icon=stored.icon,
        color=to_rgb(stored.color),
        actor=actor,
        updated_at=stored.updated_at,
        read=read,
        html_url=stored.html_url,
        participating=stored.participating,
    )

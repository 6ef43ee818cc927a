"""Public models for the notification inbox."""

from threadinbox.models.notification import (
    RGB,
    ListOptions,
    Notification,
    NotificationRequest,
    RepoSpec,
    ThreadRef,
)
from threadinbox.models.user import User, UserSpec

__all__ = [
    "RGB",
    "ListOptions",
    "Notification",
    "NotificationRequest",
    "RepoSpec",
    "ThreadRef",
    "User",
    "UserSpec",
]

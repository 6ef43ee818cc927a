"""Store path layout and key encoding.

Tree layout::

    root
    ├── notifications
    │   └── {user}
    │       └── {key}                  encoded notification (unread)
    ├── read
    │   └── {user}
    │       └── {key}                  encoded notification (read)
    └── subscribers
        └── {repo}
            ├── {user}                 empty file, repo watcher
            └── {threadType}-{threadID}
                └── {user}             empty file, thread subscriber

``{user}`` is ``"{id}@{domain}"`` and ``{key}`` is
``"{repo}-{threadType}-{threadID}"``. Free-form components are
percent-escaped with ``-``, ``/``, ``@`` and ``%`` always escaped, so ``-``
only occurs as a separator and each component is a single path segment.
"""

from __future__ import annotations

import posixpath
from urllib.parse import quote, unquote

from threadinbox.errors.exceptions import ValidationError
from threadinbox.models.notification import RepoSpec, ThreadRef
from threadinbox.models.user import UserSpec

NOTIFICATIONS_ROOT = "notifications"
READ_ROOT = "read"
SUBSCRIBERS_ROOT = "subscribers"


def escape_component(value: str) -> str:
    escaped = quote(value, safe="").replace("-", "%2D")
    if escaped.startswith("."):
        # Keep "." and ".." from ever forming a segment.
        escaped = "%2E" + escaped[1:]
    return escaped


def unescape_component(value: str) -> str:
    return unquote(value)


def marshal_user_spec(user: UserSpec) -> str:
    return f"{user.id}@{escape_component(user.domain)}"


def unmarshal_user_spec(name: str) -> UserSpec:
    """Parse a ``{user}`` path segment back into a UserSpec.

    Raises ValidationError for names that are not user segments, such as
    stray files in a subscribers directory.
    """
    spec = UserSpec.parse(name)
    return UserSpec(id=spec.id, domain=unescape_component(spec.domain))


def _is_ascii_number(value: str) -> bool:
    return value.isascii() and value.isdecimal()


def notification_key(thread: ThreadRef) -> str:
    return "-".join((
        escape_component(thread.repo.uri),
        escape_component(thread.thread_type),
        str(thread.thread_id),
    ))


def parse_notification_key(key: str) -> ThreadRef:
    parts = key.split("-")
    if len(parts) != 3 or not parts[0] or not _is_ascii_number(parts[2]):
        raise ValidationError(f"{key!r} is not a notification key")
    return ThreadRef(
        repo=RepoSpec(uri=unescape_component(parts[0])),
        thread_type=unescape_component(parts[1]),
        thread_id=int(parts[2]),
    )


def notifications_dir(user: UserSpec) -> str:
    return posixpath.join(NOTIFICATIONS_ROOT, marshal_user_spec(user))


def notification_path(user: UserSpec, key: str) -> str:
    return posixpath.join(notifications_dir(user), key)


def read_dir(user: UserSpec) -> str:
    return posixpath.join(READ_ROOT, marshal_user_spec(user))


def read_path(user: UserSpec, key: str) -> str:
    return posixpath.join(read_dir(user), key)


def subscribers_dir(thread: ThreadRef) -> str:
    repo_dir = posixpath.join(SUBSCRIBERS_ROOT, escape_component(thread.repo.uri))
    if thread.is_whole_repo:
        return repo_dir
    return posixpath.join(repo_dir, f"{escape_component(thread.thread_type)}-{thread.thread_id}")


def subscriber_path(thread: ThreadRef, subscriber: UserSpec) -> str:
    return posixpath.join(subscribers_dir(thread), marshal_user_spec(subscriber))

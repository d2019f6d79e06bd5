"""Client-side notice popup with day-scoped dismissals."""

from .dismissal import DISMISSED_KEY, DismissalLog
from .engine import (
    NoticeFetchError,
    NoticePopup,
    PopupState,
    http_notice_source,
)
from .store import JSONFileStore, KeyValueStore, MemoryStore

__all__ = [
    "DISMISSED_KEY",
    "DismissalLog",
    "JSONFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NoticeFetchError",
    "NoticePopup",
    "PopupState",
    "http_notice_source",
]

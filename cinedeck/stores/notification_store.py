from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from cinedeck.stores.models import Notification, NotificationKind
from cinedeck.stores.persistence import KeyValueStorage, load_state, save_state
from cinedeck.utils.logger import LoggerProtocol, get_logger

STORAGE_KEY = "cinema-notifications"
VISIBLE_LIMIT = 3

default_logger = get_logger("NotificationStore")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as local time."""
    return value.astimezone(UTC)


class NotificationStore:
    """Notifications, newest first. Only the 3 most recent are shown at once."""

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], datetime] = _utc_now,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self.logger = logger or default_logger
        self._lock = threading.Lock()
        state = load_state(self._storage, STORAGE_KEY, self.logger) or {}
        self.notifications: list[Notification] = [n for n in state.get("notifications") or [] if isinstance(n, dict)]

    def _persist(self) -> None:
        save_state(self._storage, STORAGE_KEY, {"notifications": self.notifications})

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.get("read"))

    def visible(self) -> list[Notification]:
        return self.notifications[:VISIBLE_LIMIT]

    def add(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        *,
        expires_at: datetime | None = None,
        action_text: str | None = None,
        action_url: str | None = None,
    ) -> Notification:
        notification: Notification = {
            "id": str(uuid.uuid4()),
            "kind": kind,
            "title": title,
            "message": message,
            "read": False,
            "created_at": self._clock().isoformat(),
            "expires_at": _as_utc(expires_at).isoformat() if expires_at else None,
            "action_text": action_text,
            "action_url": action_url,
        }
        with self._lock:
            self.notifications = [notification, *self.notifications]
            self._persist()
        self.logger.debug("🔔 %s: %s", title, message)
        return notification

    def _replace(self, notifications: list[Notification]) -> None:
        with self._lock:
            self.notifications = notifications
            self._persist()

    def remove(self, notification_id: str) -> None:
        self._replace([n for n in self.notifications if n["id"] != notification_id])

    def mark_as_read(self, notification_id: str) -> None:
        self._replace([{**n, "read": True} if n["id"] == notification_id else n for n in self.notifications])

    def mark_all_as_read(self) -> None:
        self._replace([{**n, "read": True} for n in self.notifications])

    def clear(self) -> None:
        self._replace([])

    def clear_expired(self) -> int:
        """Drop notifications whose `expires_at` has passed; the others never expire."""
        now = _as_utc(self._clock())

        def alive(n: dict[str, Any]) -> bool:
            expires_at = n.get("expires_at")
            return not expires_at or _as_utc(datetime.fromisoformat(expires_at)) > now

        kept = [n for n in self.notifications if alive(n)]
        removed = len(self.notifications) - len(kept)
        if removed:
            self._replace(kept)
            self.logger.info("🧹 %s expired notifications removed", removed)
        return removed

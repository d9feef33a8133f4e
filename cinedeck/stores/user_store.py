"""
Local mirror of the signed-in user (`cinema-user`).

The identity provider is the source of truth for who is signed in; this store
keeps the app-side extras (preferences, watchlist, favorites, ratings).
"""

from __future__ import annotations

import copy
import threading
from datetime import UTC, datetime
from typing import Any

from cinedeck.stores.models import IdentityProfile, User, UserPreferences, default_preferences
from cinedeck.stores.persistence import KeyValueStorage, load_state, save_state
from cinedeck.utils.logger import LoggerProtocol, get_logger

STORAGE_KEY = "cinema-user"

default_logger = get_logger("UserMirrorStore")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _restore_user(raw: Any) -> User | None:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    user = copy.deepcopy(raw)
    # JSON object keys are strings
    user["ratings"] = {int(k): v for k, v in (raw.get("ratings") or {}).items()}
    user.setdefault("watchlist", [])
    user.setdefault("favorites", [])
    user.setdefault("preferences", default_preferences())
    return user  # type: ignore[return-value]


class UserMirrorStore:
    def __init__(self, storage: KeyValueStorage, logger: LoggerProtocol | None = None) -> None:
        self._storage = storage
        self.logger = logger or default_logger
        self._lock = threading.Lock()
        state = load_state(self._storage, STORAGE_KEY, self.logger) or {}
        self.user: User | None = _restore_user(state.get("user"))

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _persist(self) -> None:
        save_state(
            self._storage,
            STORAGE_KEY,
            {"user": self.user, "is_authenticated": self.is_authenticated},
        )

    def set_user(self, user: User | None) -> None:
        with self._lock:
            self.user = user
            self._persist()

    # ======================
    # IDENTITY
    # ======================

    def sync_from_identity(self, profile: IdentityProfile | None) -> User | None:
        """
        Mirror the identity provider's signed-in user.

        Preferences and collections carry over only when the stored record belongs
        to the same id; a different id starts from defaults. `None` signs out.
        """
        if profile is None:
            self.sign_out()
            return None

        current = self.user if self.user and self.user.get("id") == profile["id"] else None

        user: User = {
            "id": profile["id"],
            "username": profile.get("username") or profile.get("first_name") or "user",
            "email": profile.get("email") or "",
            "avatar": profile.get("image_url"),
            "preferences": current["preferences"] if current else default_preferences(),
            "watchlist": current["watchlist"] if current else [],
            "favorites": current["favorites"] if current else [],
            "ratings": current["ratings"] if current else {},
            "created_at": profile.get("created_at") or (current or {}).get("created_at") or _now_iso(),
            "updated_at": _now_iso(),
        }
        if current is None:
            self.logger.info("👤 Signed in as %s", user["username"])
        self.set_user(user)
        return user

    def sign_out(self) -> None:
        if self.user is not None:
            self.logger.info("👋 Signed out")
        self.set_user(None)

    # ======================
    # MUTATIONS (no-ops while signed out)
    # ======================

    def _update(self, **changes: Any) -> None:
        # caller holds self._lock
        if self.user is None:
            return
        self.user = {**self.user, **changes, "updated_at": _now_iso()}  # type: ignore[typeddict-item]
        self._persist()

    def update_preferences(self, preferences: UserPreferences) -> None:
        with self._lock:
            if self.user is None:
                return
            self._update(preferences={**self.user.get("preferences", {}), **preferences})

    def add_to_watchlist(self, movie_id: int) -> None:
        with self._lock:
            if self.user is None or movie_id in self.user["watchlist"]:
                return
            self._update(watchlist=[*self.user["watchlist"], movie_id])

    def remove_from_watchlist(self, movie_id: int) -> None:
        with self._lock:
            if self.user is None:
                return
            self._update(watchlist=[m for m in self.user["watchlist"] if m != movie_id])

    def add_to_favorites(self, movie_id: int) -> None:
        with self._lock:
            if self.user is None or movie_id in self.user["favorites"]:
                return
            self._update(favorites=[*self.user["favorites"], movie_id])

    def remove_from_favorites(self, movie_id: int) -> None:
        with self._lock:
            if self.user is None:
                return
            self._update(favorites=[m for m in self.user["favorites"] if m != movie_id])

    def rate_movie(self, movie_id: int, rating: float) -> None:
        with self._lock:
            if self.user is None:
                return
            self._update(ratings={**self.user["ratings"], movie_id: rating})

    # ======================
    # READS
    # ======================

    def is_in_watchlist(self, movie_id: int) -> bool:
        return self.user is not None and movie_id in self.user["watchlist"]

    def is_in_favorites(self, movie_id: int) -> bool:
        return self.user is not None and movie_id in self.user["favorites"]

    def get_movie_rating(self, movie_id: int) -> float | None:
        if self.user is None:
            return None
        return self.user["ratings"].get(movie_id)

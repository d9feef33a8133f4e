"""
Persisted response cache (`cinema-cache`).

Survives restarts, unlike the in-process query cache: lists and details expire
after 15 minutes, the genre list after an hour.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from cinedeck.stores.models import CacheEntry
from cinedeck.stores.persistence import KeyValueStorage, load_state, save_state
from cinedeck.tmdb.models import Genre, MovieDetails, PagedResult
from cinedeck.utils.logger import LoggerProtocol, get_logger

STORAGE_KEY = "cinema-cache"
CACHE_EXPIRY = 15 * 60
GENRES_EXPIRY = CACHE_EXPIRY * 4

default_logger = get_logger("CacheStore")


class CacheStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], float] = time.time,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self.logger = logger or default_logger
        self._lock = threading.Lock()

        self.movies: dict[str, CacheEntry] = {}
        self.movie_details: dict[str, CacheEntry] = {}
        self.genres: CacheEntry | None = None
        self._restore()

    def _restore(self) -> None:
        state = load_state(self._storage, STORAGE_KEY, self.logger)
        if not state:
            return
        self.movies = dict(state.get("movies") or {})
        self.movie_details = dict(state.get("movie_details") or {})
        self.genres = state.get("genres")

    def _persist(self) -> None:
        save_state(
            self._storage,
            STORAGE_KEY,
            {"movies": self.movies, "movie_details": self.movie_details, "genres": self.genres},
        )

    def _entry(self, data: Any, ttl: float) -> CacheEntry:
        now = self._clock()
        return {"data": data, "timestamp": now, "expiry": now + ttl}

    def _read(self, entry: CacheEntry | None) -> Any | None:
        if not entry or entry["expiry"] < self._clock():
            return None
        return entry["data"]

    # --- lists (trending, popular, search, discover...) ---

    def add_movies(self, key: str, data: PagedResult[Any]) -> None:
        with self._lock:
            self.movies[key] = self._entry(data, CACHE_EXPIRY)
            self._persist()

    def get_movies(self, key: str) -> PagedResult[Any] | None:
        with self._lock:
            return self._read(self.movies.get(key))

    # --- details ---

    def add_movie_details(self, movie_id: int, data: MovieDetails) -> None:
        with self._lock:
            self.movie_details[str(movie_id)] = self._entry(data, CACHE_EXPIRY)
            self._persist()

    def get_movie_details(self, movie_id: int) -> MovieDetails | None:
        with self._lock:
            return self._read(self.movie_details.get(str(movie_id)))

    # --- genres ---

    def add_genres(self, data: list[Genre]) -> None:
        with self._lock:
            self.genres = self._entry(data, GENRES_EXPIRY)
            self._persist()

    def get_genres(self) -> list[Genre] | None:
        with self._lock:
            return self._read(self.genres)

    # --- housekeeping ---

    def clear_expired(self) -> int:
        """Drop expired entries; returns how many were removed."""
        with self._lock:
            now = self._clock()
            before = len(self.movies) + len(self.movie_details) + (1 if self.genres else 0)
            self.movies = {k: e for k, e in self.movies.items() if e["expiry"] > now}
            self.movie_details = {k: e for k, e in self.movie_details.items() if e["expiry"] > now}
            if self.genres and self.genres["expiry"] <= now:
                self.genres = None
            after = len(self.movies) + len(self.movie_details) + (1 if self.genres else 0)
            self._persist()

        removed = before - after
        if removed:
            self.logger.info("🧹 %s expired cache entries removed", removed)
        return removed

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Literal

from cinedeck.stores.persistence import KeyValueStorage, load_state, save_state
from cinedeck.tmdb.discover import resolve_sort_key
from cinedeck.tmdb.models import MultiSearchResult
from cinedeck.utils.logger import LoggerProtocol, get_logger

STORAGE_KEY = "cinema-search"
HISTORY_LIMIT = 10

SearchMediaType = Literal["all", "movie", "tv", "person"]
SortOrder = Literal["asc", "desc"]

default_logger = get_logger("SearchStore")


@dataclass(frozen=True)
class SearchFilters:
    media_type: SearchMediaType = "all"
    sort_by: str = "popularity"
    sort_order: SortOrder = "desc"
    genre_id: int | None = None
    page: int = 1

    @property
    def sort_key(self) -> str:
        """Service-side sort parameter (`popularity.desc`, ...)."""
        return resolve_sort_key(self.sort_by)

    def next_page(self) -> SearchFilters:
        return replace(self, page=self.page + 1)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SearchFilters:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in raw.items() if k in known})


class SearchStore:
    """
    Search state. Only `history` and `filters` are persisted; query, results,
    loading flag and error message live for the session.
    """

    def __init__(self, storage: KeyValueStorage, logger: LoggerProtocol | None = None) -> None:
        self._storage = storage
        self.logger = logger or default_logger
        self._lock = threading.Lock()

        self.query = ""
        self.results: list[MultiSearchResult] = []
        self.is_loading = False
        self.error: str | None = None
        self.filters = SearchFilters()
        self.history: list[str] = []
        self._restore()

    def _restore(self) -> None:
        state = load_state(self._storage, STORAGE_KEY, self.logger)
        if not state:
            return
        self.history = [q for q in state.get("history") or [] if isinstance(q, str)][:HISTORY_LIMIT]
        filters = state.get("filters")
        if isinstance(filters, dict):
            try:
                self.filters = SearchFilters.from_dict(filters)
            except TypeError as exc:
                self.logger.warning("⚠️ Ignoring persisted search filters: %s", exc)

    def _persist(self) -> None:
        save_state(self._storage, STORAGE_KEY, {"history": self.history, "filters": asdict(self.filters)})

    def set_query(self, query: str) -> None:
        self.query = query

    def set_results(self, results: list[MultiSearchResult]) -> None:
        self.results = results

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_error(self, error: str | None) -> None:
        self.error = error

    def set_filters(self, filters: SearchFilters) -> None:
        with self._lock:
            self.filters = filters
            self._persist()

    def add_to_history(self, query: str) -> None:
        with self._lock:
            self.history = [query, *(q for q in self.history if q != query)][:HISTORY_LIMIT]
            self._persist()

    def clear_history(self) -> None:
        with self._lock:
            self.history = []
            self._persist()

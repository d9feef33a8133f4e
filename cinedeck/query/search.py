from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from cinedeck.stores.search_store import SearchFilters, SearchStore
from cinedeck.tmdb.models import MultiSearchResult
from cinedeck.tmdb.tmdb_client import TMDBClient
from cinedeck.utils.logger import LoggerProtocol, get_logger, with_child_logger

SEARCH_ERROR_MESSAGE = "An error occurred while searching. Please try again."

default_logger = get_logger("SearchSession")


def _release_timestamp(item: MultiSearchResult) -> float:
    raw = item.get("release_date") or ""
    try:
        return float(datetime.strptime(raw, "%Y-%m-%d").toordinal())
    except ValueError:
        return 0.0


def _sort_value(item: MultiSearchResult, sort_by: str) -> float:
    if sort_by == "vote_average":
        return float(item.get("vote_average") or 0)
    if sort_by == "release_date":
        return _release_timestamp(item)
    if sort_by == "popularity":
        return float(item.get("popularity") or 0)
    return 0.0


@with_child_logger
def apply_filters(
    results: list[MultiSearchResult], filters: SearchFilters, logger: LoggerProtocol | None = None
) -> list[MultiSearchResult]:
    """Genre filter then stable sort; items without `genre_ids` drop out when a genre is set."""
    log = cast(LoggerProtocol, logger)  # injected by with_child_logger
    if filters.genre_id is not None:
        before = len(results)
        results = [r for r in results if filters.genre_id in (r.get("genre_ids") or [])]
        log.debug("Genre %s kept %s/%s results", filters.genre_id, len(results), before)
    return sorted(
        results,
        key=lambda r: _sort_value(r, filters.sort_by),
        reverse=filters.sort_order != "asc",
    )


class SearchSession:
    def __init__(self, client: TMDBClient, store: SearchStore, logger: LoggerProtocol | None = None) -> None:
        self.client = client
        self.store = store
        self.logger = logger or default_logger

    def _fetch(self, query: str, filters: SearchFilters) -> list[Any]:
        if filters.media_type == "movie":
            return self.client.search_movies(query, filters.page).get("results", [])
        if filters.media_type == "person":
            return self.client.search_people(query, filters.page).get("results", [])
        return self.client.multi_search(query, filters.page).get("results", [])

    def search(self, query: str) -> list[MultiSearchResult]:
        """Run a search with the stored filters. Never raises: failures land in `store.error`."""
        store = self.store
        store.set_query(query)
        if not query.strip():
            store.set_results([])
            return []

        store.set_loading(True)
        store.set_error(None)
        try:
            results = apply_filters(self._fetch(query, store.filters), store.filters, logger=self.logger)
            store.set_results(results)
            store.add_to_history(query)
            self.logger.info("🔎 %s results for '%s'", len(results), query)
            return results
        except Exception as exc:  # pylint: disable=broad-except
            self.logger.error("❌ Search error for '%s': %s", query, exc)
            store.set_error(SEARCH_ERROR_MESSAGE)
            store.set_results([])
            return []
        finally:
            store.set_loading(False)

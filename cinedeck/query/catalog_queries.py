"""
Catalog queries: each UI data intent (trending row, details page, genre list...)
mapped onto a client call through the query cache.

When a persisted `CacheStore` is supplied it is checked before the network and
written after every successful fetch, so results also survive restarts.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Any, TypeVar

from cinedeck.query.cache import QueryCache, QueryPolicy, make_query_key
from cinedeck.stores.cache_store import CacheStore
from cinedeck.tmdb.discover import DiscoverOptions
from cinedeck.tmdb.genres import GenreCatalog
from cinedeck.tmdb.models import (
    Credits,
    Genre,
    MovieDetails,
    MovieResponse,
    ReviewResponse,
    TimeWindow,
    TVShowResponse,
    VideoResponse,
    empty_page,
)
from cinedeck.tmdb.tmdb_client import TMDBClient, get_tmdb_client
from cinedeck.utils.logger import LoggerProtocol, get_logger
from cinedeck.utils.slugs import extract_id_from_slug

T = TypeVar("T")

GENRES_POLICY = QueryPolicy(stale_seconds=60 * 60, retain_seconds=24 * 60 * 60)

DETAILS_EXPAND = ("credits", "videos", "similar")
SLUG_DETAILS_EXPAND = ("credits", "videos", "similar", "recommendations", "reviews")

WATCHLIST_QUERY = "user-watchlist"
FAVORITES_QUERY = "user-favorites"
RATINGS_QUERY = "user-ratings"

default_logger = get_logger("CatalogQueries")


class CatalogQueries:
    def __init__(
        self,
        client: TMDBClient | None = None,
        cache: QueryCache | None = None,
        cache_store: CacheStore | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.client = client or get_tmdb_client()
        self.cache = cache or QueryCache()
        self.cache_store = cache_store
        self.logger = logger or default_logger

    # ======================
    # PLUMBING
    # ======================

    def _list(self, operation: str, store_key: str, fetch: Callable[[], T], **params: Any) -> T:
        store = self.cache_store

        def load() -> T:
            if store is not None:
                cached = store.get_movies(store_key)
                if cached is not None:
                    self.logger.debug("💾 Persisted cache hit %s", store_key)
                    return cached  # type: ignore[return-value]
            data = fetch()
            if store is not None:
                store.add_movies(store_key, data)  # type: ignore[arg-type]
            return data

        return self.cache.fetch(make_query_key(operation, **params), load)

    def _details(self, operation: str, details_id: int, expand: tuple[str, ...], **params: Any) -> MovieDetails:
        store = self.cache_store

        def load() -> MovieDetails:
            if store is not None:
                cached = store.get_movie_details(details_id)
                if cached is not None:
                    return cached
            data = self.client.get_movie_details(details_id, expand)
            if store is not None:
                store.add_movie_details(details_id, data)
            return data

        return self.cache.fetch(make_query_key(operation, **params), load)

    def invalidate(self, operation: str) -> int:
        return self.cache.invalidate(operation)

    # ======================
    # LISTS
    # ======================

    def trending_movies(self, time_window: TimeWindow = "day") -> MovieResponse:
        return self._list(
            "trending-movies",
            f"trending-{time_window}",
            lambda: self.client.get_trending_movies(time_window),
            time_window=time_window,
        )

    def popular_movies(self, page: int = 1) -> MovieResponse:
        return self._list("popular-movies", f"popular-{page}", lambda: self.client.get_popular_movies(page), page=page)

    def top_rated_movies(self, page: int = 1) -> MovieResponse:
        return self._list(
            "top-rated-movies", f"top-rated-{page}", lambda: self.client.get_top_rated_movies(page), page=page
        )

    def upcoming_movies(self, page: int = 1) -> MovieResponse:
        return self._list(
            "upcoming-movies", f"upcoming-{page}", lambda: self.client.get_upcoming_movies(page), page=page
        )

    def now_playing_movies(self, page: int = 1) -> MovieResponse:
        return self._list(
            "now-playing-movies", f"now-playing-{page}", lambda: self.client.get_now_playing_movies(page), page=page
        )

    def search_movies(self, query: str, page: int = 1) -> MovieResponse:
        if not query.strip():
            return empty_page()  # type: ignore[return-value]
        return self._list(
            "search-movies",
            f"search-{query}-{page}",
            lambda: self.client.search_movies(query, page),
            query=query,
            page=page,
        )

    def popular_tv_shows(self, page: int = 1) -> TVShowResponse:
        key = make_query_key("popular-tv-shows", page=page)
        return self.cache.fetch(key, lambda: self.client.get_popular_tv_shows(page))

    def discover_movies(self, options: DiscoverOptions | None = None) -> MovieResponse:
        options = options or DiscoverOptions()
        params = options.to_params()
        store_key = f"discover-{json.dumps(asdict(options), sort_keys=True, default=str)}"
        return self._list("discover-movies", store_key, lambda: self.client.discover_movies(options), **params)

    # ======================
    # DETAILS
    # ======================

    def movie_details(self, movie_id: int | None) -> MovieDetails | None:
        if not movie_id:
            return None
        return self._details("movie-details", movie_id, DETAILS_EXPAND, movie_id=movie_id)

    def movie_by_slug(self, slug: str) -> MovieDetails | None:
        if not slug:
            return None
        movie_id = extract_id_from_slug(slug)
        return self._details("movie-details-by-slug", movie_id, SLUG_DETAILS_EXPAND, slug=slug)

    def movie_credits(self, movie_id: int) -> Credits:
        return self.cache.fetch(
            make_query_key("movie-credits", movie_id=movie_id), lambda: self.client.get_movie_credits(movie_id)
        )

    def movie_videos(self, movie_id: int) -> VideoResponse:
        return self.cache.fetch(
            make_query_key("movie-videos", movie_id=movie_id), lambda: self.client.get_movie_videos(movie_id)
        )

    def movie_reviews(self, movie_id: int, page: int = 1) -> ReviewResponse:
        return self.cache.fetch(
            make_query_key("movie-reviews", movie_id=movie_id, page=page),
            lambda: self.client.get_movie_reviews(movie_id, page),
        )

    def similar_movies(self, movie_id: int) -> MovieResponse:
        return self.cache.fetch(
            make_query_key("similar-movies", movie_id=movie_id), lambda: self.client.get_similar_movies(movie_id)
        )

    def movie_recommendations(self, movie_id: int) -> MovieResponse:
        return self.cache.fetch(
            make_query_key("movie-recommendations", movie_id=movie_id),
            lambda: self.client.get_movie_recommendations(movie_id),
        )

    # ======================
    # USER COLLECTIONS
    # ======================

    def _user_movies(self, operation: str, movie_ids: list[int]) -> list[MovieDetails]:
        ids = list(movie_ids)

        def load() -> list[MovieDetails]:
            return [self.client.get_movie_details(movie_id) for movie_id in ids]

        return self.cache.fetch(make_query_key(operation, movie_ids=ids), load)

    def watchlist_movies(self, movie_ids: list[int]) -> list[MovieDetails]:
        return self._user_movies(WATCHLIST_QUERY, movie_ids)

    def favorite_movies(self, movie_ids: list[int]) -> list[MovieDetails]:
        return self._user_movies(FAVORITES_QUERY, movie_ids)

    def rated_movies(self, ratings: dict[int, float]) -> list[MovieDetails]:
        """Details of every rated movie, highest rating first."""
        ordered = sorted(ratings, key=lambda movie_id: ratings[movie_id], reverse=True)
        return self._user_movies(RATINGS_QUERY, ordered)

    # ======================
    # GENRES
    # ======================

    def genres(self) -> GenreCatalog:
        store = self.cache_store

        def load() -> list[Genre]:
            if store is not None:
                cached = store.get_genres()
                if cached is not None:
                    return cached
            data = self.client.get_movie_genres().get("genres", [])
            if store is not None:
                store.add_genres(data)
            return data

        genres = self.cache.fetch(make_query_key("genres"), load, GENRES_POLICY)
        return GenreCatalog(genres)

    # ======================
    # HOME PAGE
    # ======================

    def prefetch_home(self) -> dict[str, MovieResponse | None]:
        """
        Load the home page rows concurrently.

        Rows resolve independently: a failing row is logged and comes back as None.
        Runs on its own pool since every row blocks on the query cache executor.
        """
        rows: dict[str, Callable[[], MovieResponse]] = {
            "trending": self.trending_movies,
            "popular": self.popular_movies,
            "top_rated": self.top_rated_movies,
            "upcoming": self.upcoming_movies,
        }
        results: dict[str, MovieResponse | None] = {}
        with ThreadPoolExecutor(max_workers=len(rows), thread_name_prefix="home") as pool:
            futures = {name: pool.submit(fn) for name, fn in rows.items()}
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as exc:  # pylint: disable=broad-except
                    self.logger.warning("⚠️ Home row %s failed: %s", name, exc)
                    results[name] = None
        return results

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, cast

import requests

from cinedeck.tmdb.discover import DiscoverOptions
from cinedeck.tmdb.models import (
    Collection,
    Configuration,
    Country,
    Credits,
    GenreList,
    JsonObj,
    Language,
    MediaType,
    MovieDetails,
    MovieResponse,
    MultiSearchResponse,
    PagedResult,
    PersonCredits,
    PersonDetails,
    PersonResponse,
    ReviewResponse,
    TimeWindow,
    TVShowDetails,
    TVShowResponse,
    VideoResponse,
)
from cinedeck.utils.config import TMDB_API_KEY, TMDB_BASE_URL, TMDB_IMAGE_BASE_URL, TMDB_TIMEOUT
from cinedeck.utils.errors import NotConfiguredError, RemoteServiceError
from cinedeck.utils.logger import LoggerProtocol, get_logger

IMAGE_SIZES: dict[str, str] = {
    "thumbnail": "w154",
    "small": "w300",
    "medium": "w500",
    "large": "w780",
    "original": "original",
}

default_logger = get_logger("TMDBClient")


class TMDBClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        image_base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.api_key: str = TMDB_API_KEY if api_key is None else api_key
        self.base_url: str = (base_url or TMDB_BASE_URL).rstrip("/")
        self.image_base_url: str = (image_base_url or TMDB_IMAGE_BASE_URL).rstrip("/")
        self.timeout: float = timeout or TMDB_TIMEOUT
        self.logger: LoggerProtocol = logger or default_logger

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": "cinedeck/1.0",
            }
        )

        if not self.api_key:
            self.logger.warning("⚠️ TMDB API key is not configured, add TMDB_API_KEY to your .env file")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    # ======================
    # HTTP
    # ======================

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        if not self.is_configured:
            raise NotConfiguredError("TMDB_API_KEY")

        query: dict[str, Any] = {k: v for k, v in (params or {}).items() if v is not None}
        query["api_key"] = self.api_key

        self.logger.info("🎬 [TMDB API] GET %s", endpoint)
        try:
            r = self.session.get(f"{self.base_url}{endpoint}", params=query, timeout=self.timeout)
        except requests.RequestException as exc:
            self.logger.error("❌ [TMDB API] Request error for %s: %s", endpoint, exc)
            raise RemoteServiceError(None, str(exc), endpoint) from exc

        if not r.ok:
            message = self._error_message(r)
            self.logger.error("❌ [TMDB API] Response error %s for %s: %s", r.status_code, endpoint, message)
            raise RemoteServiceError(r.status_code, message, endpoint)

        self.logger.info("✅ [TMDB API] Response received for %s (%s)", endpoint, r.status_code)
        return r.json()

    @staticmethod
    def _error_message(r: requests.Response) -> str:
        try:
            payload = r.json()
        except ValueError:
            return r.text or r.reason or "Unknown error"
        if isinstance(payload, dict) and payload.get("status_message"):
            return str(payload["status_message"])
        return r.reason or "Unknown error"

    @staticmethod
    def _append(expand: Iterable[str] | None) -> str | None:
        if not expand:
            return None
        return ",".join(expand)

    # ======================
    # IMAGES
    # ======================

    def get_image_url(self, path: str | None, size: str = "w500") -> str | None:
        if not path:
            return None
        return f"{self.image_base_url}/{size}{path}"

    def get_image_sizes(self, path: str | None) -> dict[str, str | None]:
        return {name: self.get_image_url(path, token) for name, token in IMAGE_SIZES.items()}

    # ======================
    # TRENDING & LISTS
    # ======================

    def get_trending(self, media: str = "movie", time_window: TimeWindow = "day") -> PagedResult[JsonObj]:
        return cast(PagedResult[JsonObj], self._get(f"/trending/{media}/{time_window}"))

    def get_trending_movies(self, time_window: TimeWindow = "day") -> MovieResponse:
        return cast(MovieResponse, self.get_trending("movie", time_window))

    def get_popular(self, media: MediaType = "movie", page: int = 1) -> PagedResult[JsonObj]:
        return cast(PagedResult[JsonObj], self._get(f"/{media}/popular", {"page": page}))

    def get_popular_movies(self, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self.get_popular("movie", page))

    def get_popular_tv_shows(self, page: int = 1) -> TVShowResponse:
        return cast(TVShowResponse, self.get_popular("tv", page))

    def get_top_rated(self, media: MediaType = "movie", page: int = 1) -> PagedResult[JsonObj]:
        return cast(PagedResult[JsonObj], self._get(f"/{media}/top_rated", {"page": page}))

    def get_top_rated_movies(self, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self.get_top_rated("movie", page))

    def get_top_rated_tv_shows(self, page: int = 1) -> TVShowResponse:
        return cast(TVShowResponse, self.get_top_rated("tv", page))

    def get_upcoming_movies(self, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self._get("/movie/upcoming", {"page": page}))

    def get_now_playing_movies(self, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self._get("/movie/now_playing", {"page": page}))

    # ======================
    # DISCOVER
    # ======================

    def discover_movies(self, options: DiscoverOptions | None = None) -> MovieResponse:
        options = options or DiscoverOptions()
        return cast(MovieResponse, self._get("/discover/movie", options.to_params()))

    def get_movies_by_genre(self, genre_id: int, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self._get("/discover/movie", {"with_genres": genre_id, "page": page}))

    # ======================
    # SEARCH
    # ======================

    def search_movies(self, query: str, page: int = 1, **options: Any) -> MovieResponse:
        return cast(MovieResponse, self._get("/search/movie", {"query": query, "page": page, **options}))

    def multi_search(self, query: str, page: int = 1, **options: Any) -> MultiSearchResponse:
        return cast(MultiSearchResponse, self._get("/search/multi", {"query": query, "page": page, **options}))

    def search_people(self, query: str, page: int = 1, **options: Any) -> PersonResponse:
        return cast(PersonResponse, self._get("/search/person", {"query": query, "page": page, **options}))

    # ======================
    # MOVIE / TV DETAILS
    # ======================

    def get_movie_details(self, movie_id: int, expand: Iterable[str] | None = None) -> MovieDetails:
        params = {"append_to_response": self._append(expand)}
        return cast(MovieDetails, self._get(f"/movie/{movie_id}", params))

    def get_tv_show_details(self, tv_id: int, expand: Iterable[str] | None = None) -> TVShowDetails:
        params = {"append_to_response": self._append(expand)}
        return cast(TVShowDetails, self._get(f"/tv/{tv_id}", params))

    def get_movie_credits(self, movie_id: int) -> Credits:
        return cast(Credits, self._get(f"/movie/{movie_id}/credits"))

    def get_movie_videos(self, movie_id: int) -> VideoResponse:
        return cast(VideoResponse, self._get(f"/movie/{movie_id}/videos"))

    def get_movie_reviews(self, movie_id: int, page: int = 1) -> ReviewResponse:
        return cast(ReviewResponse, self._get(f"/movie/{movie_id}/reviews", {"page": page}))

    def get_similar_movies(self, movie_id: int, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self._get(f"/movie/{movie_id}/similar", {"page": page}))

    def get_movie_recommendations(self, movie_id: int, page: int = 1) -> MovieResponse:
        return cast(MovieResponse, self._get(f"/movie/{movie_id}/recommendations", {"page": page}))

    # ======================
    # GENRES / PEOPLE / COLLECTIONS
    # ======================

    def get_movie_genres(self) -> GenreList:
        return cast(GenreList, self._get("/genre/movie/list"))

    def get_person_details(self, person_id: int) -> PersonDetails:
        return cast(PersonDetails, self._get(f"/person/{person_id}"))

    def get_person_movie_credits(self, person_id: int) -> PersonCredits:
        return cast(PersonCredits, self._get(f"/person/{person_id}/movie_credits"))

    def get_person_tv_credits(self, person_id: int) -> PersonCredits:
        return cast(PersonCredits, self._get(f"/person/{person_id}/tv_credits"))

    def get_collection_details(self, collection_id: int) -> Collection:
        return cast(Collection, self._get(f"/collection/{collection_id}"))

    # ======================
    # CONFIGURATION
    # ======================

    def get_configuration(self) -> Configuration:
        return cast(Configuration, self._get("/configuration"))

    def get_countries(self) -> list[Country]:
        return cast(list[Country], self._get("/configuration/countries"))

    def get_languages(self) -> list[Language]:
        return cast(list[Language], self._get("/configuration/languages"))

    def health_check(self) -> bool:
        try:
            self.get_configuration()
            return True
        except (RemoteServiceError, NotConfiguredError):
            return False


_shared_client: TMDBClient | None = None


def get_tmdb_client() -> TMDBClient:
    """Shared client built from the environment configuration."""
    global _shared_client
    if _shared_client is None:
        _shared_client = TMDBClient()
    return _shared_client

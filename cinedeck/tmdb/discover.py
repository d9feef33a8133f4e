from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# UI sort keys -> TMDB `sort_by` values. Anything else ("vote_count.desc", ...) is sent as-is.
SORT_KEYS: dict[str, str] = {
    "popularity": "popularity.desc",
    "top_rated": "vote_average.desc",
    "rating": "vote_average.desc",
    "release_date": "primary_release_date.desc",
    "vote_count": "vote_count.desc",
    "revenue": "revenue.desc",
}

DEFAULT_SORT = "popularity"


def resolve_sort_key(sort_key: str | None) -> str:
    if not sort_key:
        return SORT_KEYS[DEFAULT_SORT]
    return SORT_KEYS.get(sort_key, sort_key)


def _join_ids(ids: list[int]) -> str:
    return ",".join(str(i) for i in ids)


@dataclass(frozen=True)
class DiscoverOptions:
    """Filters accepted by `/discover/movie`."""

    page: int = 1
    sort_by: str | None = None
    genre_id: int | None = None
    genre_ids: tuple[int, ...] = ()
    without_genres: tuple[int, ...] = ()
    min_date: str | None = None  # ISO "YYYY-mm-dd"
    max_date: str | None = None
    year: int | None = None
    vote_average_gte: float | None = None
    vote_average_lte: float | None = None
    vote_count_gte: int | None = None
    with_runtime_gte: int | None = None
    with_runtime_lte: int | None = None
    with_original_language: str | None = None
    language: str | None = None
    include_adult: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.page, "sort_by": resolve_sort_key(self.sort_by)}

        genres = list(self.genre_ids)
        if self.genre_id is not None and self.genre_id not in genres:
            genres.insert(0, self.genre_id)
        if genres:
            params["with_genres"] = _join_ids(genres)
        if self.without_genres:
            params["without_genres"] = _join_ids(list(self.without_genres))

        optional: dict[str, Any] = {
            "primary_release_date.gte": self.min_date,
            "primary_release_date.lte": self.max_date,
            "primary_release_year": self.year,
            "vote_average.gte": self.vote_average_gte,
            "vote_average.lte": self.vote_average_lte,
            "vote_count.gte": self.vote_count_gte,
            "with_runtime.gte": self.with_runtime_gte,
            "with_runtime.lte": self.with_runtime_lte,
            "with_original_language": self.with_original_language,
            "language": self.language,
            "include_adult": self.include_adult,
        }
        params.update({k: v for k, v in optional.items() if v is not None})
        params.update(self.extra)
        return params

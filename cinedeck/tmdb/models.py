from __future__ import annotations

from typing import Any, Generic, Literal, TypedDict, TypeVar, Union

# --- TMDB raw payloads (useful subset, unknown keys are kept as-is) -----------

T = TypeVar("T")

MediaType = Literal["movie", "tv"]
TimeWindow = Literal["day", "week"]


class PagedResult(TypedDict, Generic[T], total=False):
    page: int
    results: list[T]
    total_pages: int
    total_results: int


class Genre(TypedDict, total=False):
    id: int
    name: str


class Movie(TypedDict, total=False):
    id: int
    title: str
    original_title: str
    overview: str
    poster_path: str | None
    backdrop_path: str | None
    release_date: str  # "YYYY-mm-dd", may be ""
    genre_ids: list[int]
    adult: bool
    original_language: str
    popularity: float
    vote_count: int
    vote_average: float
    video: bool
    media_type: str  # only on multi search / trending all


class TVShow(TypedDict, total=False):
    id: int
    name: str
    original_name: str
    overview: str
    poster_path: str | None
    backdrop_path: str | None
    first_air_date: str
    genre_ids: list[int]
    adult: bool
    original_language: str
    popularity: float
    vote_count: int
    vote_average: float
    origin_country: list[str]
    media_type: str


class Person(TypedDict, total=False):
    id: int
    name: str
    original_name: str
    profile_path: str | None
    adult: bool
    gender: int
    known_for_department: str
    popularity: float
    known_for: list[Movie]
    media_type: str


class PersonDetails(Person, total=False):
    biography: str
    birthday: str | None
    deathday: str | None
    place_of_birth: str | None
    homepage: str | None
    imdb_id: str | None
    also_known_as: list[str]


class CollectionSummary(TypedDict, total=False):
    id: int
    name: str
    poster_path: str | None
    backdrop_path: str | None


class Collection(CollectionSummary, total=False):
    overview: str
    parts: list[Movie]


class ProductionCompany(TypedDict, total=False):
    id: int
    name: str
    logo_path: str | None
    origin_country: str


class CastMember(TypedDict, total=False):
    id: int
    name: str
    original_name: str
    character: str
    credit_id: str
    order: int
    profile_path: str | None
    known_for_department: str
    popularity: float


class CrewMember(TypedDict, total=False):
    id: int
    name: str
    original_name: str
    job: str
    department: str
    credit_id: str
    profile_path: str | None
    known_for_department: str
    popularity: float


class Credits(TypedDict, total=False):
    id: int
    cast: list[CastMember]
    crew: list[CrewMember]


class Video(TypedDict, total=False):
    id: str
    iso_639_1: str
    iso_3166_1: str
    key: str
    name: str
    site: str  # "YouTube", "Vimeo"
    size: int
    type: str  # "Trailer", "Teaser", ...
    official: bool
    published_at: str


class VideoResponse(TypedDict, total=False):
    id: int
    results: list[Video]


class AuthorDetails(TypedDict, total=False):
    name: str
    username: str
    avatar_path: str | None
    rating: float | None


class Review(TypedDict, total=False):
    id: str
    author: str
    author_details: AuthorDetails
    content: str
    created_at: str
    updated_at: str
    url: str


class MovieDetails(TypedDict, total=False):
    id: int
    title: str
    original_title: str
    overview: str
    tagline: str | None
    poster_path: str | None
    backdrop_path: str | None
    release_date: str
    runtime: int | None
    status: str
    budget: int
    revenue: int
    genres: list[Genre]
    homepage: str | None
    imdb_id: str | None
    origin_country: list[str]
    original_language: str
    popularity: float
    vote_count: int
    vote_average: float
    belongs_to_collection: CollectionSummary | None
    production_companies: list[ProductionCompany]
    # append_to_response blocks
    credits: Credits
    videos: VideoResponse
    similar: PagedResult[Movie]
    recommendations: PagedResult[Movie]


class Season(TypedDict, total=False):
    id: int
    name: str
    season_number: int
    episode_count: int
    air_date: str | None
    poster_path: str | None
    overview: str


class TVShowDetails(TypedDict, total=False):
    id: int
    name: str
    original_name: str
    overview: str
    tagline: str | None
    poster_path: str | None
    backdrop_path: str | None
    first_air_date: str
    last_air_date: str | None
    number_of_seasons: int
    number_of_episodes: int
    status: str
    genres: list[Genre]
    seasons: list[Season]
    popularity: float
    vote_count: int
    vote_average: float
    credits: Credits
    videos: VideoResponse


class PersonCredits(TypedDict, total=False):
    id: int
    cast: list[dict[str, Any]]  # Movie / TVShow fields + character, credit_id, ...
    crew: list[dict[str, Any]]  # Movie / TVShow fields + department, job, ...


class ImagesConfiguration(TypedDict, total=False):
    base_url: str
    secure_base_url: str
    backdrop_sizes: list[str]
    logo_sizes: list[str]
    poster_sizes: list[str]
    profile_sizes: list[str]
    still_sizes: list[str]


class Configuration(TypedDict, total=False):
    images: ImagesConfiguration
    change_keys: list[str]


class Country(TypedDict, total=False):
    iso_3166_1: str
    english_name: str
    native_name: str


class Language(TypedDict, total=False):
    iso_639_1: str
    english_name: str
    name: str


class GenreList(TypedDict, total=False):
    genres: list[Genre]


MultiSearchResult = Union[Movie, TVShow, Person]

MovieResponse = PagedResult[Movie]
TVShowResponse = PagedResult[TVShow]
PersonResponse = PagedResult[Person]
MultiSearchResponse = PagedResult[MultiSearchResult]
ReviewResponse = PagedResult[Review]

JsonObj = dict[str, Any]


def empty_page(page: int = 1) -> PagedResult[Any]:
    return {"page": page, "results": [], "total_pages": 0, "total_results": 0}

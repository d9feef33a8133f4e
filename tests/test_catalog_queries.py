from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cinedeck.query.cache import make_query_key
from cinedeck.query.catalog_queries import DETAILS_EXPAND, SLUG_DETAILS_EXPAND, CatalogQueries
from cinedeck.stores.cache_store import CacheStore
from cinedeck.tmdb.discover import DiscoverOptions
from cinedeck.tmdb.tmdb_client import TMDBClient
from cinedeck.utils.errors import InvalidSlugError, RemoteServiceError
from tests.helpers import ManualClock, make_page


@pytest.fixture
def tmdb():
    return MagicMock(spec=TMDBClient)


@pytest.fixture
def cache_store(storage):
    return CacheStore(storage, clock=ManualClock(1_700_000_000))


@pytest.fixture
def queries(tmdb, query_cache, cache_store):
    return CatalogQueries(tmdb, cache=query_cache, cache_store=cache_store)


def test_trending_is_cached(queries, tmdb):
    tmdb.get_trending_movies.return_value = make_page([{"id": 1, "title": "A"}])

    first = queries.trending_movies("day")
    second = queries.trending_movies("day")

    assert first == second
    tmdb.get_trending_movies.assert_called_once_with("day")


def test_lists_are_written_to_persisted_cache(queries, tmdb, cache_store):
    page = make_page([{"id": 7}])
    tmdb.get_popular_movies.return_value = page

    queries.popular_movies(1)

    assert cache_store.get_movies("popular-1") == page


def test_persisted_cache_is_checked_first(queries, tmdb, cache_store):
    page = make_page([{"id": 9}])
    cache_store.add_movies("top-rated-2", page)

    assert queries.top_rated_movies(2) == page
    tmdb.get_top_rated_movies.assert_not_called()


def test_blank_search_skips_network(queries, tmdb):
    result = queries.search_movies("   ")
    assert result["results"] == []
    assert result["total_pages"] == 0
    tmdb.search_movies.assert_not_called()


def test_search_uses_query_and_page(queries, tmdb, cache_store):
    tmdb.search_movies.return_value = make_page([{"id": 3}], page=2)

    queries.search_movies("alien", 2)

    tmdb.search_movies.assert_called_once_with("alien", 2)
    assert cache_store.get_movies("search-alien-2") is not None


def test_movie_details_expands_and_skips_falsy_id(queries, tmdb):
    tmdb.get_movie_details.return_value = {"id": 5, "title": "E"}

    assert queries.movie_details(0) is None
    assert queries.movie_details(None) is None
    assert queries.movie_details(5) == {"id": 5, "title": "E"}
    tmdb.get_movie_details.assert_called_once_with(5, DETAILS_EXPAND)


def test_movie_by_slug(queries, tmdb):
    tmdb.get_movie_details.return_value = {"id": 27205, "title": "Inception"}

    assert queries.movie_by_slug("inception-27205")["title"] == "Inception"
    tmdb.get_movie_details.assert_called_once_with(27205, SLUG_DETAILS_EXPAND)

    with pytest.raises(InvalidSlugError):
        queries.movie_by_slug("inception")


def test_details_not_found_propagates_without_retry(queries, tmdb):
    tmdb.get_movie_details.side_effect = RemoteServiceError(404, "not found", "/movie/42")

    with pytest.raises(RemoteServiceError):
        queries.movie_details(42)
    assert tmdb.get_movie_details.call_count == 1


def test_genres_catalog(queries, tmdb, cache_store):
    tmdb.get_movie_genres.return_value = {"genres": [{"id": 28, "name": "Action"}, {"id": 18, "name": "Drama"}]}

    catalog = queries.genres()

    assert len(catalog) == 2
    assert catalog.name_for(28) == "Action"
    assert catalog.label_for(28) == "⚡ Action"
    assert catalog.name_for(123456) == "Unknown"
    assert catalog.icon_for(123456) == "🎬"
    assert cache_store.get_genres() == [{"id": 28, "name": "Action"}, {"id": 18, "name": "Drama"}]


def test_discover_keys_differ_by_options(queries, tmdb):
    tmdb.discover_movies.return_value = make_page([])

    queries.discover_movies(DiscoverOptions(genre_id=28))
    queries.discover_movies(DiscoverOptions(genre_id=28))
    queries.discover_movies(DiscoverOptions(genre_id=35))

    assert tmdb.discover_movies.call_count == 2


def test_detail_sub_resources(queries, tmdb):
    tmdb.get_movie_credits.return_value = {"id": 1, "cast": [], "crew": []}
    tmdb.get_movie_reviews.return_value = make_page([])

    queries.movie_credits(1)
    queries.movie_credits(1)
    queries.movie_reviews(1, 2)

    tmdb.get_movie_credits.assert_called_once_with(1)
    tmdb.get_movie_reviews.assert_called_once_with(1, 2)


def test_prefetch_home_rows_resolve_independently(queries, tmdb):
    tmdb.get_trending_movies.return_value = make_page([{"id": 1}])
    tmdb.get_popular_movies.return_value = make_page([{"id": 2}])
    tmdb.get_top_rated_movies.side_effect = RemoteServiceError(404, "gone")
    tmdb.get_upcoming_movies.return_value = make_page([{"id": 4}])

    rows = queries.prefetch_home()

    assert rows["trending"]["results"] == [{"id": 1}]
    assert rows["popular"]["results"] == [{"id": 2}]
    assert rows["top_rated"] is None
    assert rows["upcoming"]["results"] == [{"id": 4}]


def test_movie_details_is_cached_and_persisted(queries, tmdb, cache_store, query_cache):
    tmdb.get_movie_details.return_value = {"id": 27205, "title": "Inception"}

    assert queries.movie_details(27205)["title"] == "Inception"
    assert queries.movie_details(27205)["title"] == "Inception"

    assert tmdb.get_movie_details.call_count == 1
    assert query_cache.get_cached(make_query_key("movie-details", movie_id=27205)) == {
        "id": 27205,
        "title": "Inception",
    }
    assert cache_store.get_movie_details(27205) == {"id": 27205, "title": "Inception"}


def test_user_collections_load_details_per_movie(queries, tmdb):
    tmdb.get_movie_details.side_effect = lambda movie_id: {"id": movie_id}

    assert queries.watchlist_movies([603, 27205]) == [{"id": 603}, {"id": 27205}]
    assert queries.favorite_movies([]) == []
    assert queries.rated_movies({603: 7.0, 27205: 9.5}) == [{"id": 27205}, {"id": 603}]

    queries.watchlist_movies([603, 27205])
    assert tmdb.get_movie_details.call_count == 4

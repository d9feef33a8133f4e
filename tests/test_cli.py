from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cinedeck.cli.main import build_parser, dispatch, format_item
from cinedeck.query.catalog_queries import CatalogQueries
from cinedeck.stores.bootstrap import initialize_stores
from cinedeck.tmdb.genres import GenreCatalog
from cinedeck.tmdb.tmdb_client import TMDBClient
from tests.helpers import make_page


@pytest.fixture
def queries():
    mock = MagicMock(spec=CatalogQueries)
    mock.client = MagicMock(spec=TMDBClient)
    return mock


@pytest.fixture
def stores(storage):
    return initialize_stores(storage=storage)


def run(argv, queries, stores):
    return dispatch(build_parser().parse_args(argv), queries, stores)


def test_format_item():
    line = format_item({"id": 27205, "title": "Inception", "release_date": "2010-07-15", "vote_average": 8.364})
    assert "Inception (2010)" in line
    assert "⭐ 8.4" in line
    assert "Breaking Bad" in format_item({"id": 1396, "name": "Breaking Bad", "first_air_date": ""})


def test_trending(queries, stores, capsys):
    queries.trending_movies.return_value = make_page([{"id": 1, "title": "Dune"}])

    assert run(["trending", "--window", "week"], queries, stores) == 0

    queries.trending_movies.assert_called_once_with("week")
    assert "Dune" in capsys.readouterr().out


def test_movie_by_id_or_slug(queries, stores):
    queries.movie_details.return_value = {"id": 1, "title": "A"}
    queries.movie_by_slug.return_value = None

    assert run(["--json", "movie", "1"], queries, stores) == 0
    queries.movie_details.assert_called_once_with(1)

    assert run(["movie", "missing-2"], queries, stores) == 1
    queries.movie_by_slug.assert_called_once_with("missing-2")


def test_genres(queries, stores, capsys):
    queries.genres.return_value = GenreCatalog([{"id": 28, "name": "Action"}])
    run(["genres"], queries, stores)
    assert "⚡ Action" in capsys.readouterr().out


def test_theme_command_persists(queries, stores, capsys):
    run(["theme", "cinema"], queries, stores)
    assert stores.theme.theme == "cinema"
    run(["theme", "toggle"], queries, stores)
    assert "cinema-dark" in capsys.readouterr().out


def test_health(queries, stores):
    queries.client.health_check.return_value = False
    assert run(["health"], queries, stores) == 1


def test_movie_through_catalog_queries(stores, query_cache, capsys):
    tmdb = MagicMock(spec=TMDBClient)
    tmdb.get_movie_details.return_value = {"id": 27205, "title": "Inception", "release_date": "2010-07-15"}
    tmdb.get_image_url.return_value = None
    queries = CatalogQueries(tmdb, cache=query_cache, cache_store=stores.cache)

    assert run(["movie", "27205"], queries, stores) == 0

    out = capsys.readouterr().out
    assert "Inception (2010)" in out
    assert "Slug: inception-27205" in out


def test_watchlist_needs_sign_in(queries, stores):
    assert run(["watchlist"], queries, stores) == 1
    queries.watchlist_movies.assert_not_called()

    stores.users.sync_from_identity({"id": "user_1", "username": "neo"})
    stores.users.add_to_watchlist(603)
    queries.watchlist_movies.return_value = [{"id": 603, "title": "The Matrix"}]

    assert run(["watchlist"], queries, stores) == 0
    queries.watchlist_movies.assert_called_once_with([603])

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any

from cinedeck.query.cache import QueryCache
from cinedeck.query.catalog_queries import CatalogQueries
from cinedeck.query.search import SearchSession
from cinedeck.stores.bootstrap import Stores, initialize_stores
from cinedeck.stores.search_store import SearchFilters
from cinedeck.stores.theme_store import THEMES
from cinedeck.tmdb.discover import DiscoverOptions
from cinedeck.tmdb.tmdb_client import TMDBClient
from cinedeck.utils.logger import get_logger
from cinedeck.utils.safe_runner import safe_main
from cinedeck.utils.slugs import create_movie_slug

logger = get_logger("cinedeck")


def format_item(item: dict[str, Any]) -> str:
    title = item.get("title") or item.get("name") or "?"
    date = item.get("release_date") or item.get("first_air_date") or ""
    year = f" ({date[:4]})" if date else ""
    rating = item.get("vote_average")
    stars = f"  ⭐ {rating:.1f}" if isinstance(rating, (int, float)) else ""
    return f"{item.get('id', ''):>8}  {title}{year}{stars}"


def print_results(data: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return
    results = data.get("results", []) if isinstance(data, dict) else data
    for item in results:
        print(format_item(item))
    if isinstance(data, dict) and "total_pages" in data:
        print(f"-- page {data.get('page', 1)}/{data.get('total_pages', 0)} ({data.get('total_results', 0)} results)")


def print_details(movie: dict[str, Any], client: TMDBClient) -> None:
    print(format_item(movie))
    if movie.get("tagline"):
        print(f"  {movie['tagline']}")
    genres = ", ".join(g.get("name", "") for g in movie.get("genres", []))
    if genres:
        print(f"  Genres: {genres}")
    if movie.get("runtime"):
        print(f"  Runtime: {movie['runtime']} min")
    if movie.get("overview"):
        print(f"  {movie['overview']}")
    cast = [c.get("name", "") for c in (movie.get("credits") or {}).get("cast", [])[:5]]
    if cast:
        print(f"  Cast: {', '.join(cast)}")
    poster = client.get_image_url(movie.get("poster_path"))
    if poster:
        print(f"  Poster: {poster}")
    print(f"  Slug: {create_movie_slug(movie.get('title', ''), movie.get('id', 0))}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cinedeck", description="Browse the TMDB movie catalog")
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    trending = sub.add_parser("trending", help="Trending movies")
    trending.add_argument("--window", choices=["day", "week"], default="day")

    for name, help_text in (
        ("popular", "Popular movies"),
        ("top-rated", "Top rated movies"),
        ("upcoming", "Upcoming movies"),
        ("now-playing", "Movies in theaters"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--page", type=int, default=1)

    search = sub.add_parser("search", help="Search movies, TV shows and people")
    search.add_argument("query")
    search.add_argument("--type", dest="media_type", choices=["all", "movie", "tv", "person"], default=None)
    search.add_argument("--genre", type=int, default=None)
    search.add_argument("--sort", choices=["popularity", "vote_average", "release_date"], default=None)
    search.add_argument("--order", choices=["asc", "desc"], default=None)

    discover = sub.add_parser("discover", help="Discover movies with filters")
    discover.add_argument("--page", type=int, default=1)
    discover.add_argument("--sort", default=None, help="popularity, top_rated, release_date or raw field.order")
    discover.add_argument("--genre", type=int, action="append", default=[])
    discover.add_argument("--year", type=int, default=None)
    discover.add_argument("--min-rating", type=float, default=None)

    movie = sub.add_parser("movie", help="Movie details by id or slug")
    movie.add_argument("movie", help="TMDB id or slug like 'inception-27205'")

    sub.add_parser("genres", help="List movie genres")
    sub.add_parser("history", help="Show search history")
    sub.add_parser("watchlist", help="Movies in the signed-in user's watchlist")
    sub.add_parser("favorites", help="The signed-in user's favorite movies")

    theme = sub.add_parser("theme", help="Show or change the theme")
    theme.add_argument("value", nargs="?", choices=[*THEMES, "toggle"])

    sub.add_parser("health", help="Check the TMDB connection")
    return parser


def dispatch(args: argparse.Namespace, queries: CatalogQueries, stores: Stores) -> int:
    command = args.command

    if command == "trending":
        print_results(queries.trending_movies(args.window), args.json)
    elif command == "popular":
        print_results(queries.popular_movies(args.page), args.json)
    elif command == "top-rated":
        print_results(queries.top_rated_movies(args.page), args.json)
    elif command == "upcoming":
        print_results(queries.upcoming_movies(args.page), args.json)
    elif command == "now-playing":
        print_results(queries.now_playing_movies(args.page), args.json)
    elif command == "search":
        return run_search(args, queries, stores)
    elif command == "discover":
        options = DiscoverOptions(
            page=args.page,
            sort_by=args.sort,
            genre_ids=tuple(args.genre),
            year=args.year,
            vote_average_gte=args.min_rating,
        )
        print_results(queries.discover_movies(options), args.json)
    elif command == "movie":
        details = queries.movie_details(int(args.movie)) if args.movie.isdigit() else queries.movie_by_slug(args.movie)
        if details is None:
            logger.warning("⚠️ No movie found for %s", args.movie)
            return 1
        if args.json:
            print_results(details, True)
        else:
            print_details(details, queries.client)  # type: ignore[arg-type]
    elif command == "genres":
        catalog = queries.genres()
        if args.json:
            print_results(catalog.as_list(), True)
        else:
            for genre in catalog.as_list():
                print(f"{genre['id']:>6}  {catalog.label_for(genre['id'])}")
    elif command == "history":
        for query in stores.search.history:
            print(query)
    elif command in ("watchlist", "favorites"):
        user = stores.users.user
        if user is None:
            logger.warning("⚠️ Not signed in")
            return 1
        if command == "watchlist":
            movies = queries.watchlist_movies(user["watchlist"])
        else:
            movies = queries.favorite_movies(user["favorites"])
        print_results(movies, args.json)
    elif command == "theme":
        if args.value == "toggle":
            stores.theme.toggle_theme()
        elif args.value:
            stores.theme.set_theme(args.value)
        print(f"{stores.theme.theme} (data-theme={stores.theme.data_theme})")
    elif command == "health":
        ok = queries.client.health_check()
        print("✅ TMDB reachable" if ok else "❌ TMDB unreachable or not configured")
        return 0 if ok else 1
    return 0


def run_search(args: argparse.Namespace, queries: CatalogQueries, stores: Stores) -> int:
    current = stores.search.filters
    stores.search.set_filters(
        SearchFilters(
            media_type=args.media_type or current.media_type,
            sort_by=args.sort or current.sort_by,
            sort_order=args.order or current.sort_order,
            genre_id=args.genre,
        )
    )
    session = SearchSession(queries.client, stores.search)
    results = session.search(args.query)
    if stores.search.error:
        print(stores.search.error, file=sys.stderr)
        return 1
    print_results(results, args.json)
    return 0


@safe_main
def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    stores = initialize_stores()
    cache = QueryCache()
    queries = CatalogQueries(TMDBClient(), cache=cache, cache_store=stores.cache)
    try:
        return dispatch(args, queries, stores)
    finally:
        cache.shutdown(wait=False)


def run() -> None:
    code = main()
    sys.exit(1 if code is None else code)


if __name__ == "__main__":
    run()

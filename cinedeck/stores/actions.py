from __future__ import annotations

from cinedeck.query.cache import QueryCache
from cinedeck.query.catalog_queries import FAVORITES_QUERY, RATINGS_QUERY, WATCHLIST_QUERY
from cinedeck.stores.notification_store import NotificationStore
from cinedeck.stores.user_store import UserMirrorStore
from cinedeck.tmdb.models import Movie


class MovieActions:
    """Watchlist / favorites / rating actions: update the user mirror, notify, invalidate."""

    def __init__(
        self,
        users: UserMirrorStore,
        notifications: NotificationStore,
        cache: QueryCache | None = None,
    ) -> None:
        self.users = users
        self.notifications = notifications
        self.cache = cache

    def _invalidate(self, operation: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(operation)

    def toggle_watchlist(self, movie: Movie) -> bool:
        """Returns True when the movie is now in the watchlist."""
        movie_id, title = movie["id"], movie.get("title", "")
        if self.users.is_in_watchlist(movie_id):
            self.users.remove_from_watchlist(movie_id)
            self.notifications.add(
                "info", "Removed from Watchlist", f'"{title}" has been removed from your watchlist.'
            )
        else:
            self.users.add_to_watchlist(movie_id)
            self.notifications.add("success", "Added to Watchlist", f'"{title}" has been added to your watchlist.')
        self._invalidate(WATCHLIST_QUERY)
        return self.users.is_in_watchlist(movie_id)

    def toggle_favorites(self, movie: Movie) -> bool:
        movie_id, title = movie["id"], movie.get("title", "")
        if self.users.is_in_favorites(movie_id):
            self.users.remove_from_favorites(movie_id)
            self.notifications.add(
                "info", "Removed from Favorites", f'"{title}" has been removed from your favorites.'
            )
        else:
            self.users.add_to_favorites(movie_id)
            self.notifications.add(
                "success",
                "Added to Favorites",
                f'"{title}" has been added to your favorites.',
                action_text="View Favorites",
                action_url="/favorites",
            )
        self._invalidate(FAVORITES_QUERY)
        return self.users.is_in_favorites(movie_id)

    def rate(self, movie: Movie, rating: float) -> None:
        self.users.rate_movie(movie["id"], rating)
        self.notifications.add("success", "Rating Saved", f'You rated "{movie.get("title", "")}" {rating:g}/10 stars.')
        self._invalidate(RATINGS_QUERY)

    def is_in_watchlist(self, movie_id: int) -> bool:
        return self.users.is_in_watchlist(movie_id)

    def is_in_favorites(self, movie_id: int) -> bool:
        return self.users.is_in_favorites(movie_id)

    def get_movie_rating(self, movie_id: int) -> float | None:
        return self.users.get_movie_rating(movie_id)

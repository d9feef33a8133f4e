from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from cinedeck.stores.bootstrap import initialize_stores
from cinedeck.stores.cache_store import CacheStore
from cinedeck.stores.notification_store import NotificationStore
from cinedeck.stores.persistence import JsonFileStorage, MemoryStorage, load_state, save_state
from cinedeck.stores.theme_store import ThemeStore
from cinedeck.stores.user_store import UserMirrorStore
from tests.helpers import ManualClock, make_page

PROFILE = {"id": "user_1", "username": "neo", "email": "neo@example.com", "image_url": "https://img/neo.png"}


# --- persistence ---


def test_blob_shape(storage):
    save_state(storage, "cinema-theme", {"theme": "dark"})
    assert json.loads(storage.get("cinema-theme")) == {"state": {"theme": "dark"}, "version": 0}
    assert load_state(storage, "cinema-theme") == {"theme": "dark"}


def test_corrupt_blob_counts_as_missing(storage):
    storage.set("cinema-user", "{not json")
    assert load_state(storage, "cinema-user") is None
    assert load_state(storage, "missing") is None


def test_json_file_storage(tmp_path):
    fs = JsonFileStorage(tmp_path / "state")
    fs.set("cinema-search", '{"state": {}, "version": 0}')

    assert (tmp_path / "state" / "cinema-search.json").exists()
    assert fs.get("cinema-search") == '{"state": {}, "version": 0}'

    fs.remove("cinema-search")
    assert fs.get("cinema-search") is None
    fs.remove("cinema-search")


# --- theme ---


def test_theme_defaults_to_system_and_follows_appearance(storage):
    theme = ThemeStore(storage, prefers_dark=lambda: True)

    assert theme.theme == "system"
    assert theme.is_dark
    assert theme.data_theme == "dark"


@pytest.mark.parametrize("persisted, expected", [("auto", "system"), ("neon", "system"), ("cinema", "cinema")])
def test_theme_restore(storage, persisted, expected):
    save_state(storage, "cinema-theme", {"theme": persisted})
    assert ThemeStore(storage, prefers_dark=lambda: False).theme == expected


def test_theme_data_attribute(storage):
    theme = ThemeStore(storage, prefers_dark=lambda: False)
    theme.set_theme("cinema-dark")
    assert theme.is_dark
    assert theme.data_theme == "cinema-dark"

    theme.set_theme("cinema")
    assert not theme.is_dark
    assert theme.data_theme == "cinema"
    assert ThemeStore(storage).theme == "cinema"


def test_theme_toggle(storage):
    theme = ThemeStore(storage, prefers_dark=lambda: True)
    assert theme.toggle_theme() == "light"
    assert theme.toggle_theme() == "dark"

    theme.set_theme("cinema")
    assert theme.toggle_theme() == "cinema-dark"

    with pytest.raises(ValueError):
        theme.set_theme("purple")


def test_system_change_notifies_only_in_system_mode(storage):
    theme = ThemeStore(storage, prefers_dark=lambda: False)
    seen = []
    theme.subscribe(lambda store: seen.append(store.data_theme))

    theme.handle_system_change(True)
    assert seen == ["dark"]

    theme.set_theme("light")
    theme.handle_system_change(False)
    assert seen == ["dark", "light"]


# --- user mirror ---


def test_sign_in_and_out(storage):
    users = UserMirrorStore(storage)
    user = users.sync_from_identity(PROFILE)

    assert users.is_authenticated
    assert user["username"] == "neo"
    assert user["preferences"]["language"] == "en"

    users.sync_from_identity(None)
    assert users.user is None
    assert not users.is_authenticated
    assert UserMirrorStore(storage).user is None


def test_mutations_are_noops_when_signed_out(storage):
    users = UserMirrorStore(storage)
    users.add_to_watchlist(1)
    users.add_to_favorites(1)
    users.rate_movie(1, 8)
    users.update_preferences({"language": "fr"})

    assert users.user is None
    assert not users.is_in_watchlist(1)
    assert users.get_movie_rating(1) is None


def test_same_identity_keeps_collections(storage):
    users = UserMirrorStore(storage)
    users.sync_from_identity(PROFILE)
    users.add_to_watchlist(603)
    users.add_to_watchlist(603)
    users.rate_movie(603, 9)

    users.sync_from_identity({**PROFILE, "username": "the-one"})
    assert users.user["username"] == "the-one"
    assert users.user["watchlist"] == [603]

    users.sync_from_identity({"id": "user_2", "first_name": "Trinity"})
    assert users.user["username"] == "Trinity"
    assert users.user["watchlist"] == []


def test_user_round_trip_restores_int_rating_keys(storage):
    users = UserMirrorStore(storage)
    users.sync_from_identity(PROFILE)
    users.rate_movie(27205, 9.5)
    users.add_to_favorites(27205)
    users.update_preferences({"language": "fr"})

    restored = UserMirrorStore(storage)

    assert restored.get_movie_rating(27205) == 9.5
    assert restored.is_in_favorites(27205)
    assert restored.user["preferences"]["language"] == "fr"
    assert restored.user["preferences"]["country"] == "US"


# --- notifications ---


def test_five_notifications_show_three_newest(storage):
    notifications = NotificationStore(storage)
    for i in range(5):
        notifications.add("info", f"n{i}", "msg")

    assert [n["title"] for n in notifications.visible()] == ["n4", "n3", "n2"]
    assert notifications.unread_count == 5


def test_read_state(storage):
    notifications = NotificationStore(storage)
    first = notifications.add("success", "a", "msg")
    notifications.add("warning", "b", "msg")

    notifications.mark_as_read(first["id"])
    assert notifications.unread_count == 1

    notifications.mark_all_as_read()
    assert notifications.unread_count == 0

    notifications.remove(first["id"])
    assert [n["title"] for n in NotificationStore(storage).notifications] == ["b"]


def test_only_explicit_expiry_is_cleared(storage):
    now = datetime(2026, 1, 1, tzinfo=UTC)
    notifications = NotificationStore(storage, clock=lambda: now)
    notifications.add("info", "expired", "msg", expires_at=now - timedelta(minutes=1))
    notifications.add("info", "later", "msg", expires_at=now + timedelta(hours=1))
    notifications.add("info", "forever", "msg")

    assert notifications.clear_expired() == 1
    assert [n["title"] for n in notifications.notifications] == ["forever", "later"]


def test_local_expiry_survives_startup(storage):
    notifications = NotificationStore(storage)
    notifications.add("info", "soon", "msg", expires_at=datetime.now() + timedelta(hours=1))

    stores = initialize_stores(storage=storage)

    assert [n["title"] for n in stores.notifications.notifications] == ["soon"]
    assert stores.notifications.notifications[0]["expires_at"].endswith("+00:00")


def test_naive_expiry_on_disk_is_cleared(storage):
    past = (datetime.now() - timedelta(minutes=5)).isoformat()
    save_state(
        storage,
        "cinema-notifications",
        {"notifications": [{"id": "n1", "kind": "info", "title": "old", "message": "", "expires_at": past}]},
    )

    notifications = NotificationStore(storage)

    assert notifications.clear_expired() == 1
    assert notifications.notifications == []


# --- persisted cache ---


def test_cache_store_expiry():
    clock = ManualClock(1_700_000_000)
    cache = CacheStore(MemoryStorage(), clock=clock)
    cache.add_movies("popular-1", make_page([{"id": 1}]))
    cache.add_movie_details(1, {"id": 1})
    cache.add_genres([{"id": 28, "name": "Action"}])

    clock.advance(15 * 60 + 1)
    assert cache.get_movies("popular-1") is None
    assert cache.get_movie_details(1) is None
    assert cache.get_genres() == [{"id": 28, "name": "Action"}]

    assert cache.clear_expired() == 2
    clock.advance(60 * 60)
    assert cache.clear_expired() == 1


def test_cache_store_survives_restart(storage):
    clock = ManualClock(1_700_000_000)
    CacheStore(storage, clock=clock).add_movie_details(27205, {"id": 27205, "title": "Inception"})

    assert CacheStore(storage, clock=clock).get_movie_details(27205)["title"] == "Inception"


# --- bootstrap ---


def test_initialize_stores(storage):
    stale = {"data": {}, "timestamp": 0, "expiry": 1}
    save_state(storage, "cinema-cache", {"movies": {"old": stale}, "movie_details": {}, "genres": None})

    stores = initialize_stores(storage=storage)

    assert stores.theme.theme == "system"
    assert stores.cache.movies == {}
    assert stores.users.user is None
    assert stores.notifications.notifications == []

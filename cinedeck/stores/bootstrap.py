"""Startup wiring: build the stores on one storage backend and run the one-shot initializers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cinedeck.stores.cache_store import CacheStore
from cinedeck.stores.notification_store import NotificationStore
from cinedeck.stores.persistence import JsonFileStorage, KeyValueStorage
from cinedeck.stores.search_store import SearchStore
from cinedeck.stores.theme_store import ThemeStore
from cinedeck.stores.user_store import UserMirrorStore
from cinedeck.utils.config import STORAGE_DIR
from cinedeck.utils.logger import LoggerProtocol, ensure_logger


@dataclass
class Stores:
    theme: ThemeStore
    cache: CacheStore
    users: UserMirrorStore
    search: SearchStore
    notifications: NotificationStore


def initialize_theme(theme: ThemeStore) -> None:
    # re-apply the persisted choice so listeners see the resolved appearance
    theme.set_theme(theme.theme)


def initialize_cache(cache: CacheStore) -> None:
    cache.clear_expired()


def initialize_notifications(notifications: NotificationStore) -> None:
    notifications.clear_expired()


def initialize_stores(
    storage: KeyValueStorage | None = None,
    storage_dir: Path | None = None,
    logger: LoggerProtocol | None = None,
) -> Stores:
    logger = ensure_logger(logger, __name__)
    if storage is None:
        storage = JsonFileStorage(storage_dir or STORAGE_DIR)

    stores = Stores(
        theme=ThemeStore(storage),
        cache=CacheStore(storage),
        users=UserMirrorStore(storage),
        search=SearchStore(storage),
        notifications=NotificationStore(storage),
    )
    initialize_theme(stores.theme)
    initialize_cache(stores.cache)
    initialize_notifications(stores.notifications)
    logger.debug("🗄️ Stores initialized (theme=%s)", stores.theme.theme)
    return stores

from __future__ import annotations

from collections.abc import Callable
from typing import cast

from cinedeck.stores.models import Theme
from cinedeck.stores.persistence import KeyValueStorage, load_state, save_state
from cinedeck.utils.config import COLOR_SCHEME
from cinedeck.utils.logger import LoggerProtocol, get_logger

STORAGE_KEY = "cinema-theme"
THEMES: tuple[Theme, ...] = ("light", "dark", "cinema", "cinema-dark", "system")
DEFAULT_THEME: Theme = "system"

ThemeListener = Callable[["ThemeStore"], None]

default_logger = get_logger("ThemeStore")


def system_prefers_dark() -> bool:
    return COLOR_SCHEME == "dark"


def normalize_theme(value: object) -> Theme:
    """Legacy "auto" maps to "system"; anything unknown falls back to the default."""
    if value == "auto":
        return "system"
    if value in THEMES:
        return cast(Theme, value)
    return DEFAULT_THEME


class ThemeStore:
    """
    Selected theme plus its resolved appearance.

    `is_dark` is never stored: for "system" it asks `prefers_dark()` each time
    it is read, so it follows the host appearance.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        prefers_dark: Callable[[], bool] = system_prefers_dark,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._storage = storage
        self._prefers_dark = prefers_dark
        self.logger = logger or default_logger
        self._listeners: list[ThemeListener] = []

        state = load_state(self._storage, STORAGE_KEY, self.logger) or {}
        raw = state.get("theme", DEFAULT_THEME)
        self.theme: Theme = normalize_theme(raw)
        if raw != self.theme:
            self.logger.warning("⚠️ Unknown persisted theme %r, using %s", raw, self.theme)

    @property
    def is_dark(self) -> bool:
        if self.theme in ("dark", "cinema-dark"):
            return True
        if self.theme in ("light", "cinema"):
            return False
        return bool(self._prefers_dark())

    @property
    def data_theme(self) -> str:
        """Value for the document's `data-theme` attribute."""
        cinema = self.theme in ("cinema", "cinema-dark")
        if self.is_dark:
            return "cinema-dark" if cinema else "dark"
        return "cinema" if cinema else "light"

    def subscribe(self, listener: ThemeListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def set_theme(self, theme: str) -> None:
        if theme != "auto" and theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        self.theme = normalize_theme(theme)
        save_state(self._storage, STORAGE_KEY, {"theme": self.theme})
        self.logger.debug("🎨 Theme set to %s (data-theme=%s)", self.theme, self.data_theme)
        self._notify()

    def toggle_theme(self) -> Theme:
        if self.theme == "light":
            new_theme: Theme = "dark"
        elif self.theme == "dark":
            new_theme = "light"
        elif self.theme == "cinema":
            new_theme = "cinema-dark"
        elif self.theme == "cinema-dark":
            new_theme = "cinema"
        else:
            new_theme = "light" if self._prefers_dark() else "dark"
        self.set_theme(new_theme)
        return new_theme

    def handle_system_change(self, dark: bool) -> None:
        """Host appearance changed; only matters while following the system."""
        self._prefers_dark = lambda: dark
        if self.theme == "system":
            self._notify()

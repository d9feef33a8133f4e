from __future__ import annotations


class CinedeckError(Exception):
    """Base class for every error raised by the project."""


class RemoteServiceError(CinedeckError):
    """The catalog service answered with a non-2xx status (or could not be reached)."""

    def __init__(self, status: int | None, message: str, path: str | None = None) -> None:
        self.status = status
        self.message = message
        self.path = path
        where = f" on {path}" if path else ""
        code = status if status is not None else "network"
        super().__init__(f"TMDB error {code}{where}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class NotConfiguredError(CinedeckError):
    """A required credential or setting is missing."""

    def __init__(self, setting: str = "TMDB_API_KEY") -> None:
        self.setting = setting
        super().__init__(f"{setting} is not configured. Add it to your environment or .env file.")


class InvalidSlugError(CinedeckError, ValueError):
    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Invalid slug format: {slug}")

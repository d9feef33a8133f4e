"""
URL-friendly slugs for movies, TV shows, people and seasons.

"The Dark Knight" -> "the-dark-knight", and with an id: "the-dark-knight-155".
"""

from __future__ import annotations

import re

from cinedeck.utils.errors import InvalidSlugError

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")
_ID_PART = re.compile(r"[0-9]+")


def create_slug(title: str) -> str:
    slug = title.lower().strip()
    slug = _INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASHES.sub("-", slug)
    return slug.strip("-")


def slug_to_title(slug: str) -> str:
    """"the-dark-knight" -> "The Dark Knight" (display only)."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


def create_movie_slug(title: str, movie_id: int) -> str:
    return f"{create_slug(title)}-{movie_id}"


def create_tv_show_slug(name: str, tv_id: int) -> str:
    return f"{create_slug(name)}-{tv_id}"


def create_person_slug(name: str, person_id: int) -> str:
    return f"{create_slug(name)}-{person_id}"


def create_season_slug(season_number: int) -> str:
    return f"season-{season_number}"


def extract_id_from_slug(slug: str) -> int:
    """
    Return the trailing numeric id of a slug.

    Raises:
        InvalidSlugError: when the last dash-separated part is not an integer.
    """
    last_part = slug.split("-")[-1]
    if not _ID_PART.fullmatch(last_part):
        raise InvalidSlugError(slug)
    return int(last_part)


def extract_title_from_slug(slug: str) -> str:
    return "-".join(slug.split("-")[:-1])

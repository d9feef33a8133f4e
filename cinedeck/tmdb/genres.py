from __future__ import annotations

from collections.abc import Iterable

from cinedeck.tmdb.models import Genre

FALLBACK_NAME = "Unknown"
FALLBACK_ICON = "🎬"

GENRE_ICONS: dict[int, str] = {
    28: "⚡",  # Action
    12: "🗺️",  # Adventure
    16: "🎨",  # Animation
    35: "😂",  # Comedy
    80: "🕵️",  # Crime
    99: "📹",  # Documentary
    18: "🎭",  # Drama
    10751: "👪",  # Family
    14: "🧙",  # Fantasy
    36: "📜",  # History
    27: "👻",  # Horror
    10402: "🎵",  # Music
    9648: "🔍",  # Mystery
    10749: "💕",  # Romance
    878: "🚀",  # Science Fiction
    10770: "📺",  # TV Movie
    53: "🔪",  # Thriller
    10752: "🪖",  # War
    37: "🤠",  # Western
}


class GenreCatalog:
    """Genre id -> display name and icon. Ids missing from the catalog get fallbacks."""

    def __init__(self, genres: Iterable[Genre] = ()) -> None:
        self._names: dict[int, str] = {}
        for genre in genres:
            genre_id = genre.get("id")
            if genre_id is not None:
                self._names[genre_id] = genre.get("name") or FALLBACK_NAME

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, genre_id: object) -> bool:
        return genre_id in self._names

    def name_for(self, genre_id: int) -> str:
        return self._names.get(genre_id, FALLBACK_NAME)

    def icon_for(self, genre_id: int) -> str:
        return GENRE_ICONS.get(genre_id, FALLBACK_ICON)

    def label_for(self, genre_id: int) -> str:
        return f"{self.icon_for(genre_id)} {self.name_for(genre_id)}"

    def labels(self, genre_ids: Iterable[int]) -> list[str]:
        return [self.label_for(g) for g in genre_ids]

    def as_list(self) -> list[Genre]:
        return [{"id": k, "name": v} for k, v in self._names.items()]

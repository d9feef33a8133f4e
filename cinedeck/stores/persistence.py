"""
Key-value persistence for client state.

Each store keeps one JSON blob under its own key, shaped `{"state": {...}, "version": 0}`.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

from cinedeck.utils.logger import LoggerProtocol, ensure_logger

STATE_VERSION = 0


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
    def clear(self) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """One `<key>.json` file per key inside `directory`; writes are atomic."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, self._path(key))
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def remove(self, key: str) -> None:
        with self._lock:
            self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        with self._lock:
            for f in self.directory.glob("*.json"):
                f.unlink()


def load_state(storage: KeyValueStorage, key: str, logger: LoggerProtocol | None = None) -> dict[str, Any] | None:
    """Read the `state` part of a persisted blob; unreadable blobs count as missing."""
    raw = storage.get(key)
    if raw is None:
        return None
    try:
        blob = json.loads(raw)
    except json.JSONDecodeError as exc:
        ensure_logger(logger, __name__).warning("Ignoring corrupt state for %s: %s", key, exc)
        return None
    state = blob.get("state") if isinstance(blob, dict) else None
    return state if isinstance(state, dict) else None


def save_state(storage: KeyValueStorage, key: str, state: dict[str, Any]) -> None:
    storage.set(key, json.dumps({"state": state, "version": STATE_VERSION}, ensure_ascii=False))

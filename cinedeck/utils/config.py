# config.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# .env at the project root
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=True)

# --- Helpers ---


def get_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "yes")


def get_str(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_int(key: str, default: int = 0) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        print(f"[CONFIG ERROR] {key} must be an integer.")
        sys.exit(1)


def get_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        print(f"[CONFIG ERROR] {key} must be a number.")
        sys.exit(1)


# --- Module-level settings ---

# TMDB (the API key is optional: a missing key leaves the client unconfigured)
TMDB_API_KEY = get_str("TMDB_API_KEY")
TMDB_BASE_URL = get_str("TMDB_BASE_URL", "https://api.themoviedb.org/3")
TMDB_IMAGE_BASE_URL = get_str("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org/t/p")
TMDB_TIMEOUT = get_float("TMDB_TIMEOUT", 15.0)

# Query cache
QUERY_STALE_SECONDS = get_int("QUERY_STALE_SECONDS", 5 * 60)
QUERY_RETAIN_SECONDS = get_int("QUERY_RETAIN_SECONDS", 30 * 60)
QUERY_MAX_RETRIES = get_int("QUERY_MAX_RETRIES", 3)
QUERY_WORKERS = get_int("QUERY_WORKERS", 5)

# Local state
STORAGE_DIR = Path(get_str("CINEDECK_STORAGE_DIR") or Path.home() / ".cinedeck")
COLOR_SCHEME = get_str("CINEDECK_COLOR_SCHEME", "light").lower()

# Logs (empty LOG_FILE_PATH = console only)
LOG_FILE_PATH = get_str("LOG_FILE_PATH")
LOG_ROTATION_DAYS = get_int("LOG_ROTATION_DAYS", 30)
LOG_LEVEL = get_str("LOG_LEVEL", "INFO").upper()
DEBUG = get_bool("CINEDECK_DEBUG")

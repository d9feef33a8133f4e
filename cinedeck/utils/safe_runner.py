from __future__ import annotations

import functools
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from cinedeck.utils.errors import CinedeckError
from cinedeck.utils.logger import get_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_logger("safe_runner")


def safe_main(func: Callable[P, R]) -> Callable[P, R | None]:
    """
    Wrap a script entry point so errors are logged instead of ending in a traceback.

    Project errors are logged as one line, anything else with its stack trace.
    Returns None when the wrapped function failed.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | None:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            logger.warning("⛔ Interrupted")
        except CinedeckError as exc:
            logger.error("❌ %s", exc)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("💥 Unexpected error in %s: %s", func.__name__, exc)
        return None

    return wrapper

"""Project logger: console output plus optional daily log files."""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, ParamSpec, Protocol, TypeVar, cast

from cinedeck.utils.config import LOG_FILE_PATH, LOG_LEVEL, LOG_ROTATION_DAYS
from cinedeck.utils.log_rotation import rotate_logs


# ---------- Protocol ----------
class LoggerProtocol(Protocol):
    """
    Interface every logger handed around the project must satisfy.

    `debug`, `info`, `warning`, `error` and `exception` log at the matching level;
    `get_child` returns a logger scoped to a sub-component.
    """

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None: ...

    def get_child(self, suffix: str) -> LoggerProtocol: ...


# ---------- Concrete class ----------


@dataclass(frozen=True)
class CineLogger:
    """
    Thin wrapper around a `logging.Logger`.

    Exposes the same surface as `LoggerProtocol` so components can receive either
    this class or any test double.

    Attributes:
        _base: The wrapped standard library logger.
    """

    _base: logging.Logger

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._base.exception(msg, *args, **kwargs)

    def get_child(self, suffix: str) -> LoggerProtocol:
        """
        Creates a child logger with the specified suffix.

        Args:
        - suffix (str): The suffix appended to the current logger name.

        Returns:
        A new CineLogger wrapping `<name>.<suffix>`.
        """
        return CineLogger(self._base.getChild(suffix))


def _ensure_handlers(base: logging.Logger, global_log_file: str | None, script_log_file: str | None) -> None:
    if getattr(base, "_cinedeck_configured", False):
        return

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - [%(name)s] %(message)s")

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    base.addHandler(stream)

    if global_log_file:
        fh_global = logging.FileHandler(global_log_file, encoding="utf-8")
        fh_global.setFormatter(formatter)
        base.addHandler(fh_global)

    if script_log_file:
        fh_script = logging.FileHandler(script_log_file, encoding="utf-8")
        fh_script.setFormatter(formatter)
        base.addHandler(fh_script)

    base.propagate = False
    setattr(base, "_cinedeck_configured", True)


def get_logger(script_name: str) -> LoggerProtocol:
    """
    Logger factory.

    With LOG_FILE_PATH set, log files are created (one shared daily file and one per
    script) and old files are rotated out; otherwise the logger writes to the console only.

    :param script_name: Logger name.
    :return: A CineLogger instance.
    """
    global_log_file: str | None = None
    script_log_file: str | None = None

    if LOG_FILE_PATH:
        os.makedirs(LOG_FILE_PATH, exist_ok=True)
        date_str = datetime.now().strftime("%Y-%m-%d")
        global_log_file = os.path.join(LOG_FILE_PATH, f"{date_str}_cinedeck.log")
        script_log_file = os.path.join(LOG_FILE_PATH, f"{date_str}_{script_name}.log")

        try:
            rotate_logs(LOG_FILE_PATH, LOG_ROTATION_DAYS, logf=script_log_file)
        except OSError as exc:
            base_fallback = logging.getLogger(script_name)
            base_fallback.setLevel(logging.DEBUG)
            _ensure_handlers(base_fallback, global_log_file, script_log_file)
            CineLogger(base_fallback).warning(f"Log rotation failed: {exc}")

    base = logging.getLogger(script_name)
    base.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    _ensure_handlers(base, global_log_file, script_log_file)
    return CineLogger(base)


# ---------- Utilities ----------
def ensure_logger(logger: LoggerProtocol | None, module: str) -> LoggerProtocol:
    """
    Return a logger for `module`.

    A fresh one is built when none is given, otherwise a child of the given logger.
    """
    if logger is None:
        return get_logger(module)
    return logger.get_child(module)


# ---------- Type-safe decorator ----------
P = ParamSpec("P")
R = TypeVar("R")


def with_child_logger(func: Callable[P, R]) -> Callable[P, R]:
    """
    Inject a `logger=` kwarg scoped to the decorated function's module.

    :param func: The function to decorate
    :return: The decorated function
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        current = cast(Optional[LoggerProtocol], kwargs.get("logger"))
        kwargs["logger"] = ensure_logger(current, func.__module__)
        return func(*args, **kwargs)

    return wrapper

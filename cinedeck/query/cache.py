"""
In-process query cache for catalog calls.

Every query is stored under `(operation, normalized params)`:

- younger than `stale_seconds`: served from memory, no network call;
- younger than `retain_seconds`: served from memory and refreshed in the background;
- older: evicted, the next call fetches synchronously.

Concurrent callers asking for the same key share a single in-flight request and
all receive the same value (or the same exception). Failed calls are retried
with urllib3's `Retry` bookkeeping, except 404s and configuration errors.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, TypeVar

from urllib3.exceptions import MaxRetryError
from urllib3.util.retry import Retry

from cinedeck.utils.config import QUERY_MAX_RETRIES, QUERY_RETAIN_SECONDS, QUERY_STALE_SECONDS, QUERY_WORKERS
from cinedeck.utils.errors import NotConfiguredError, RemoteServiceError
from cinedeck.utils.logger import LoggerProtocol, get_logger

T = TypeVar("T")
QueryKey = tuple[str, str]

default_logger = get_logger("QueryCache")


def make_query_key(operation: str, **params: Any) -> QueryKey:
    """Build a cache key; `None` params are dropped and the rest sorted."""
    normalized = {k: v for k, v in params.items() if v is not None}
    return operation, json.dumps(normalized, sort_keys=True, default=str, separators=(",", ":"))


@dataclass(frozen=True)
class QueryPolicy:
    stale_seconds: float = QUERY_STALE_SECONDS
    retain_seconds: float = QUERY_RETAIN_SECONDS
    max_retries: int = QUERY_MAX_RETRIES
    backoff_factor: float = 0.0

    def should_retry(self, exc: BaseException) -> bool:
        if isinstance(exc, NotConfiguredError):
            return False
        if isinstance(exc, RemoteServiceError):
            return not exc.is_not_found
        return False


DEFAULT_POLICY = QueryPolicy()


@dataclass
class QueryEntry:
    value: Any
    fetched_at: float
    retain_seconds: float = QUERY_RETAIN_SECONDS


class QueryCache:
    def __init__(
        self,
        policy: QueryPolicy | None = None,
        executor: ThreadPoolExecutor | None = None,
        clock: Callable[[], float] = time.monotonic,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.policy = policy or DEFAULT_POLICY
        self._executor = executor or ThreadPoolExecutor(max_workers=QUERY_WORKERS, thread_name_prefix="query")
        self._clock = clock
        self.logger = logger or default_logger
        self._lock = threading.Lock()
        self._entries: dict[QueryKey, QueryEntry] = {}
        self._inflight: dict[QueryKey, Future[Any]] = {}

    # ---------------------------------------------------------------------

    def fetch(self, key: QueryKey, fn: Callable[[], T], policy: QueryPolicy | None = None) -> T:
        policy = policy or self.policy
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            entry = self._entries.get(key)
            if entry is not None:
                age = now - entry.fetched_at
                if age < policy.stale_seconds:
                    self.logger.debug("📦 Cache hit %s", key[0])
                    return entry.value
                if age < policy.retain_seconds:
                    self.logger.debug("♻️ Stale hit %s, refreshing in background", key[0])
                    self._start(key, fn, policy)
                    return entry.value
            future = self._start(key, fn, policy)
        return future.result()

    def _start(self, key: QueryKey, fn: Callable[[], Any], policy: QueryPolicy) -> Future[Any]:
        # caller holds self._lock
        future = self._inflight.get(key)
        if future is None:
            future = self._executor.submit(self._run, key, fn, policy)
            self._inflight[key] = future
        return future

    def _run(self, key: QueryKey, fn: Callable[[], Any], policy: QueryPolicy) -> Any:
        try:
            value = self._call_with_retry(key, fn, policy)
        except Exception as exc:
            with self._lock:
                self._inflight.pop(key, None)
            self.logger.warning("⚠️ Query %s failed: %s", key[0], exc)
            raise
        with self._lock:
            self._entries[key] = QueryEntry(value, self._clock(), policy.retain_seconds)
            self._inflight.pop(key, None)
        return value

    def _call_with_retry(self, key: QueryKey, fn: Callable[[], Any], policy: QueryPolicy) -> Any:
        retry = Retry(total=policy.max_retries, backoff_factor=policy.backoff_factor)
        while True:
            try:
                return fn()
            except Exception as exc:
                if not policy.should_retry(exc):
                    raise
                try:
                    retry = retry.increment(method="GET", url=key[0], error=exc)
                except MaxRetryError:
                    raise exc from None
                self.logger.info("🔁 Retrying %s after error: %s", key[0], exc)
                retry.sleep()

    # ---------------------------------------------------------------------

    def get_cached(self, key: QueryKey) -> Any | None:
        """Cached value, or None once it is past its retention window."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._clock() - entry.fetched_at >= entry.retain_seconds:
                return None
            return entry.value

    def set(self, key: QueryKey, value: Any, policy: QueryPolicy | None = None) -> None:
        policy = policy or self.policy
        with self._lock:
            self._entries[key] = QueryEntry(value, self._clock(), policy.retain_seconds)

    def is_fetching(self, key: QueryKey) -> bool:
        with self._lock:
            return key in self._inflight

    def invalidate(self, operation: str) -> int:
        """Drop every entry of one operation; returns how many were removed."""
        with self._lock:
            keys = [k for k in self._entries if k[0] == operation]
            for k in keys:
                del self._entries[k]
        return len(keys)

    def sweep(self) -> int:
        """Evict entries past their retention window."""
        with self._lock:
            return self._evict_expired(self._clock())

    def _evict_expired(self, now: float) -> int:
        # caller holds self._lock
        expired = [k for k, e in self._entries.items() if now - e.fetched_at >= e.retain_seconds]
        for k in expired:
            self.logger.debug("🗑️ Evicting %s (age %.0fs)", k[0], now - self._entries[k].fetched_at)
            del self._entries[k]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

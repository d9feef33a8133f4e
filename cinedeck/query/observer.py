from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Generic, TypeVar

from cinedeck.tmdb.models import PagedResult
from cinedeck.utils.logger import LoggerProtocol, get_logger

T = TypeVar("T")

default_logger = get_logger("QueryView")


class QueryView(Generic[T]):
    """
    State holder for one view region (a movie row, a details panel, ...).

    Each load gets a generation number. A result is applied only if no newer load
    was started in the meantime and the view was not disposed, so an abandoned
    request can never overwrite fresher state.
    """

    def __init__(self, executor: ThreadPoolExecutor | None = None, logger: LoggerProtocol | None = None) -> None:
        self._executor = executor
        self.logger = logger or default_logger
        self._lock = threading.Lock()
        self._generation = 0
        self._disposed = False
        self.data: T | None = None
        self.error: BaseException | None = None
        self.is_loading = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            self.is_loading = True
            return self._generation

    def _settle(self, generation: int, data: T | None, error: BaseException | None) -> bool:
        with self._lock:
            if self._disposed or generation != self._generation:
                self.logger.debug("⏭️ Dropping stale result (generation %s, current %s)", generation, self._generation)
                return False
            self.data = data if error is None else self.data
            self.error = error
            self.is_loading = False
            return True

    def run(self, fn: Callable[[], T]) -> T | None:
        """Load synchronously. Errors end up in `self.error`, never raised."""
        generation = self._begin()
        try:
            data = fn()
        except Exception as exc:  # pylint: disable=broad-except
            self.logger.warning("⚠️ View load failed: %s", exc)
            self._settle(generation, None, exc)
            return None
        self._settle(generation, data, None)
        return data

    def load(self, fn: Callable[[], T]) -> Future[T | None]:
        """Load on the executor; the returned future resolves after state was applied."""
        if self._executor is None:
            raise RuntimeError("QueryView.load needs an executor, use run() otherwise")
        generation = self._begin()

        def execute() -> T | None:
            try:
                data = fn()
            except Exception as exc:  # pylint: disable=broad-except
                self.logger.warning("⚠️ View load failed: %s", exc)
                self._settle(generation, None, exc)
                return None
            self._settle(generation, data, None)
            return data

        return self._executor.submit(execute)

    def dispose(self) -> None:
        with self._lock:
            self._disposed = True
            self.is_loading = False


class PagedQuery(QueryView[PagedResult[Any]]):
    """
    "Load more" over a paginated endpoint.

    The page counter only grows; each new page replaces the displayed results.
    """

    def __init__(
        self,
        fetch_page: Callable[[int], PagedResult[Any]],
        executor: ThreadPoolExecutor | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        super().__init__(executor=executor, logger=logger)
        self._fetch_page = fetch_page
        self.page = 0

    @property
    def results(self) -> list[Any]:
        return list((self.data or {}).get("results", []))

    @property
    def total_pages(self) -> int:
        return int((self.data or {}).get("total_pages", 0))

    @property
    def has_more(self) -> bool:
        return self.page == 0 or self.page < self.total_pages

    def load_first(self) -> PagedResult[Any] | None:
        self.page = 1
        return self.run(lambda: self._fetch_page(1))

    def load_more(self) -> PagedResult[Any] | None:
        if not self.has_more:
            return self.data
        self.page += 1
        page = self.page
        return self.run(lambda: self._fetch_page(page))

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from cinedeck.query.cache import QueryCache, QueryPolicy
from cinedeck.stores.persistence import MemoryStorage
from cinedeck.tmdb.tmdb_client import TMDBClient
from tests.helpers import BASE_URL, IMAGE_BASE_URL, ManualClock, make_page, make_response


@pytest.fixture
def session() -> requests.Session:
    s = requests.Session()
    s.get = MagicMock(return_value=make_response(make_page([])))  # type: ignore[method-assign]
    return s


@pytest.fixture
def client(session: requests.Session) -> TMDBClient:
    return TMDBClient(api_key="test-key", base_url=BASE_URL, image_base_url=IMAGE_BASE_URL, session=session)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def query_cache(clock: ManualClock):
    cache = QueryCache(policy=QueryPolicy(stale_seconds=300, retain_seconds=1800, max_retries=3), clock=clock)
    yield cache
    cache.shutdown(wait=True)

from __future__ import annotations

import json
from typing import Any

import requests

BASE_URL = "https://api.test/3"
IMAGE_BASE_URL = "https://img.test/t/p"


def make_response(payload: Any, status: int = 200, reason: str = "OK") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r.reason = reason
    r._content = json.dumps(payload).encode("utf-8")
    r.headers["Content-Type"] = "application/json"
    return r


def make_page(results: list[dict[str, Any]], page: int = 1, total_pages: int = 1) -> dict[str, Any]:
    return {"page": page, "results": results, "total_pages": total_pages, "total_results": len(results)}


class ManualClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

import json
import sys
from pathlib import Path

import httpx
import pytest

# Добавляем корень репозитория в sys.path для импортов без установки пакета.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class RecordingHandler:
    """
    Обработчик для `httpx.MockTransport`: отвечает заранее подготовленными
    телами по пути с query-строкой и запоминает все полученные запросы.
    """

    def __init__(self, routes):
        self._routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.raw_path.decode("ascii")
        if key not in self._routes:
            return httpx.Response(404, content=json.dumps({"message": f"no route for {key}"}).encode())
        status, payload = self._routes[key]
        content = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        return httpx.Response(status, content=content)

    @property
    def paths(self):
        return [request.url.raw_path.decode("ascii") for request in self.requests]


@pytest.fixture
def fake_api():
    """Фабрика: по таблице маршрутов вернуть (обработчик, httpx.AsyncClient)."""

    def _factory(routes):
        handler = RecordingHandler(routes)
        return handler, httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture
def three_pages():
    """Три страницы списка счетов, связанные через `next_uri`."""
    return {
        "/v2/accounts?limit=2": (
            200,
            {
                "pagination": {"limit": 2, "order": "desc", "next_uri": "/v2/accounts?limit=2&starting_after=a2"},
                "data": [{"n": 1}, {"n": 2}],
            },
        ),
        "/v2/accounts?limit=2&starting_after=a2": (
            200,
            {
                "pagination": {"limit": 2, "order": "desc", "next_uri": "/v2/accounts?limit=2&starting_after=a4"},
                "data": [{"n": 3}, {"n": 4}],
            },
        ),
        "/v2/accounts?limit=2&starting_after=a4": (
            200,
            {
                "pagination": {"limit": 2, "order": "desc", "next_uri": None},
                "data": [{"n": 5}],
            },
        ),
    }

"""Shared fixtures for unit tests."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from loguru import logger
from starlette.requests import Request

type RequestFactory = Callable[..., Request]


@pytest.fixture
def make_request() -> RequestFactory:
    """Build real Starlette requests from an ASGI scope.

    Returns:
        RequestFactory: ``(method, path, query, headers, body, path_params)``
            to Request.
    """

    def factory(
        method: str = "GET",
        path: str = "/items",
        query: str = "",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        path_params: dict[str, Any] | None = None,
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": query.encode(),
            "headers": [
                (key.lower().encode(), value.encode())
                for key, value in (headers or {}).items()
            ],
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
            "path_params": path_params or {},
        }
        sent = False

        async def receive() -> dict[str, Any]:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return factory


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture Loguru records emitted during the test.

    Yields:
        list[dict[str, Any]]: Captured records, in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)

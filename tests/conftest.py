"""Shared pytest fixtures for fastapi-simple-api tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
from starlette.requests import Request

from fastapi_simple_api.context import RequestContext


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects from raw ASGI scopes."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        path_params: dict[str, Any] | None = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
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

    return _make


@pytest.fixture
def make_context() -> Any:
    """Factory for RequestContext instances without going through a request."""

    def _make(
        method: str = "GET",
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> RequestContext:
        return RequestContext(
            method=method,
            data=dict(params or {}),
            raw_headers=list((headers or {}).items()),
            **kwargs,
        )

    return _make


@pytest.fixture
def mock_validator() -> Mock:
    """Mock API key validator that accepts every key."""
    return Mock(return_value=True)

"""api_context() — per-exchange RequestContext accessor for FastAPI."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response

from fastapi_simple_api._types import Params
from fastapi_simple_api.config import DEFAULT_CONFIG, APIConfig
from fastapi_simple_api.context import RequestContext
from fastapi_simple_api.exceptions import ExchangeTerminated

logger = logging.getLogger(__name__)

_STATE_KEY = "api_context"

FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def collect_params(items: Iterable[tuple[str, Any]]) -> Params:
    """Fold key/value pairs into params.

    Repeated keys and ``key[]`` style keys become lists.
    """
    params: Params = {}
    for key, value in items:
        if key.endswith("[]"):
            key = key[:-2]
            existing = params.get(key)
            if isinstance(existing, list):
                existing.append(value)
            else:
                params[key] = [value]
        elif key in params:
            existing = params[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                params[key] = [existing, value]
        else:
            params[key] = value
    return params


async def read_body(request: Request) -> Params:
    """Parse a JSON object or form body; anything else yields no params."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip()
    try:
        if content_type == "application/json":
            payload = await request.json()
            return dict(payload) if isinstance(payload, dict) else {}
        if content_type in FORM_TYPES:
            form = await request.form()
            return collect_params(form.multi_items())
    except (ValueError, UnicodeDecodeError, HTTPException) as exc:
        logger.debug("Ignoring unreadable %s body: %s", content_type, exc)
    return {}


async def build_context(
    request: Request, config: APIConfig = DEFAULT_CONFIG
) -> RequestContext:
    """Capture method, headers and params of ``request`` into a new context."""
    method = request.method
    query = collect_params(request.query_params.multi_items())

    verb = method.lower()
    if verb == "get":
        params = query
    elif verb == "post":
        params = await read_body(request)
    else:
        params = {**query, **(await read_body(request)), **request.path_params}

    ctx = RequestContext(
        method=method,
        data=params,
        raw_headers=[(name, value) for name, value in request.headers.items()],
        config=config,
        scheme=request.url.scheme,
        host=request.headers.get("host", request.url.netloc),
        path=request.url.path,
    )
    logger.debug("Built request context for %s %s", method, request.url.path)
    return ctx


async def get_context(
    request: Request, config: APIConfig | None = None
) -> RequestContext:
    """Return this exchange's context, building it on first use.

    Contexts are cached per config, so dependencies built with different
    configs on one route each see their own settings.
    """
    resolved = config or DEFAULT_CONFIG
    cache: dict[APIConfig, RequestContext] | None = getattr(
        request.state, _STATE_KEY, None
    )
    if cache is None:
        cache = {}
        setattr(request.state, _STATE_KEY, cache)
    ctx = cache.get(resolved)
    if ctx is None:
        ctx = await build_context(request, resolved)
        cache[resolved] = ctx
    return ctx


def api_context(
    config: APIConfig | None = None,
) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency yielding the RequestContext."""
    resolved = config or DEFAULT_CONFIG

    async def dependency(request: Request) -> RequestContext:
        return await get_context(request, resolved)

    return dependency


async def exchange_terminated_handler(
    request: Request, exc: ExchangeTerminated
) -> Response:
    """Return the response a terminated exchange already rendered."""
    return exc.response


def register_exception_handlers(app: FastAPI) -> None:
    """Let ExchangeTerminated raised by a route become its response."""
    app.add_exception_handler(ExchangeTerminated, exchange_terminated_handler)

"""Contract tests — verify all public symbols are importable from top-level."""

from __future__ import annotations

import fastapi_simple_api

PUBLIC_SYMBOLS = [
    # Core
    "RequestContext",
    "APIConfig",
    "api_context",
    "get_context",
    "build_context",
    "register_exception_handlers",
    "normalize_header_name",
    # Expectations
    "Expectation",
    "Coercion",
    "ValidationResult",
    "parse_expectation",
    "coerce",
    "validate",
    # Responses
    "PrettyJSONResponse",
    "build_envelope",
    "token",
    # Exceptions
    "APIException",
    "ExchangeTerminated",
    "ResponseSent",
    "MethodNotAllowed",
    "ValidationFailed",
    "Unauthorized",
    "InternalError",
]


class TestPublicAPIContract:
    def test_all_symbols_importable(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert hasattr(fastapi_simple_api, symbol), (
                f"Symbol '{symbol}' not found in fastapi_simple_api"
            )

    def test_all_symbols_in_all(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert symbol in fastapi_simple_api.__all__, (
                f"Symbol '{symbol}' not in __all__"
            )

    def test_request_context_is_dataclass(self) -> None:
        from dataclasses import fields

        from fastapi_simple_api import RequestContext

        field_names = [f.name for f in fields(RequestContext)]
        assert "method" in field_names
        assert "data" in field_names
        assert "started_at" in field_names

    def test_api_context_returns_callable(self) -> None:
        from fastapi_simple_api import api_context

        assert callable(api_context())

    def test_config_is_frozen(self) -> None:
        import pytest

        from fastapi_simple_api import APIConfig

        with pytest.raises(AttributeError):
            APIConfig().cors = True  # type: ignore[misc]

    def test_exception_hierarchy(self) -> None:
        from fastapi_simple_api import (
            APIException,
            ExchangeTerminated,
            InternalError,
            MethodNotAllowed,
            ResponseSent,
            Unauthorized,
            ValidationFailed,
        )

        assert issubclass(ExchangeTerminated, APIException)
        for cls in (
            ResponseSent,
            MethodNotAllowed,
            ValidationFailed,
            Unauthorized,
            InternalError,
        ):
            assert issubclass(cls, ExchangeTerminated)

    def test_public_context_methods_are_documented(self) -> None:
        from fastapi_simple_api import RequestContext

        for name in (
            "headers",
            "header",
            "param",
            "params",
            "url",
            "remove_protocol",
            "to_bool",
            "verb",
            "expecting",
            "cors",
            "status",
            "echo",
            "respond",
        ):
            assert getattr(RequestContext, name).__doc__, f"{name} has no docstring"

"""FastAPI Simple API - per-request helpers for small JSON HTTP APIs."""

from fastapi_simple_api.config import APIConfig
from fastapi_simple_api.context import RequestContext, normalize_header_name
from fastapi_simple_api.dependency import (
    api_context,
    build_context,
    get_context,
    register_exception_handlers,
)
from fastapi_simple_api.exceptions import (
    APIException,
    ExchangeTerminated,
    InternalError,
    MethodNotAllowed,
    ResponseSent,
    Unauthorized,
    ValidationFailed,
)
from fastapi_simple_api.expectations import (
    Coercion,
    Expectation,
    ValidationResult,
    coerce,
    parse_expectation,
    validate,
)
from fastapi_simple_api.responses import PrettyJSONResponse, build_envelope
from fastapi_simple_api.tokens import token

__all__ = [
    "APIConfig",
    "APIException",
    "Coercion",
    "ExchangeTerminated",
    "Expectation",
    "InternalError",
    "MethodNotAllowed",
    "PrettyJSONResponse",
    "RequestContext",
    "ResponseSent",
    "Unauthorized",
    "ValidationFailed",
    "ValidationResult",
    "api_context",
    "build_context",
    "build_envelope",
    "coerce",
    "get_context",
    "normalize_header_name",
    "parse_expectation",
    "register_exception_handlers",
    "token",
    "validate",
]

"""RequestContext — per-exchange request wrapper and JSON responder."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NoReturn

from fastapi_simple_api import tokens
from fastapi_simple_api._types import KeyValidator, Params, VerbHandler
from fastapi_simple_api.config import DEFAULT_CONFIG, APIConfig
from fastapi_simple_api.exceptions import (
    ExchangeTerminated,
    InternalError,
    MethodNotAllowed,
    ResponseSent,
    Unauthorized,
    ValidationFailed,
)
from fastapi_simple_api.expectations import validate
from fastapi_simple_api.responses import PrettyJSONResponse, build_envelope

logger = logging.getLogger(__name__)

_UNSET: Any = object()

PROTOCOLS = ("file", "ftp", "http", "https", "ldap", "ldaps")


def normalize_header_name(name: str) -> str:
    """``x-custom_header`` / ``HTTP_X_CUSTOM_HEADER`` -> ``X-Custom-Header``."""
    if name.upper().startswith("HTTP_"):
        name = name[5:]
    words = name.replace("_", " ").replace("-", " ").split()
    return "-".join(word.lower().capitalize() for word in words)


@dataclass
class RequestContext:
    """Everything a handler needs to read one request and answer it in JSON.

    Built once per exchange (see ``get_context``); never shared between
    exchanges.
    """

    method: str = "GET"
    data: Params = field(default_factory=dict)
    raw_headers: Iterable[tuple[str, str]] = ()
    config: APIConfig = DEFAULT_CONFIG
    scheme: str = "http"
    host: str = ""
    path: str = "/"
    started_at: float = field(default_factory=time.perf_counter)
    status_code: int = 200
    cors_enabled: bool = False
    buffer: list[str] = field(default_factory=list)
    responded: bool = False
    _headers: Mapping[str, str] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.config.cors:
            self.cors_enabled = True

    # -- request data --

    def headers(self) -> Mapping[str, str]:
        """Request headers keyed by Title-Case names, computed once."""
        if self._headers is None:
            normalized = {
                normalize_header_name(name): value for name, value in self.raw_headers
            }
            self._headers = MappingProxyType(normalized)
        return self._headers

    def header(self, name: str) -> str | None:
        """Value of one normalized header, or None when absent."""
        return self.headers().get(name)

    def method_name(self) -> str:
        return self.method

    def param(self, key: str, value: Any = _UNSET) -> Any:
        """Read ``key``, or store ``value`` under it when given.

        Lists are returned without their falsy entries.
        """
        if value is not _UNSET:
            self.data[key] = value
            return value
        stored = self.data.get(key)
        if isinstance(stored, list):
            return [item for item in stored if item]
        return stored

    def params(self) -> Params:
        """All params except the reserved ones."""
        return {
            key: value
            for key, value in self.data.items()
            if key not in self.config.reserved_params
        }

    def url(self) -> str:
        """Request URL without query string or trailing slash."""
        return f"{self.scheme}://{self.host}{self.path.rstrip('/')}"

    @staticmethod
    def remove_protocol(url: str) -> str:
        """Strip ``file``, ``ftp``, ``http(s)`` and ``ldap(s)`` scheme prefixes."""
        for protocol in PROTOCOLS:
            url = url.replace(f"{protocol}://", "")
        return url

    @staticmethod
    def to_bool(value: Any) -> bool:
        """Lenient boolean: ``1/true/on/yes`` are True, anything else False."""
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("1", "true", "on", "yes")

    to_boolean = to_bool

    # -- verb guards --

    def verb(
        self,
        name: str,
        handler: VerbHandler[Any] | None = None,
        *,
        message: str | None = None,
    ) -> Any:
        """Guard the exchange to one HTTP verb.

        Without a handler a mismatch answers 405 and terminates the exchange.
        With a handler a mismatch is skipped silently, so several guards can
        be chained to route on the method.
        """
        matches = self.method.upper() == name.upper()
        if handler is not None:
            return handler(self) if matches else self
        if not matches:
            self._terminate(
                405,
                message or f"{self.method.upper()} not supported",
                MethodNotAllowed,
            )
        return self

    def get(
        self, handler: VerbHandler[Any] | None = None, *, message: str | None = None
    ) -> Any:
        return self.verb("GET", handler, message=message)

    def post(
        self, handler: VerbHandler[Any] | None = None, *, message: str | None = None
    ) -> Any:
        return self.verb("POST", handler, message=message)

    def put(
        self, handler: VerbHandler[Any] | None = None, *, message: str | None = None
    ) -> Any:
        return self.verb("PUT", handler, message=message)

    def patch(
        self, handler: VerbHandler[Any] | None = None, *, message: str | None = None
    ) -> Any:
        return self.verb("PATCH", handler, message=message)

    def delete(
        self, handler: VerbHandler[Any] | None = None, *, message: str | None = None
    ) -> Any:
        return self.verb("DELETE", handler, message=message)

    # -- validation and auth --

    def expecting(self, *specs: str) -> RequestContext:
        """Validate params against spec strings, answering 422 on any error.

        The validated params replace the current ones even when errors are
        reported.
        """
        result = validate(self.data, *specs)
        self.data = result.params
        if not result.ok:
            response, body = self._render(422, result.errors())
            logger.info(
                "Rejecting %s %s: %s", self.method, self.path, result.errors()
            )
            raise ValidationFailed(
                response, body, missing=result.missing, invalid=result.invalid
            )
        return self

    def candidate_key(self) -> str | None:
        authorization = self.header("Authorization") or ""
        parts = authorization.split(self.config.token_marker)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()
        value = self.param(self.config.apikey_param)
        return value if value else None

    def apikey(self, validator: KeyValidator | None = None) -> RequestContext:
        key = self.candidate_key()
        if not key:
            self._terminate(403, "unauthorized", Unauthorized)
        if validator is not None:
            if not callable(validator):
                self._terminate(500, "", InternalError)
            if not validator(key):
                self._terminate(403, "unauthorized", Unauthorized)
        return self

    # -- response --

    def cors(self, enabled: bool = True) -> RequestContext:
        """Toggle the ``Access-Control-Allow-Origin: *`` response header."""
        if self.responded:
            raise RuntimeError("CORS cannot change after the response was sent")
        self.cors_enabled = bool(enabled)
        return self

    def status(self, code: int = 200) -> RequestContext:
        """Set the status code the response will carry."""
        self.status_code = code
        return self

    def echo(self, text: str) -> RequestContext:
        """Buffer diagnostic output; discarded unless responding with clean=False."""
        self.buffer.append(text)
        return self

    def respond(self, code: int, payload: Any = "", clean: bool = True) -> NoReturn:
        """Answer the exchange with a JSON envelope and terminate it."""
        self._terminate(code, payload, ResponseSent, clean=clean)

    def _render(
        self, code: int, payload: Any, clean: bool = True
    ) -> tuple[PrettyJSONResponse, dict[str, Any]]:
        if self.responded:
            raise RuntimeError("A response was already sent for this exchange")
        self.status(code)
        body = build_envelope(code, payload, time.perf_counter() - self.started_at)
        prefix = "" if clean else "".join(self.buffer)
        self.buffer.clear()
        headers = {"Access-Control-Allow-Origin": "*"} if self.cors_enabled else None
        response = PrettyJSONResponse(
            body,
            status_code=self.status_code,
            headers=headers,
            indent=self.config.json_indent,
            prefix=prefix,
        )
        self.responded = True
        return response, body

    def _terminate(
        self,
        code: int,
        payload: Any,
        exc_type: type[ExchangeTerminated],
        clean: bool = True,
    ) -> NoReturn:
        response, body = self._render(code, payload, clean)
        if code >= 400:
            logger.info("Terminating %s %s with %d", self.method, self.path, code)
        raise exc_type(response, body)

    # -- identifiers --

    def token(self, length: int | None = None) -> str:
        return tokens.token(self.config.token_length if length is None else length)

    def id(self, length: int | None = None) -> str:
        return self.token(length)

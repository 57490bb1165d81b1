"""Exception hierarchy for terminated exchanges."""

from __future__ import annotations

from typing import Any

from starlette.responses import Response


class APIException(Exception):
    """Base for all fastapi-simple-api exceptions."""


class ExchangeTerminated(APIException):
    """The exchange has been answered; no further handler code may run.

    Carries the fully rendered response so the hosting layer can return it
    as-is.
    """

    def __init__(self, response: Response, body: dict[str, Any]) -> None:
        super().__init__(f"exchange terminated with status {response.status_code}")
        self.response = response
        self.body = body

    @property
    def status_code(self) -> int:
        return self.response.status_code


class ResponseSent(ExchangeTerminated):
    """Raised by RequestContext.respond() for any explicit response."""


class MethodNotAllowed(ExchangeTerminated):
    """Verb guard mismatch (405)."""


class ValidationFailed(ExchangeTerminated):
    """Missing or badly typed parameters (422)."""

    def __init__(
        self,
        response: Response,
        body: dict[str, Any],
        *,
        missing: list[str] | None = None,
        invalid: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(response, body)
        self.missing = missing or []
        self.invalid = invalid or []


class Unauthorized(ExchangeTerminated):
    """Missing or rejected API key (403)."""


class InternalError(ExchangeTerminated):
    """Misconfigured request handling, e.g. a non-callable key validator (500)."""

"""JSON envelope construction and rendering."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from starlette.responses import JSONResponse


def build_envelope(code: int, payload: Any, elapsed: float) -> dict[str, Any]:
    """Wrap ``payload`` in the standard response envelope.

    Mapping payloads are merged into the envelope (their keys win on
    collision); anything else is placed under ``message``.
    """
    body: dict[str, Any] = {
        "code": code,
        "response_time_seconds": round(max(elapsed, 0.0), 2),
    }
    if isinstance(payload, Mapping):
        body.update(payload)
    else:
        body["message"] = payload
    return body


class PrettyJSONResponse(JSONResponse):
    """Indented JSON with forward slashes left unescaped."""

    indent = 4

    def __init__(
        self,
        content: Any,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        *,
        indent: int | None = None,
        prefix: str = "",
    ) -> None:
        if indent is not None:
            self.indent = indent
        self.prefix = prefix
        super().__init__(content, status_code=status_code, headers=headers)

    def render(self, content: Any) -> bytes:
        text = json.dumps(content, indent=self.indent, allow_nan=False)
        return (self.prefix + text).encode("utf-8")

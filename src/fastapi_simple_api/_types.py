"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from fastapi_simple_api.context import RequestContext

T = TypeVar("T")

# Parameter values as they arrive from query strings, forms and JSON bodies
ParamValue = Any
Params = dict[str, ParamValue]

# Callback types used by verb guards and API key enforcement
VerbHandler = Callable[["RequestContext"], T]
KeyValidator = Callable[[str], Any]

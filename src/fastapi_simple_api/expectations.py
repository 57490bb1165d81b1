"""Parameter expectations — a compact grammar for required/optional params.

A spec string reads ``name [ "?" [default] ] [ "|" type ]``:

    "email"              required, any type
    "age|int"            required, coerced to int
    "page?"              optional, no default
    "limit?20|int"       optional, defaults to 20
    "tags|array"         required JSON array (or list)

Errors are collected for the whole batch rather than failing on the first
bad parameter, so a client sees every problem in a single response.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

from fastapi_simple_api._types import Params

INT_TYPES = frozenset({"int", "integer"})
FLOAT_TYPES = frozenset({"float", "double"})
STRING_TYPES = frozenset({"string", "str"})
BOOL_TYPES = frozenset({"boolean", "bool"})
ARRAY_TYPES = frozenset({"array"})
KNOWN_TYPES = INT_TYPES | FLOAT_TYPES | STRING_TYPES | BOOL_TYPES | ARRAY_TYPES

_TRUE_WORDS = frozenset({"1", "true", "on", "yes"})
_FALSE_WORDS = frozenset({"0", "false", "off", "no", ""})


@dataclass(frozen=True)
class Expectation:
    """A parsed spec string."""

    spec: str
    key: str
    name: str
    optional: bool = False
    default: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class Coercion:
    """Outcome of converting a value to a declared type."""

    ok: bool
    value: Any
    original: Any
    type: str


@dataclass
class ValidationResult:
    """Validated parameters plus the errors found while producing them."""

    params: Params
    missing: list[str] = field(default_factory=list)
    invalid: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.invalid

    def errors(self) -> dict[str, Any]:
        """Error buckets keyed the way they appear in a 422 body."""
        out: dict[str, Any] = {}
        if self.missing:
            out["missing params"] = list(self.missing)
        if self.invalid:
            out["invalid type"] = list(self.invalid)
        return out


def parse_expectation(spec: str) -> Expectation:
    """Parse a single spec string.

    Raises ValueError for an unknown type name.
    """
    key, bar, type_name = spec.partition("|")
    type_ = type_name.strip() if bar else None
    if type_ is not None and type_ not in KNOWN_TYPES:
        raise ValueError(f"Unknown parameter type {type_!r} in {spec!r}")

    name, question, default = key.partition("?")
    optional = bool(question)
    return Expectation(
        spec=spec,
        key=key,
        name=name,
        optional=optional,
        default=default if optional and default else None,
        type=type_,
    )


def type_name(value: Any) -> str:
    """Wire name of a value's type, as reported in ``invalid type`` records."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_blank(value: Any) -> bool:
    """Values a client sends when it has nothing to say."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _text(value: Any) -> str:
    # Integral floats render without a fraction so "3" and 3.0 agree
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _matches(value: Any, type_: str) -> bool:
    if type_ in INT_TYPES:
        return isinstance(value, int) and not isinstance(value, bool)
    if type_ in FLOAT_TYPES:
        return isinstance(value, float) and math.isfinite(value)
    if type_ in STRING_TYPES:
        return isinstance(value, str)
    if type_ in BOOL_TYPES:
        return isinstance(value, bool)
    return isinstance(value, list)


def coerce(value: Any, type_: str) -> Coercion:
    """Convert ``value`` to ``type_`` without losing information.

    A conversion only succeeds when the value's text before and after
    conversion is identical, so ``"12abc"`` or ``"1.50"`` are rejected
    rather than silently truncated.
    """
    if _matches(value, type_):
        return Coercion(ok=True, value=value, original=value, type=type_)

    failed = Coercion(ok=False, value=value, original=value, type=type_)
    if isinstance(value, (list, tuple, dict)) or value is None:
        return failed

    if type_ in BOOL_TYPES:
        word = _text(value).strip().lower()
        if word in _TRUE_WORDS:
            return Coercion(ok=True, value=True, original=value, type=type_)
        if word in _FALSE_WORDS:
            return Coercion(ok=True, value=False, original=value, type=type_)
        return failed

    try:
        if type_ in INT_TYPES:
            converted: Any = int(value)
        elif type_ in FLOAT_TYPES:
            converted = float(value)
            if not math.isfinite(converted):
                return failed
        elif type_ in STRING_TYPES:
            converted = _text(value)
        else:
            return failed
    except (TypeError, ValueError, OverflowError):
        return failed

    if _text(value) != _text(converted):
        return failed
    return Coercion(ok=True, value=converted, original=value, type=type_)


def zero_value(type_: str | None) -> Any:
    """Value an optional parameter takes when it has neither input nor default."""
    if type_ is None:
        return None
    if type_ in INT_TYPES:
        return 0
    if type_ in FLOAT_TYPES:
        return 0.0
    if type_ in STRING_TYPES:
        return ""
    if type_ in BOOL_TYPES:
        return False
    return []


def convert_default(default: str | None, type_: str | None) -> Any:
    """Convert default text to the declared type, falling back to its zero value."""
    if default is None:
        return zero_value(type_)
    if type_ is None:
        return default
    if type_ in ARRAY_TYPES:
        parsed = _parse_array(default)
        return parsed if parsed is not None else []
    result = coerce(default, type_)
    return result.value if result.ok else zero_value(type_)


def _parse_array(value: Any) -> list[Any] | None:
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if not isinstance(value, (str, bytes)):
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


def _is_missing(params: Params, exp: Expectation) -> bool:
    if params.get(exp.key) is None:
        return True
    # Integers and booleans legitimately arrive as 0 / false
    if exp.type in INT_TYPES or exp.type in BOOL_TYPES:
        return False
    return is_blank(params[exp.key])


def _fill_optional(params: Params, exp: Expectation) -> None:
    params.pop(exp.key, None)
    current = params.get(exp.name)
    if current is None:
        params[exp.name] = convert_default(exp.default, exp.type)
    elif current == "false" and exp.type not in STRING_TYPES:
        # Stringified booleans from form clients mean "not set" here
        params[exp.name] = None


def _invalid(exp: Expectation, value: Any) -> dict[str, Any]:
    received = type_name(value)
    if isinstance(value, float) and not math.isfinite(value):
        # JSON has no NaN or Infinity
        value = str(value)
    return {
        "param": exp.key,
        "expecting": exp.type,
        "received": received,
        "value": value,
    }


def validate(params: Params, *specs: str) -> ValidationResult:
    """Validate and coerce ``params`` against ``specs``.

    The input mapping is not modified; the result carries a new one.
    """
    result = ValidationResult(params=dict(params))
    search = result.params

    for spec in specs:
        exp = parse_expectation(spec)

        if _is_missing(search, exp):
            if exp.optional:
                _fill_optional(search, exp)
            else:
                result.missing.append(exp.key)
            continue

        value = search[exp.key]
        if exp.type is None:
            continue

        if exp.type in ARRAY_TYPES:
            parsed = _parse_array(value)
            if parsed is None:
                result.invalid.append(_invalid(exp, value))
            elif not parsed:
                result.missing.append(exp.key)
            else:
                search[exp.key] = parsed
            continue

        coerced = coerce(value, exp.type)
        if coerced.ok:
            search[exp.key] = coerced.value
        else:
            result.invalid.append(_invalid(exp, value))

    return result

"""APIConfig — per-application settings for request contexts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class APIConfig:
    """Immutable settings shared by every RequestContext of an application."""

    cors: bool = False
    reserved_params: tuple[str, ...] = ("_q",)
    apikey_param: str = "apikey"
    token_marker: str = "Token token="
    json_indent: int = 4
    token_length: int = 30


DEFAULT_CONFIG = APIConfig()

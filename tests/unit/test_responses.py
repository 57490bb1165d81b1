"""Tests for envelope construction and JSON rendering."""

from __future__ import annotations

import json

import pytest

from fastapi_simple_api.responses import PrettyJSONResponse, build_envelope


class TestBuildEnvelope:
    def test_scalar_payload(self) -> None:
        body = build_envelope(404, "not found", 0.123)
        assert body == {"code": 404, "response_time_seconds": 0.12, "message": "not found"}

    def test_mapping_payload_is_merged(self) -> None:
        body = build_envelope(200, {"items": [1, 2]}, 1.0)
        assert body["items"] == [1, 2]
        assert body["code"] == 200

    def test_payload_keys_win(self) -> None:
        body = build_envelope(200, {"code": 201}, 0.0)
        assert body["code"] == 201

    def test_elapsed_is_never_negative(self) -> None:
        assert build_envelope(200, "", -0.5)["response_time_seconds"] == 0.0


class TestPrettyJSONResponse:
    def test_indented_output(self) -> None:
        response = PrettyJSONResponse({"a": 1})
        assert response.body == b'{\n    "a": 1\n}'

    def test_slashes_unescaped(self) -> None:
        response = PrettyJSONResponse({"url": "http://x/y"})
        assert b"http://x/y" in response.body

    def test_custom_indent_and_prefix(self) -> None:
        response = PrettyJSONResponse({"a": 1}, indent=2, prefix=">")
        assert response.body.startswith(b">{\n  ")
        assert json.loads(response.body[1:]) == {"a": 1}

    def test_status_and_media_type(self) -> None:
        response = PrettyJSONResponse({}, status_code=422)
        assert response.status_code == 422
        assert response.headers["content-type"] == "application/json"

    def test_non_finite_numbers_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            PrettyJSONResponse({"ratio": float("nan")})
        with pytest.raises(ValueError):
            PrettyJSONResponse({"big": float("inf")})

    def test_unserializable_values_raise(self) -> None:
        with pytest.raises(TypeError):
            PrettyJSONResponse({"when": object()})

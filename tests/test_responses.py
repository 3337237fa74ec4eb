from __future__ import annotations

import pytest

from shallot.responses import EMPTY_RESPONSE, HTMLResponse, JSONResponse, PlainTextResponse, Response, finalize
from shallot.serialization import json_decode


def test_plain_text_response_headers() -> None:
    response = PlainTextResponse("hello")
    assert response.body == b"hello"
    assert response.status_text == "OK"
    assert response.header("content-type") == "text/plain; charset=utf-8"


def test_json_response_encodes_with_msgspec() -> None:
    response = JSONResponse({"id": 7}, status=201)
    assert json_decode(response.body) == {"id": 7}
    assert response.status == 201
    assert response.status_text == "Created"
    assert response.header("content-type") == "application/json"


def test_html_response_allows_header_override() -> None:
    response = HTMLResponse("<p>x</p>", headers=[("content-type", "text/html")])
    assert response.header_values("content-type") == ["text/html"]


def test_response_with_headers() -> None:
    base = Response(status=204)
    updated = base.with_headers((("x-test", "1"),))
    assert updated.header("x-test") == "1"
    assert base.headers == ()


def test_finalize_plain_body_keeps_current_status() -> None:
    current = Response(status=202, status_text="Accepted", headers=(("x-a", "1"),))
    response = finalize(current, "done")
    assert response.status == 202
    assert response.status_text == "Accepted"
    assert response.body == b"done"
    assert response.header("x-a") == "1"


def test_finalize_status_override_resets_status_text() -> None:
    response = finalize(EMPTY_RESPONSE, "", status=404)
    assert response.status == 404
    assert response.status_text == "Not Found"


def test_finalize_wrapped_response_republishes_status() -> None:
    wrapped = Response(status=418, status_text="Short And Stout", headers=(("x-b", "2"),), body=b"tea")
    response = finalize(Response(headers=(("x-a", "1"),)), wrapped, headers={"x-c": "3"})
    assert response.status == 418
    assert response.status_text == "Short And Stout"
    assert response.body == b"tea"
    assert [name for name, _ in response.headers] == ["x-a", "x-b", "x-c"]


def test_finalize_wrapped_response_overrides() -> None:
    wrapped = Response(status=418, status_text="Short And Stout")
    response = finalize(EMPTY_RESPONSE, wrapped, status=200, status_text="Fine")
    assert response.status == 200
    assert response.status_text == "Fine"


def test_finalize_accepts_byte_chunks_and_none() -> None:
    assert finalize(EMPTY_RESPONSE, iter([b"a", b"b", b"c"])).body == b"abc"
    assert finalize(EMPTY_RESPONSE, None).body == b""
    assert finalize(EMPTY_RESPONSE, bytearray(b"xy")).body == b"xy"


def test_finalize_rejects_invalid_status() -> None:
    with pytest.raises(ValueError):
        finalize(EMPTY_RESPONSE, "", status=42)

from __future__ import annotations

import pytest

from shallot.error_page import error_details, error_page_middleware, render_error_page
from shallot.requests import Request
from shallot.routing import Router


def test_render_error_page_escapes_values() -> None:
    request = Request(
        method="POST",
        url="http://example.com/<x>",
        headers={"User-Agent": "agent <1>", "Host": "example.com"},
    )
    html = render_error_page(request, ValueError("bad <input>"))
    assert html.startswith("<!DOCTYPE html>")
    assert "bad &lt;input&gt;" in html
    assert "agent &lt;1&gt;" in html
    assert "http://example.com/&lt;x&gt;" in html
    assert "<input>" not in html


def test_error_details_lists_request_fields() -> None:
    request = Request(method="get", url="/x", headers={"content-type": "text/plain"})
    details = dict(error_details(request, KeyError("k")))
    assert details["Method"] == "GET"
    assert details["URL"] == "/x"
    assert details["Content-Type"] == "text/plain"
    assert details["Error"] == "KeyError"


def test_render_error_page_falls_back_to_error_type() -> None:
    html = render_error_page(Request(method="GET", url="/"), RuntimeError())
    assert "RuntimeError" in html


@pytest.mark.asyncio
async def test_error_page_middleware_recovers() -> None:
    router = Router()
    router.all("(.*)").use(error_page_middleware())

    async def broken(ctx, next):
        raise RuntimeError("handler failed")

    router.get("/broken").handle(broken)
    router.get("/fine").handle(lambda ctx, next: ctx.text("fine"))

    response = await router.respond(Request(method="GET", url="/broken"))
    assert response is not None
    assert response.status == 500
    assert response.header("content-type") == "text/html"
    assert b"handler failed" in response.body

    response = await router.respond(Request(method="GET", url="/fine"))
    assert response is not None
    assert response.text() == "fine"

"""Per-request context shared by every frame of the middleware stack."""

from __future__ import annotations

from typing import Any, MutableMapping
from urllib.parse import SplitResult, urlsplit

from .headers import HeaderSource, merge_headers
from .requests import Request
from .responses import EMPTY_RESPONSE, Body, Response, finalize
from .serialization import json_encode


class RequestContext:
    """Container threading the live response, params and shared data.

    ``params`` always holds the parameters of the route whose frame is active
    on the stack. ``data`` is one dict shared by reference across the chain.

    Neither ``data`` nor ``response`` is locked. Correctness relies on the
    dispatcher running frames strictly one at a time; code that dispatches
    frames in parallel must add its own synchronisation.
    """

    __slots__ = ("data", "finalized", "params", "request", "response", "url")

    def __init__(
        self,
        request: Request,
        url: str | SplitResult,
        *,
        response: Response = EMPTY_RESPONSE,
        params: dict[str, str] | None = None,
        data: MutableMapping[str, Any] | None = None,
    ) -> None:
        self.request = request
        self.url = urlsplit(url) if isinstance(url, str) else url
        self.response = response
        self.params: dict[str, str] = params if params is not None else {}
        self.data: MutableMapping[str, Any] = data if data is not None else {}
        self.finalized = False

    def end(
        self,
        body: Body,
        *,
        status: int | None = None,
        status_text: str | None = None,
        headers: HeaderSource | None = None,
    ) -> Response:
        """Replace the live response and return it."""

        self.response = finalize(self.response, body, status=status, status_text=status_text, headers=headers)
        self.finalized = True
        return self.response

    def text(self, body: str, *, status: int | None = None, headers: HeaderSource | None = None) -> Response:
        merged = merge_headers({"content-type": "text/plain; charset=utf-8"}, headers)
        return self.end(body, status=status, headers=merged)

    def html(self, body: str, *, status: int | None = None, headers: HeaderSource | None = None) -> Response:
        merged = merge_headers({"content-type": "text/html"}, headers)
        return self.end(body, status=status, headers=merged)

    def json(self, value: Any, *, status: int | None = None, headers: HeaderSource | None = None) -> Response:
        merged = merge_headers({"content-type": "application/json"}, headers)
        return self.end(json_encode(value), status=status, headers=merged)

    def __repr__(self) -> str:
        return f"RequestContext({self.request.method} {self.url.geturl()} params={self.params!r})"

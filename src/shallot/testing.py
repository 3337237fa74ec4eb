"""Testing helpers."""

from __future__ import annotations

from typing import Any, Mapping

from .asgi import handle
from .requests import Request
from .responses import Response
from .routing import Router
from .serialization import json_encode


class TestClient:
    """Async test client that dispatches requests in-process.

    With ``through_boundary`` the request goes through :func:`~shallot.asgi.handle`
    and always yields a response; otherwise :meth:`Router.respond` is called
    directly and ``None`` signals that nothing matched.
    """

    __test__ = False

    def __init__(self, router: Router, *, through_boundary: bool = False, base_url: str = "") -> None:
        self.router = router
        self.through_boundary = through_boundary
        self.base_url = base_url.rstrip("/")

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response | None:
        request_headers = dict(headers or {})
        payload = body or b""
        if json is not None:
            payload = json_encode(json)
            request_headers.setdefault("content-type", "application/json")
        request = Request(method=method, url=self._url(url), headers=request_headers, body=payload)
        if self.through_boundary:
            return await handle(self.router, request)
        return await self.router.respond(request)

    async def get(self, url: str, *, headers: Mapping[str, str] | None = None) -> Response | None:
        return await self.request("GET", url, headers=headers)

    async def post(
        self,
        url: str,
        *,
        json: Any | None = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response | None:
        return await self.request("POST", url, json=json, body=body, headers=headers)

    async def put(self, url: str, *, json: Any | None = None, headers: Mapping[str, str] | None = None) -> Response | None:
        return await self.request("PUT", url, json=json, headers=headers)

    async def delete(self, url: str, *, headers: Mapping[str, str] | None = None) -> Response | None:
        return await self.request("DELETE", url, headers=headers)

    def _url(self, url: str) -> str:
        if url.startswith("http") or not self.base_url:
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

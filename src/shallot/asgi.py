"""Boundary between a transport and :meth:`Router.respond`."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

from .error_page import render_error_page
from .http import Status
from .requests import Request
from .responses import HTMLResponse, PlainTextResponse, Response
from .routing import Router

logger = logging.getLogger(__name__)

Receive = Callable[[], Awaitable[Mapping[str, Any]]]
Send = Callable[[Mapping[str, Any]], Awaitable[None]]


class NotFoundError(LookupError):
    """Raised in debug mode when no frame produced a response."""

    def __init__(self, request: Request) -> None:
        super().__init__("Not found")
        self.request = request


async def handle(router: Router, request: Request, *, debug: bool | None = None) -> Response:
    """Return the response for ``request``, falling back to a not-found response.

    With ``debug`` enabled, failures and unmatched requests are rendered as a
    diagnostic HTML page. Otherwise handler errors propagate to the caller.
    """

    debug = router.config.debug if debug is None else debug
    if not debug:
        response = await router.respond(request)
        if response is None:
            return _not_found(router)
        return response
    try:
        response = await router.respond(request)
        if response is None:
            raise NotFoundError(request)
        return response
    except NotFoundError as exc:
        return HTMLResponse(render_error_page(request, exc), status=router.config.not_found_status)
    except Exception as exc:
        logger.exception("unhandled error for %s %s", request.method, request.url)
        return HTMLResponse(render_error_page(request, exc), status=int(Status.INTERNAL_SERVER_ERROR))


def _not_found(router: Router) -> Response:
    return PlainTextResponse(router.config.not_found_body, status=router.config.not_found_status)


class ASGIApp:
    """ASGI 3 application running one dispatch per HTTP request."""

    def __init__(self, router: Router, *, debug: bool | None = None) -> None:
        self.router = router
        self.debug = router.config.debug if debug is None else debug

    async def __call__(self, scope: Mapping[str, Any], receive: Receive, send: Send) -> None:
        scope_type = scope.get("type")
        if scope_type == "http":
            await self._handle_http(scope, receive, send)
            return
        if scope_type == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        raise RuntimeError("ASGIApp only supports HTTP scopes")

    async def _handle_http(self, scope: Mapping[str, Any], receive: Receive, send: Send) -> None:
        headers = {key.decode("latin-1").lower(): value.decode("latin-1") for key, value in scope.get("headers", [])}
        request = Request(
            method=scope["method"],
            url=request_url(scope, headers),
            headers=headers,
            body=await _read_body(receive),
        )
        response = await handle(self.router, request, debug=self.debug)
        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": [(k.encode("latin-1"), v.encode("latin-1")) for k, v in response.headers],
            }
        )
        body = b"" if request.method == "HEAD" else response.body
        await send({"type": "http.response.body", "body": body, "more_body": False})

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            message_type = message.get("type")
            if message_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def request_url(scope: Mapping[str, Any], headers: Mapping[str, str]) -> str:
    """Reconstruct the absolute request URL from an ASGI HTTP scope."""

    scheme = scope.get("scheme") or "http"
    host = headers.get("host")
    if host is None:
        server = scope.get("server")
        if server:
            server_host, port = server
            host = server_host if port in (None, 80, 443) else f"{server_host}:{port}"
    path = scope.get("raw_path")
    if isinstance(path, bytes):
        path = path.decode("latin-1")
    if not path:
        path = scope.get("path") or "/"
    query = (scope.get("query_string") or b"").decode("latin-1")
    target = f"{path}?{query}" if query else path
    if host is None:
        return target
    return f"{scheme}://{host}{target}"


async def _read_body(receive: Receive) -> bytes:
    buffer = bytearray()
    while True:
        message = await receive()
        message_type = message.get("type")
        if message_type == "http.disconnect":
            break
        if message_type != "http.request":
            continue
        chunk = message.get("body", b"")
        if chunk:
            buffer.extend(chunk)
        if not message.get("more_body", False):
            break
    return bytes(buffer)


__all__ = ["ASGIApp", "NotFoundError", "handle", "request_url"]

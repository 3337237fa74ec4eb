"""Minimal shallot application.

Serve it with any ASGI server, for example ``uvicorn example:app``. Set
``SHALLOT_DEBUG=1`` to render failures as a diagnostic page.
"""

from __future__ import annotations

import logging
import time

from shallot import ASGIApp, Router, RouterConfig
from shallot.context import RequestContext
from shallot.dispatch import Continuation
from shallot.static import MemoryKeyValueStore, kv_static

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("example")


async def timing(ctx: RequestContext, next: Continuation) -> None:
    """Log how long the nested stack took."""

    started = time.perf_counter()
    await next()
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s in %.2fms", ctx.request.method, ctx.url.path, ctx.response.status, elapsed)


async def authenticate(ctx: RequestContext, next: Continuation) -> None:
    token = ctx.request.header("authorization")
    if token is None:
        ctx.json({"error": "unauthorized"}, status=401)
        return
    ctx.data["user"] = token.removeprefix("Bearer ").strip()
    await next()


def create_router() -> Router:
    """Build the demo router with a mounted books sub-router."""

    config = RouterConfig.from_env()

    books = Router(config)
    books.get("/").handle(lambda ctx, next: ctx.json({"user": ctx.params["userId"], "books": []}))
    books.get("/:bookId").handle(
        lambda ctx, next: ctx.json({"user": ctx.params["userId"], "book": ctx.params["bookId"]})
    )

    router = Router(config)
    router.all("(.*)").use(timing)
    router.all("(.*)").use(kv_static(MemoryKeyValueStore({"site.css": "body { font-family: sans-serif }"}), max_age=config.static_max_age))
    router.get("/").handle(lambda ctx, next: ctx.html("<h1>shallot</h1>"))
    router.all("/users/(.*)").use(authenticate)
    router.get("/users/:userId").handle(lambda ctx, next: ctx.json({"id": ctx.params["userId"], "viewer": ctx.data["user"]}))
    router.mount("/users/:userId/books", books)
    return router


app = ASGIApp(create_router())

"""Static assets served out of a key-value store."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Awaitable, Mapping, Protocol

from .http import Status

if TYPE_CHECKING:
    from .context import RequestContext
    from .dispatch import Continuation
    from .routing import Action

DEFAULT_CONTENT_TYPES: Mapping[str, str] = {
    "css": "text/css",
    "js": "application/javascript",
    "html": "text/html",
    "png": "image/png",
    "svg": "image/svg+xml",
    "gif": "image/gif",
    "jpg": "image/jpg",
    "jpeg": "image/jpg",
}


class KeyValueStore(Protocol):
    def get(self, key: str) -> Awaitable[bytes | None] | bytes | None:  # pragma: no cover - protocol
        ...


class MemoryKeyValueStore:
    """In-memory :class:`KeyValueStore`."""

    def __init__(self, items: Mapping[str, bytes | str] | None = None) -> None:
        self._items: dict[str, bytes] = {}
        for key, value in (items or {}).items():
            self.set(key, value)

    async def get(self, key: str) -> bytes | None:
        return self._items.get(key)

    def set(self, key: str, value: bytes | str) -> None:
        self._items[key] = value.encode("utf-8") if isinstance(value, str) else bytes(value)


def kv_static(
    store: KeyValueStore,
    *,
    max_age: int | None = None,
    content_types: Mapping[str, str] | None = None,
) -> "Action":
    """Middleware serving files with a known extension from ``store``.

    The file name (last path segment) is the lookup key. Requests for other
    extensions fall through to the next frame.
    """

    known = {**DEFAULT_CONTENT_TYPES, **{ext.lower().lstrip("."): value for ext, value in (content_types or {}).items()}}
    cache_control = f"max-age={max_age}" if max_age else "public"

    async def middleware(ctx: "RequestContext", next: "Continuation") -> None:
        path = ctx.url.path
        filename = path[path.rfind("/") + 1 :]
        _, dot, ext = filename.rpartition(".")
        if not dot or ext.lower() not in known:
            await next()
            return
        body = store.get(filename)
        if inspect.isawaitable(body):
            body = await body
        if body is None:
            ctx.end("", status=int(Status.NOT_FOUND))
            return
        ctx.end(
            body,
            headers={"content-type": known[ext.lower()], "cache-control": cache_control},
        )

    return middleware


__all__ = ["DEFAULT_CONTENT_TYPES", "KeyValueStore", "MemoryKeyValueStore", "kv_static"]

"""Request primitives."""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping
from urllib.parse import parse_qsl, urlsplit

import msgspec

from .serialization import json_decode

DEFAULT_PLACEHOLDER_HOST = "domain"


def absolute_url(url: str, placeholder_host: str = DEFAULT_PLACEHOLDER_HOST) -> str:
    """Return ``url`` as an absolute URL.

    Bare paths are given a synthetic ``http://<placeholder_host>`` origin so
    relative and absolute request URLs are matched the same way.
    """

    if url.startswith("http"):
        return url
    if not url.startswith("/"):
        url = "/" + url
    return f"http://{placeholder_host}{url}"


class Request:
    """View of an inbound request as handed over by the transport."""

    __slots__ = ("_body", "_json_cache", "_query_params", "headers", "method", "url")

    def __init__(
        self,
        *,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> None:
        self.method = method.upper()
        self.url = url
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self._body = body or b""
        self._json_cache: Any = msgspec.UNSET
        self._query_params: MutableMapping[str, list[str]] | None = None

    @property
    def path(self) -> str:
        return urlsplit(absolute_url(self.url)).path or "/"

    @property
    def query_string(self) -> str:
        return urlsplit(absolute_url(self.url)).query

    @property
    def query_params(self) -> MutableMapping[str, list[str]]:
        if self._query_params is None:
            parsed: MutableMapping[str, list[str]] = {}
            for key, value in parse_qsl(self.query_string, keep_blank_values=True):
                parsed.setdefault(key, []).append(value)
            self._query_params = parsed
        return self._query_params

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def json(self) -> Any:
        """Decode the JSON body using :mod:`msgspec`."""

        if self._json_cache is msgspec.UNSET:
            self._json_cache = json_decode(self._body) if self._body else None
        return self._json_cache

    def text(self) -> str:
        return self._body.decode()

    def body(self) -> bytes:
        return self._body

    def __repr__(self) -> str:
        return f"Request({self.method} {self.url})"

"""Response primitives and the terminal-call merge."""

from __future__ import annotations

from typing import Any, Iterable, Union

import msgspec
from msgspec import structs

from .headers import HeaderPairs, HeaderSource, merge_headers
from .http import Status, ensure_status, reason_phrase
from .serialization import json_encode

Body = Union[str, bytes, bytearray, memoryview, Iterable[bytes], "Response", None]


class Response(msgspec.Struct, frozen=True):
    """Immutable response payload."""

    status: int = int(Status.OK)
    status_text: str = ""
    headers: HeaderPairs = ()
    body: bytes = b""

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the last value written for ``name``."""

        key = name.lower()
        for header_name, value in reversed(self.headers):
            if header_name == key:
                return value
        return default

    def header_values(self, name: str) -> list[str]:
        key = name.lower()
        return [value for header_name, value in self.headers if header_name == key]

    def text(self) -> str:
        return self.body.decode("utf-8")

    def with_headers(self, headers: Iterable[tuple[str, str]]) -> "Response":
        """Return a new response with ``headers`` merged in."""

        merged = merge_headers(self.headers, tuple(headers))
        return structs.replace(self, headers=merged.to_tuple())


EMPTY_RESPONSE = Response()


def _encode_body(body: Body) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, Response):
        return body.body
    return b"".join(bytes(chunk) for chunk in body)


def finalize(
    current: Response,
    body: Body,
    *,
    status: int | None = None,
    status_text: str | None = None,
    headers: HeaderSource | None = None,
) -> Response:
    """Build the response that replaces ``current`` after a terminal call.

    Headers merge in the order ``current``, ``body`` (when ``body`` is itself a
    :class:`Response`), then ``headers``. A wrapped response republishes its own
    status and status text unless explicitly overridden.
    """

    if isinstance(body, Response):
        code = body.status if status is None else status
        text = body.status_text if status_text is None else status_text
        merged = merge_headers(current.headers, body.headers, headers)
    else:
        code = current.status if status is None else status
        if status_text is not None:
            text = status_text
        elif status is not None and status != current.status:
            text = ""
        else:
            text = current.status_text
        merged = merge_headers(current.headers, headers)
    code = ensure_status(code)
    return Response(
        status=code,
        status_text=text or reason_phrase(code),
        headers=merged.to_tuple(),
        body=_encode_body(body),
    )


def PlainTextResponse(
    text: str,
    *,
    status: int = int(Status.OK),
    headers: Iterable[tuple[str, str]] | None = None,
) -> Response:
    """Create a plain text response."""

    default_headers = (("content-type", "text/plain; charset=utf-8"),)
    merged = merge_headers(default_headers, tuple(headers or ()))
    return Response(status=status, status_text=reason_phrase(status), headers=merged.to_tuple(), body=text.encode("utf-8"))


def HTMLResponse(
    html: str,
    *,
    status: int = int(Status.OK),
    headers: Iterable[tuple[str, str]] | None = None,
) -> Response:
    """Create an HTML response."""

    default_headers = (("content-type", "text/html; charset=utf-8"),)
    merged = merge_headers(default_headers, tuple(headers or ()))
    return Response(status=status, status_text=reason_phrase(status), headers=merged.to_tuple(), body=html.encode("utf-8"))


def JSONResponse(
    data: Any,
    *,
    status: int = int(Status.OK),
    headers: Iterable[tuple[str, str]] | None = None,
) -> Response:
    """Create a JSON response encoded via :mod:`msgspec`."""

    default_headers = (("content-type", "application/json"),)
    merged = merge_headers(default_headers, tuple(headers or ()))
    return Response(status=status, status_text=reason_phrase(status), headers=merged.to_tuple(), body=json_encode(data))


__all__ = [
    "EMPTY_RESPONSE",
    "Body",
    "HTMLResponse",
    "JSONResponse",
    "PlainTextResponse",
    "Response",
    "finalize",
]

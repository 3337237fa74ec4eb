"""HTTP methods and status code helpers."""

from __future__ import annotations

from enum import Enum, IntEnum
from http import HTTPStatus as _HTTPStatus


class Method(str, Enum):
    """HTTP methods a route can be registered for.

    ``ALL`` is the wildcard and accepts every request method.
    """

    ALL = "ALL"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: "str | Method") -> "Method":
        """Return the :class:`Method` for ``value`` (case-insensitive)."""

        if isinstance(value, Method):
            return value
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None

    def accepts(self, request_method: str) -> bool:
        if self is Method.ALL:
            return True
        return self.value == request_method.upper()


class Status(IntEnum):
    """Enumeration of the HTTP status codes used within the router."""

    OK = 200
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


def ensure_status(status: int | Status) -> int:
    """Normalize ``status`` to an ``int`` and ensure it is within the HTTP range."""

    code = int(status)
    if code < 100 or code > 599:
        raise ValueError(f"Invalid HTTP status code: {status}")
    return code


def reason_phrase(status: int | Status) -> str:
    """Return the HTTP reason phrase for ``status`` if known."""

    try:
        code = ensure_status(status)
    except ValueError:
        return "Unknown Status"
    try:
        return _HTTPStatus(code).phrase
    except ValueError:  # pragma: no cover - non-standard status codes
        return "Unknown Status"


__all__ = ["Method", "Status", "ensure_status", "reason_phrase"]

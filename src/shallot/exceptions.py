"""Router exception types."""

from __future__ import annotations


class ShallotError(Exception):
    """Base error type."""


class PatternError(ShallotError, ValueError):
    """Raised when a path template cannot be compiled."""

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(f"Invalid path template {template!r}: {reason}")
        self.template = template
        self.reason = reason


class DoubleContinuationError(ShallotError):
    """Raised when ``next()`` is awaited more than once for the same stack position."""

    def __init__(self, index: int) -> None:
        super().__init__("next() called multiple times")
        self.index = index

"""Onion-style dispatch over the ordered list of route matches.

Every match is one frame. A frame runs until it awaits its continuation,
which enters the next frame; when the nested chain settles control returns to
the frame, so entry happens in registration order and exit in reverse.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Sequence

from .exceptions import DoubleContinuationError
from .responses import Response

if TYPE_CHECKING:
    from .context import RequestContext
    from .routing import RouteMatch

logger = logging.getLogger(__name__)


class Dispatcher:
    __slots__ = ("_context", "_index", "_matches")

    def __init__(self, matches: Sequence["RouteMatch"], context: "RequestContext") -> None:
        self._matches = tuple(matches)
        self._context = context
        self._index = -1

    @property
    def context(self) -> "RequestContext":
        return self._context

    @property
    def depth(self) -> int:
        """Highest stack position entered so far (``-1`` before dispatch)."""

        return self._index

    async def run(self) -> "RequestContext":
        if self._matches:
            logger.debug("dispatching %d frames for %s", len(self._matches), self._context.request)
            await self.dispatch(0)
        return self._context

    async def dispatch(self, index: int) -> None:
        """Enter the frame at ``index``.

        The position is recorded before the end-of-chain check, so a second
        ``next()`` from the last frame raises :class:`DoubleContinuationError`
        even though there is no frame left to enter.
        """

        if index <= self._index:
            logger.debug("continuation for frame %d invoked again", index)
            raise DoubleContinuationError(index)
        self._index = index
        if index == len(self._matches):
            return
        match = self._matches[index]
        context = self._context
        context.params = match.params
        logger.debug("entering frame %d: %s %s", index, match.route.method.value, match.route.template)
        try:
            result = match.route.action(context, Continuation(self, index + 1))
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, Response):
                context.end(result)
        finally:
            if index > 0:
                context.params = self._matches[index - 1].params


class Continuation:
    """The ``next`` callable handed to a frame, bound to the following position."""

    __slots__ = ("_dispatcher", "_index")

    def __init__(self, dispatcher: Dispatcher, index: int) -> None:
        self._dispatcher = dispatcher
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    async def __call__(self) -> None:
        await self._dispatcher.dispatch(self._index)

    def __repr__(self) -> str:
        return f"Continuation(index={self._index})"


__all__ = ["Continuation", "Dispatcher"]

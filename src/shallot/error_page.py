"""Diagnostic HTML page rendered for failed requests in debug mode."""

from __future__ import annotations

import logging
from html import escape
from typing import TYPE_CHECKING

from .http import Status
from .requests import Request

if TYPE_CHECKING:
    from .context import RequestContext
    from .dispatch import Continuation
    from .routing import Action

logger = logging.getLogger(__name__)

_STYLE = """
    html, body {
      margin: 0;
      font-family: sans-serif;
      background: #ff5454;
      color: white;
    }
    .error {
      max-width: 60em;
      margin: 2em auto;
    }
    .error-msg {
      white-space: pre-wrap;
      font-family: Consolas, "Liberation Mono", Monaco, "Courier New", monospace;
      font-size: 3em;
    }
    .error-details {
      display: grid;
      grid-template-columns: repeat(3, 33%);
    }
    .error-detail {
      padding: 1em;
      border: solid 1px #ffffff80;
    }
    .error-detail-title {
      text-transform: uppercase;
      margin-bottom: 0.5em;
      color: #ffffffc7;
    }
    .error-detail-content {
      font-size: 1.2em;
    }
"""


def error_details(request: Request, error: BaseException) -> list[tuple[str, str]]:
    return [
        ("Method", request.method),
        ("URL", request.url),
        ("Host", request.header("host", "") or ""),
        ("User-Agent", request.header("user-agent", "") or ""),
        ("Content-Type", request.header("content-type", "") or ""),
        ("Error", type(error).__name__),
    ]


def render_error_page(request: Request, error: BaseException) -> str:
    """Return an HTML page describing ``error`` raised while serving ``request``."""

    details = "\n".join(
        f"""        <div class="error-detail">
          <div class="error-detail-title">{escape(title)}</div>
          <div class="error-detail-content">{escape(content)}</div>
        </div>"""
        for title, content in error_details(request, error)
    )
    message = str(error) or type(error).__name__
    return f"""<!DOCTYPE html>
<html>
  <head>
    <style>{_STYLE}</style>
  </head>
  <body>
    <div class="error">
      <pre class="error-msg">{escape(message)}</pre>
      <div class="error-details">
{details}
      </div>
    </div>
  </body>
</html>
"""


def error_page_middleware(status: int = int(Status.INTERNAL_SERVER_ERROR)) -> "Action":
    """Middleware rendering :func:`render_error_page` when a nested frame fails."""

    async def middleware(ctx: "RequestContext", next: "Continuation") -> None:
        try:
            await next()
        except Exception as exc:
            logger.exception("unhandled error for %s %s", ctx.request.method, ctx.request.url)
            ctx.html(render_error_page(ctx.request, exc), status=status)

    return middleware


__all__ = ["error_details", "error_page_middleware", "render_error_page"]

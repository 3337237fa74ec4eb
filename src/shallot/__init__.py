"""Shallot: an HTTP router with onion-style middleware composition."""

from .asgi import ASGIApp, handle
from .config import RouterConfig
from .context import RequestContext
from .dispatch import Continuation, Dispatcher
from .exceptions import DoubleContinuationError, PatternError, ShallotError
from .headers import HeaderPolicy, Headers, merge_headers
from .http import Method, Status
from .patterns import compile_template, param
from .requests import Request
from .responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from .routing import Route, RouteBuilder, RouteMatch, Router
from .testing import TestClient

__all__ = [
    "ASGIApp",
    "Continuation",
    "Dispatcher",
    "DoubleContinuationError",
    "HTMLResponse",
    "HeaderPolicy",
    "Headers",
    "JSONResponse",
    "Method",
    "PatternError",
    "PlainTextResponse",
    "Request",
    "RequestContext",
    "Response",
    "Route",
    "RouteBuilder",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "ShallotError",
    "Status",
    "TestClient",
    "compile_template",
    "handle",
    "merge_headers",
    "param",
]

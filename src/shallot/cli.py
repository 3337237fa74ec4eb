"""Command line utilities for inspecting a router."""

from __future__ import annotations

import argparse
import importlib
import sys
from typing import Sequence, TextIO

from .routing import Router

PROJECT_NAME = "shallot"


def main(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args, stdout or sys.stdout)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROJECT_NAME, description="Shallot router commands")
    sub = parser.add_subparsers(dest="command", required=True)

    routes = sub.add_parser("routes", help="List the route table in registration order")
    routes.add_argument("target", help="Router location as 'module:attribute'")
    routes.set_defaults(func=_cmd_routes)

    match = sub.add_parser("match", help="Show the middleware stack a request would run")
    match.add_argument("target", help="Router location as 'module:attribute'")
    match.add_argument("method", help="HTTP method of the request")
    match.add_argument("url", help="Request path or absolute URL")
    match.set_defaults(func=_cmd_match)

    return parser


def load_router(target: str) -> Router:
    """Import ``module:attribute`` and return the :class:`Router` it names.

    The attribute may also be a zero-argument factory returning a router.
    """

    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise SystemExit(f"Expected 'module:attribute', got {target!r}")
    module = importlib.import_module(module_name)
    try:
        candidate = getattr(module, attribute)
    except AttributeError as exc:
        raise SystemExit(f"Module {module_name!r} has no attribute {attribute!r}") from exc
    if isinstance(getattr(candidate, "router", None), Router):
        candidate = candidate.router
    elif not isinstance(candidate, Router) and callable(candidate):
        candidate = candidate()
    router = candidate
    if not isinstance(router, Router):
        raise SystemExit(f"{target!r} is not a shallot Router")
    return router


def _cmd_routes(args: argparse.Namespace, out: TextIO) -> int:
    router = load_router(args.target)
    if not router.routes:
        print("No routes registered", file=out)
        return 0
    for entry in router.describe():
        print(f"{entry['index']:>3}  {entry['method']:<7} {entry['kind']:<10} {entry['template']}", file=out)
    return 0


def _cmd_match(args: argparse.Namespace, out: TextIO) -> int:
    router = load_router(args.target)
    matches = router.match(args.url, args.method)
    if not matches:
        print(f"No route matches {args.method.upper()} {args.url}", file=out)
        return 1
    for depth, found in enumerate(matches):
        params = ", ".join(f"{name}={value}" for name, value in found.params.items())
        route = found.route
        print(f"{depth:>3}  {route.method.value:<7} {route.kind:<10} {route.template}  {{{params}}}", file=out)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

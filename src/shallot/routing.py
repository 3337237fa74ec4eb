"""Route table, matching, registration and router composition."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, Mapping, MutableMapping, TypeVar
from urllib.parse import urlsplit

from .config import RouterConfig
from .context import RequestContext
from .dispatch import Dispatcher
from .http import Method
from .patterns import CompiledPattern, Param, build_template, compile_template, join_templates
from .requests import Request, absolute_url

if TYPE_CHECKING:
    from .dispatch import Continuation
    from .responses import Response

logger = logging.getLogger(__name__)

Action = Callable[["RequestContext", "Continuation"], "Awaitable[Any] | Any"]
RouteKind = Literal["middleware", "handler"]

A = TypeVar("A", bound=Callable[..., Any])


@dataclass(frozen=True, slots=True)
class Route:
    template: str
    pattern: CompiledPattern
    method: Method
    action: Action
    kind: RouteKind = "handler"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    params: dict[str, str]


class RouteBuilder:
    """Chainable registration result for one (method, template) pair."""

    __slots__ = ("_method", "_owner", "_template")

    def __init__(self, owner: "Router", method: Method, template: str) -> None:
        self._owner = owner
        self._method = method
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    def use(self, middleware: Action) -> "RouteBuilder":
        """Append ``middleware`` for this template and method."""

        self._owner.add_route(self._method, self._template, middleware, kind="middleware")
        return self

    def handle(self, handler: Action) -> "RouteBuilder":
        """Append a terminal ``handler`` for this template and method."""

        self._owner.add_route(self._method, self._template, handler, kind="handler")
        return self

    def router(self) -> "Router":
        return self._owner


class Router:
    """Ordered route table with onion-style dispatch.

    Routes are matched in registration order and every match becomes one
    frame of the middleware stack::

        router = Router()
        router.all("(.*)").use(timing)
        router.get("/users/:id").handle(show_user)
        response = await router.respond(Request(method="GET", url="/users/42"))
    """

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config = config or RouterConfig()
        self._routes: list[Route] = []

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    # ------------------------------------------------------------------ registration
    def add_route(
        self,
        method: Method | str,
        template: str,
        action: Action,
        *,
        kind: RouteKind = "handler",
    ) -> Route:
        route = self._build_route(method, template, action, kind)
        self._routes.append(route)
        logger.debug("registered %s %s %s", route.method.value, template, kind)
        return route

    def _build_route(self, method: Method | str, template: str, action: Action, kind: RouteKind) -> Route:
        if not callable(action):
            raise TypeError(f"Route action must be callable, got {action!r}")
        pattern = compile_template(template, case_sensitive=self.config.case_sensitive)
        return Route(template=template, pattern=pattern, method=Method.parse(method), action=action, kind=kind)

    def on(self, method: Method | str, *parts: str | Param) -> RouteBuilder:
        return RouteBuilder(self, Method.parse(method), build_template(*parts))

    def all(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.ALL, *parts)

    def get(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.GET, *parts)

    def post(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.POST, *parts)

    def put(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.PUT, *parts)

    def patch(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.PATCH, *parts)

    def delete(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.DELETE, *parts)

    def head(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.HEAD, *parts)

    def options(self, *parts: str | Param) -> RouteBuilder:
        return self.on(Method.OPTIONS, *parts)

    def route(self, method: Method | str, *parts: str | Param) -> Callable[[A], A]:
        """Decorator form of ``on(method, ...).handle(func)``."""

        def decorator(func: A) -> A:
            self.on(method, *parts).handle(func)
            return func

        return decorator

    def middleware(self, method: Method | str, *parts: str | Param) -> Callable[[A], A]:
        """Decorator form of ``on(method, ...).use(func)``."""

        def decorator(func: A) -> A:
            self.on(method, *parts).use(func)
            return func

        return decorator

    # ------------------------------------------------------------------ composition
    def mount(self, prefix: str, router: "Router") -> "Router":
        """Copy every route of ``router`` into this table under ``prefix``.

        The copy is taken now; routes added to ``router`` afterwards are not
        seen by this router. Nothing is added when any child template fails
        to compile under ``prefix``.
        """

        if router is self:
            raise ValueError("A router cannot be mounted into itself")
        copies = [
            self._build_route(child.method, join_templates(prefix, child.template), child.action, child.kind)
            for child in router.routes
        ]
        self._routes.extend(copies)
        logger.debug("mounted %d routes under %s", len(router), prefix)
        return self

    def use(self, prefix: str, router: "Router") -> "Router":
        return self.mount(prefix, router)

    # ------------------------------------------------------------------ matching
    def match(self, url: str, method: str) -> list[RouteMatch]:
        """Return every route matching ``method`` and ``url`` in registration order."""

        full_url = absolute_url(url, self.config.placeholder_host)
        path = urlsplit(full_url).path or "/"
        matches: list[RouteMatch] = []
        for route in self._routes:
            if not route.method.accepts(method):
                continue
            pattern = route.pattern
            captures = pattern.match(full_url if pattern.host_qualified else path)
            if captures is None:
                continue
            params: MutableMapping[str, str] = {}
            for name, value in zip(pattern.param_names, captures):
                if value is None:
                    continue
                params[name] = value
            matches.append(RouteMatch(route=route, params=dict(params)))
        return matches

    # ------------------------------------------------------------------ dispatch
    async def respond(
        self,
        request: Request,
        *,
        data: MutableMapping[str, Any] | None = None,
    ) -> "Response | None":
        """Run the middleware stack for ``request``.

        Returns ``None`` when no route matched or no action produced a response.
        """

        matches = self.match(request.url, request.method)
        if not matches:
            logger.debug("no route matches %s %s", request.method, request.url)
            return None
        context = RequestContext(
            request,
            absolute_url(request.url, self.config.placeholder_host),
            data=data,
        )
        await Dispatcher(matches, context).run()
        if not context.finalized:
            return None
        return context.response

    def describe(self) -> list[Mapping[str, Any]]:
        return [
            {
                "index": index,
                "method": route.method.value,
                "kind": route.kind,
                "template": route.template,
                "params": route.pattern.param_names,
            }
            for index, route in enumerate(self._routes)
        ]


__all__ = ["Action", "Route", "RouteBuilder", "RouteKind", "RouteMatch", "Router"]

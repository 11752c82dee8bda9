"""
Method + path routing for API Gateway proxy events.

Paths use `{name}` placeholders, e.g. `/api/products/{id}`.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Pattern, Tuple

from .utils.api_types import Request
from .utils.errors import AppError, ErrorCode
from .utils.responses import ApiResult

if TYPE_CHECKING:
    from .app import Application

Handler = Callable[[Request, "Application"], ApiResult]
RouteSpec = Tuple[str, str, Handler]

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def compile_path(template: str) -> Pattern[str]:
    """Compile a path template into an anchored regex with named groups."""
    pattern = _PLACEHOLDER.sub(lambda m: f"(?P<{m.group(1)}>[^/]+)", template)
    return re.compile(f"^{pattern}$")


@dataclass(frozen=True)
class Route:
    method: str
    template: str
    pattern: Pattern[str]
    handler: Handler


class Router:
    """Ordered route table."""

    def __init__(self, routes: Iterable[RouteSpec] = ()) -> None:
        self.routes: List[Route] = []
        for method, template, handler in routes:
            self.add(method, template, handler)

    def add(self, method: str, template: str, handler: Handler) -> None:
        self.routes.append(Route(method.upper(), template, compile_path(template), handler))

    def resolve(self, method: str, path: str) -> Tuple[Handler, Dict[str, str]]:
        """
        Find the handler for a request.

        Raises:
            AppError: NOT_FOUND for unknown paths, METHOD_NOT_ALLOWED when the
                path exists under other methods
        """
        allowed: List[str] = []
        for route in self.routes:
            match = route.pattern.match(path)
            if not match:
                continue
            if route.method == method.upper():
                return route.handler, match.groupdict()
            allowed.append(route.method)

        if allowed:
            raise AppError(
                ErrorCode.METHOD_NOT_ALLOWED,
                f"Method {method} not supported",
                {"allowedMethods": sorted(set(allowed))},
            )
        raise AppError(ErrorCode.NOT_FOUND, f"No route for {path}")

"""Routing error kinds (source of truth).

Every failure the core can surface derives from :class:`RoutingError` so an
embedding HTTP layer can catch the family at once and map the concrete
class to a response. The core never recovers from these locally.

Kinds
-----
- ``EmptyRouteError``: registration produced an empty effective path.
- ``RouteNotFoundError(path)``: no route of the relevant table matched.
- ``MalformedTargetError(target)``: target lacks ``@`` or starts with it.
- ``HandlerNotFoundError(handler_name)``: handler half is not registered.
- ``MethodNotFoundError(handler_name, method_name)``: handler lacks method.
- ``GateNotFoundError(gate_name)``: gate identifier cannot be resolved.

A gate rejection is not an error; dispatch returns a rejection result.
"""

from __future__ import annotations

__all__ = [
    "RoutingError",
    "EmptyRouteError",
    "RouteNotFoundError",
    "MalformedTargetError",
    "HandlerNotFoundError",
    "MethodNotFoundError",
    "GateNotFoundError",
]


class RoutingError(Exception):
    """Base class for every routing/dispatch failure."""


class EmptyRouteError(RoutingError):
    def __init__(self, message: str = "Route is empty") -> None:
        super().__init__(message)


class RouteNotFoundError(RoutingError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Route "{path}" not defined')


class MalformedTargetError(RoutingError):
    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Target '{target}' is malformed, expected 'Handler@method'")


class HandlerNotFoundError(RoutingError):
    def __init__(self, handler_name: str) -> None:
        self.handler_name = handler_name
        super().__init__(f"Handler '{handler_name}' does not exist")


class MethodNotFoundError(RoutingError):
    def __init__(self, handler_name: str, method_name: str) -> None:
        self.handler_name = handler_name
        self.method_name = method_name
        super().__init__(f"Method '{method_name}' does not exist in handler '{handler_name}'")


class GateNotFoundError(RoutingError):
    def __init__(self, gate_name: str) -> None:
        self.gate_name = gate_name
        super().__init__(f"Gate '{gate_name}' is not registered")

"""Core runtime aggregator.

Exposes the routing building blocks from a single module; importing it
performs only imports and does not register plugins.

- ``pattern`` → ``compile_template``, ``normalize_path``
- ``route`` → ``Route``, ``RouteMatch``
- ``table`` → ``RouteTable``
- ``registry`` → ``CapabilityRegistry``
- ``base_router`` → ``BaseRouter`` (registration, grouping, resolution)
- ``router`` → ``Router`` (dispatch, gates, plugins)
"""

from .base_router import CATCH_ALL, METHODS, BaseRouter
from .errors import (
    EmptyRouteError,
    GateNotFoundError,
    HandlerNotFoundError,
    MalformedTargetError,
    MethodNotFoundError,
    RouteNotFoundError,
    RoutingError,
)
from .pattern import CompiledPattern, compile_template, normalize_path
from .registry import CapabilityRegistry
from .route import Route, RouteMatch
from .router import DispatchRejection, DispatchResult, Router, split_target
from .table import RouteTable

__all__ = [
    "BaseRouter",
    "Router",
    "Route",
    "RouteMatch",
    "RouteTable",
    "CapabilityRegistry",
    "CompiledPattern",
    "compile_template",
    "normalize_path",
    "split_target",
    "DispatchResult",
    "DispatchRejection",
    "METHODS",
    "CATCH_ALL",
    "RoutingError",
    "EmptyRouteError",
    "RouteNotFoundError",
    "MalformedTargetError",
    "HandlerNotFoundError",
    "MethodNotFoundError",
    "GateNotFoundError",
]

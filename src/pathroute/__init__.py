"""pathroute public API surface.

- Public exports: ``Router``, ``Route``, ``RouteMatch``, the registries and
  the error kinds.
- Plugin registration: built-in plugins (``logging``) are imported for their
  side effect of calling ``Router.register_plugin``. Imports are done lazily
  via ``import_module`` to avoid cycles.
"""

from importlib import import_module

__version__ = "0.1.0"

from .core import (
    CapabilityRegistry,
    DispatchRejection,
    DispatchResult,
    EmptyRouteError,
    GateNotFoundError,
    HandlerNotFoundError,
    MalformedTargetError,
    MethodNotFoundError,
    Route,
    RouteMatch,
    RouteNotFoundError,
    Router,
    RoutingError,
)

for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "Router",
    "Route",
    "RouteMatch",
    "CapabilityRegistry",
    "DispatchResult",
    "DispatchRejection",
    "RoutingError",
    "EmptyRouteError",
    "RouteNotFoundError",
    "MalformedTargetError",
    "HandlerNotFoundError",
    "MethodNotFoundError",
    "GateNotFoundError",
]

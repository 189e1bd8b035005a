"""Router with dispatch and plugin pipeline (source of truth).

``Router`` extends :class:`~pathroute.core.base_router.BaseRouter` with the
capability registries used at dispatch time, a global plugin registry and
per-router plugin instances wrapping :meth:`Router.dispatch`.

Constructor
-----------
``Router(*, handlers=None, gates=None, validators=None, use_smartasync=False)``

Each registry defaults to an empty :class:`CapabilityRegistry` (validators
default to the built-ins). ``use_smartasync`` makes
:meth:`DispatchResult.bound` wrap the handler method with
``smartasync.smartasync``.

Dispatch
--------
``dispatch(method, path)`` runs, in order and without backtracking:

1. ``resolve`` (``RouteNotFoundError`` propagates);
2. gates: the ``gate`` option (name or list of names) is read through
   ``SmartOptions``; each gate is resolved in the gate registry
   (``GateNotFoundError`` if unknown) and ``handle()`` is called with no
   arguments. The first explicit ``False`` returns a
   :class:`DispatchRejection` (403, ``"forbidden"``) and skips the rest;
3. target split on ``@`` (``MalformedTargetError``);
4. handler resolution in the handler registry (``HandlerNotFoundError``);
5. method lookup on the handler instance (``MethodNotFoundError``);
6. :class:`DispatchResult` with handler, method name and extracted data.

Plugins
-------
``Router.register_plugin(plugin_class, name=None)`` validates that the class
subclasses ``BasePlugin`` and defines ``plugin_code``; re-registering a code
with a different class raises unless ``name`` is given explicitly.
``plug(name, **config)`` rejects a plugin already attached by that name,
instantiates the plugin for this router, replays
``on_register`` for existing routes and rebuilds the dispatch chain. Plugins
wrap dispatch in reverse attachment order (first attached = outermost);
a plugin whose ``enabled`` config is false is skipped at call time.
``__getattr__`` exposes attached plugins by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from smartseeds import SmartOptions

from pathroute.plugins._base_plugin import BasePlugin, DispatchCall

from .base_router import BaseRouter
from .errors import (
    GateNotFoundError,
    HandlerNotFoundError,
    MalformedTargetError,
    MethodNotFoundError,
)
from .registry import CapabilityRegistry
from .route import Route, RouteMatch

__all__ = ["Router", "DispatchResult", "DispatchRejection", "split_target", "TARGET_SEPARATOR"]

logger = logging.getLogger("pathroute")

TARGET_SEPARATOR = "@"
FORBIDDEN_STATUS = 403
FORBIDDEN_MESSAGE = "forbidden"

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


@dataclass
class DispatchResult:
    """Successful dispatch: handler instance, method name and path data."""

    handler: Any
    method: str
    data: Dict[str, str] = field(default_factory=dict)
    match: Optional[RouteMatch] = None
    use_smartasync: bool = False

    ok = True

    def bound(self) -> Callable:
        """Return the bound handler method (smartasync-wrapped when enabled)."""
        func = getattr(self.handler, self.method)
        if self.use_smartasync:
            from smartasync import smartasync  # type: ignore

            func = smartasync(func)
        return func

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke the handler method with the extracted data as keyword arguments."""
        return self.bound()(*args, **{**self.data, **kwargs})

    def as_dict(self) -> Dict[str, Any]:
        return {"handler": self.handler, "method": self.method, "data": dict(self.data)}


@dataclass(frozen=True)
class DispatchRejection:
    """A gate refused the request; not an error."""

    gate: str
    status: int = FORBIDDEN_STATUS
    message: str = FORBIDDEN_MESSAGE

    ok = False

    def as_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.status, "message": self.message}}


def split_target(target: str) -> Tuple[str, str]:
    """Split ``Handler@method`` into its two halves.

    Raises:
        MalformedTargetError: when ``@`` is missing or leads the string.
    """
    if not target or target.find(TARGET_SEPARATOR) <= 0:
        raise MalformedTargetError(target)
    handler_name, method_name = target.split(TARGET_SEPARATOR, 1)
    return handler_name, method_name


class Router(BaseRouter):
    """Router with capability registries, gates and a plugin pipeline."""

    __slots__ = BaseRouter.__slots__ + (
        "handlers",
        "gates",
        "use_smartasync",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
        "_dispatch_chain",
    )

    def __init__(
        self,
        *,
        handlers: Optional[CapabilityRegistry] = None,
        gates: Optional[CapabilityRegistry] = None,
        validators: Optional[CapabilityRegistry] = None,
        use_smartasync: bool = False,
    ) -> None:
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        super().__init__(validators=validators)
        self.handlers = handlers if handlers is not None else CapabilityRegistry("handler")
        self.gates = gates if gates is not None else CapabilityRegistry("gate")
        self.use_smartasync = bool(use_smartasync)
        self._dispatch_chain: DispatchCall = self._dispatch

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Without ``name`` the class ``plugin_code`` is used and a collision
        with a different class raises; an explicit ``name`` overwrites.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "Router":
        """Attach a plugin by its registered name."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin_class.plugin_code in self._plugins_by_name:
            raise ValueError(f"Plugin '{plugin}' is already attached to this router")
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        for table in self._tables.values():
            for route in table:
                instance.on_register(self, table.method, route)
        self._rebuild_dispatch_chain()
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        return list(self._plugins)

    def get_config(self, plugin_name: str) -> Dict[str, Any]:
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return plugin.configuration()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router")
        return plugin

    def _rebuild_dispatch_chain(self) -> None:
        wrapped: DispatchCall = self._dispatch
        for plugin in reversed(self._plugins):
            wrapped = self._create_wrapper(plugin, plugin.wrap_dispatch(self, wrapped), wrapped)
        self._dispatch_chain = wrapped

    def _create_wrapper(
        self, plugin: BasePlugin, plugin_call: DispatchCall, next_call: DispatchCall
    ) -> DispatchCall:
        @wraps(next_call)
        def wrapper(method: str, path: str) -> Any:
            if not plugin.enabled:
                return next_call(method, path)
            return plugin_call(method, path)

        return wrapper

    def _after_route_registered(self, method: str, route: Route) -> None:  # type: ignore[override]
        for plugin in self._plugins:
            plugin.on_register(self, method, route)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(self, method: str, path: str) -> Union[DispatchResult, DispatchRejection]:
        """Resolve ``path`` and produce a dispatch result or a gate rejection."""
        return self._dispatch_chain(method, path)

    def _dispatch(self, method: str, path: str) -> Union[DispatchResult, DispatchRejection]:
        matched = self.resolve(method, path)

        for gate_name in self._gate_names(matched):
            verdict = self._resolve_gate(gate_name).handle()
            if verdict is False:
                logger.info("%s %s rejected by gate %s", method, matched.template, gate_name)
                return DispatchRejection(gate=gate_name)

        handler_name, method_name = split_target(matched.target)
        if handler_name not in self.handlers:
            raise HandlerNotFoundError(handler_name)
        handler = self.handlers.resolve(handler_name)
        if not callable(getattr(handler, method_name, None)):
            raise MethodNotFoundError(handler_name, method_name)

        return DispatchResult(
            handler=handler,
            method=method_name,
            data=matched.get_data(),
            match=matched,
            use_smartasync=self.use_smartasync,
        )

    def _gate_names(self, matched: RouteMatch) -> List[str]:
        opts = SmartOptions(matched.get_options(), defaults={"gate": None})
        gates = getattr(opts, "gate", None)
        if gates is None:
            return []
        if isinstance(gates, str):
            return [gates]
        return list(gates)

    def _resolve_gate(self, gate_name: str) -> Any:
        if gate_name not in self.gates:
            raise GateNotFoundError(gate_name)
        return self.gates.resolve(gate_name)

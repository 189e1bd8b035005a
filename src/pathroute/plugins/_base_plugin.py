"""Plugin contract used by the Router dispatch pipeline (source of truth).

``BasePlugin``
    Base class every plugin subclasses. Required class attributes:

    - ``plugin_code``: unique identifier used for registration (``"logging"``)
    - ``plugin_description``: human readable description

    Constructor: ``BasePlugin(router, **config)``; ``config`` is forwarded to
    ``configure()``.

    ``configure(**config)``
        Subclasses declare accepted keys through the method signature. The
        method is wrapped by ``__init_subclass__`` so that a ``flags`` string
        (``"enabled,before:off"``) is parsed into booleans, the keyword
        arguments are validated with pydantic ``validate_call`` and the
        result is written to the router's plugin store.

    ``configuration()``
        Read counterpart of ``configure``: the merged config dict.

    ``on_register(router, method, route)`` (default no-op)
        Called once per registered route, also for routes registered before
        the plugin was attached.

    ``wrap_dispatch(router, call_next)`` (default identity)
        Receives ``call_next(method, path)`` and returns a callable with the
        same signature.

Configuration is stored on the router (``router._plugin_info[code]``) so
every plugin instance reads and writes it the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from pydantic import validate_call

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from pathroute.core.route import Route
    from pathroute.core.router import Router

__all__ = ["BasePlugin", "DispatchCall"]

DispatchCall = Callable[[str, str], Any]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() to handle flags, validation and storage."""
    validated = validate_call(original_configure)

    def wrapper(self: "BasePlugin", *, flags: Optional[str] = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))
        validated(self, **kwargs)
        self._write_config(kwargs)

    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for router plugins."""

    __slots__ = ("name", "_router")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(self, router: "Router", **config: Any):
        self.name = self.plugin_code
        self._router = router
        self._get_store().setdefault(self.name, {"enabled": True})
        self.configure(**config)

    def configure(self, *, flags: Optional[str] = None) -> None:
        """Override in subclasses to declare accepted configuration keys."""
        if flags:
            self._write_config(self._parse_flags(flags))

    def configuration(self) -> Dict[str, Any]:
        return dict(self._get_store().get(self.name, {}))

    @property
    def enabled(self) -> bool:
        return bool(self.configuration().get("enabled", True))

    def _write_config(self, config: Dict[str, Any]) -> None:
        if not config:
            return
        self._get_store().setdefault(self.name, {}).update(config)

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def on_register(
        self, router: "Router", method: str, route: "Route"
    ) -> None:  # pragma: no cover - default no-op
        """Hook run when a route is registered."""

    def wrap_dispatch(self, router: "Router", call_next: DispatchCall) -> DispatchCall:
        """Wrap dispatch; default passthrough."""
        return call_next

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._router, "_plugin_info")

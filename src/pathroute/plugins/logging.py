"""Logging plugin (source of truth).

Responsibilities
----------------
- Wrap every dispatch and emit configurable messages:
  * ``before`` (default True): ``"<METHOD> <path> start"``
  * ``after`` (default True): ``"<METHOD> <path> end (<ms> ms)"`` with the
    elapsed time formatted ``{elapsed:.2f}``; a gate rejection replaces it
    with ``"<METHOD> <path> rejected by <gate>"``.
- Sinks:
  * when ``print`` is true, always ``print(message)``;
  * else when ``log`` is true, ``logger.info(message)`` if the logger
    reports handlers via ``hasHandlers()``, otherwise ``print(message)``;
  * else no output.
- ``enabled`` gates the plugin entirely (default True).
- Uses the supplied ``logging.Logger`` or ``logging.getLogger("pathroute")``.

Exceptions raised by dispatch propagate and skip the end message.

Registration
------------
At import the plugin registers itself as ``"logging"``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from pathroute.core.router import DispatchRejection, Router
from pathroute.plugins._base_plugin import BasePlugin, DispatchCall


class LoggingPlugin(BasePlugin):
    """Logs dispatch calls with timing."""

    plugin_code = "logging"
    plugin_description = "Logs dispatch calls with timing"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("pathroute")
        super().__init__(router, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: Optional[dict] = None):
        if cfg is None:
            return
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None)
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def wrap_dispatch(self, router, call_next: DispatchCall) -> DispatchCall:
        """Wrap dispatch with start/end logging and timing."""

        def logged(method: str, path: str) -> Any:
            cfg = self._effective_config()
            if not cfg["enabled"]:
                return call_next(method, path)
            label = f"{str(method).upper()} {path}"
            if cfg["before"]:
                self._emit(f"{label} start", cfg=cfg)
            t0 = time.perf_counter()
            result = call_next(method, path)
            elapsed = (time.perf_counter() - t0) * 1000
            if isinstance(result, DispatchRejection):
                self._emit(f"{label} rejected by {result.gate}", cfg=cfg)
            elif cfg["after"]:
                self._emit(f"{label} end ({elapsed:.2f} ms)", cfg=cfg)
            return result

        return logged

    def _effective_config(self) -> dict:
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration()

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Router.register_plugin(LoggingPlugin)

"""Gate capabilities evaluated before a matched route is dispatched.

A gate exposes ``handle()`` taking no arguments. Dispatch stops at the first
gate returning exactly ``False``; any other value, ``None`` included, lets
the next gate run.
"""

from __future__ import annotations

from typing import Any, Callable

__all__ = ["BaseGate", "AllowGate", "DenyGate", "CallableGate"]


class BaseGate:
    """Contract for gates; subclasses override :meth:`handle`."""

    def handle(self) -> Any:  # pragma: no cover - overridden
        return None


class AllowGate(BaseGate):
    def handle(self) -> bool:
        return True


class DenyGate(BaseGate):
    def handle(self) -> bool:
        return False


class CallableGate(BaseGate):
    """Adapt a zero-argument callable, e.g. ``CallableGate(lambda: user.is_admin)``."""

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[], Any]):
        if not callable(func):
            raise TypeError("CallableGate requires a callable")
        self._func = func

    def handle(self) -> Any:
        return self._func()

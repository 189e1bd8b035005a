"""Name-based capability registry (source of truth).

Handlers, gates and validators are located by name at dispatch time. The
embedding application fills one registry per capability kind at startup;
the router only queries it, it never imports or reflects on names.

Entries
-------
- a class: instantiated with no arguments on every :meth:`resolve`;
- a factory registered through :meth:`register_factory`: called with no
  arguments on every :meth:`resolve`;
- anything else: treated as a ready instance and returned unchanged.

Invariants
----------
- Names are non-empty strings; re-registering an existing name raises
  ``ValueError`` unless ``replace=True``.
- Unknown names raise ``KeyError``; callers translate that into their own
  error kind.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

__all__ = ["CapabilityRegistry"]


class CapabilityRegistry:
    """Registry mapping names to classes, factories or instances."""

    __slots__ = ("kind", "_entries", "_factories")

    def __init__(self, kind: str = "capability", entries: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self._entries: Dict[str, Any] = {}
        self._factories: set[str] = set()
        for name, entry in (entries or {}).items():
            self.register(name, entry)

    def __repr__(self) -> str:
        return f"CapabilityRegistry({self.kind!r}, {sorted(self._entries)!r})"

    def register(self, name: str, capability: Any, *, replace: bool = False) -> Any:
        """Register ``capability`` under ``name`` and return it unchanged."""
        key = self._check_name(name, replace)
        self._entries[key] = capability
        self._factories.discard(key)
        return capability

    def register_factory(
        self, name: str, factory: Callable[[], Any], *, replace: bool = False
    ) -> Callable[[], Any]:
        """Register a zero-argument factory called on every resolution."""
        if not callable(factory):
            raise TypeError(f"{self.kind} factory for '{name}' must be callable")
        key = self._check_name(name, replace)
        self._entries[key] = factory
        self._factories.add(key)
        return factory

    def add(self, name: Optional[str] = None, *, replace: bool = False) -> Callable[[Any], Any]:
        """Decorator form of :meth:`register`; defaults to the class/function name."""

        def decorator(capability: Any) -> Any:
            return self.register(name or capability.__name__, capability, replace=replace)

        return decorator

    def unregister(self, name: str) -> None:
        self._entries.pop(name, None)
        self._factories.discard(name)

    def get(self, name: str) -> Any:
        try:
            return self._entries[name]
        except KeyError:
            raise KeyError(f"Unknown {self.kind} '{name}'") from None

    def resolve(self, name: str) -> Any:
        """Return a usable object for ``name``, instantiating classes/factories."""
        entry = self.get(name)
        if name in self._factories or isinstance(entry, type):
            return entry()
        return entry

    def names(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._factories.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _check_name(self, name: str, replace: bool) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{self.kind} name must be a non-empty string")
        key = name.strip()
        if key in self._entries and not replace:
            raise ValueError(f"{self.kind.capitalize()} name collision: {key}")
        return key

"""Plugin-free router runtime (source of truth).

The module exposes :class:`BaseRouter`, which owns one
:class:`~pathroute.core.table.RouteTable` per HTTP method, registers routes
under the active grouping scope and resolves ``(method, path)`` pairs to a
:class:`~pathroute.core.route.RouteMatch`. Dispatch (gates and handler
resolution) lives in :class:`~pathroute.core.router.Router`.

Constructor and slots
---------------------
``BaseRouter(*, validators=None)``

- ``validators``: a :class:`CapabilityRegistry` consulted when a placeholder
  rule is a validator name. Defaults to the built-in validators
  (``number``, ``alpha``, ``alphanumeric``).
- Slots: ``validators``, ``_tables`` (method → RouteTable), ``_scope``.

Registration
------------
``register(method, template, target, options=None)``

- effective path = active scope prefix concatenated with ``template``, slashes
  trimmed; an empty result raises ``EmptyRouteError``.
- options = scope option bag updated with ``options`` (call wins).
- stored in the method table under the effective path, replacing an older
  route with the same key. Returns the new ``Route`` for ``where*`` chaining.
- ``get``/``post``/``put``/``patch``/``delete``/``any`` are shortcuts; extra
  keyword arguments are merged over ``options``.

Grouping
--------
``scope(prefix=None, gate=None, **options)`` is a context manager. Its
arguments are validated by pydantic ``validate_call``. Nested scopes compose
(prefixes concatenate, option bags merge with the inner scope winning). The
previous scope is restored on exit, also when the body raises.
``group(options, body)`` is the callback form used by configuration code.

Resolution
----------
``resolve(method, path)`` looks up the table of ``method`` (the five verbs
only use their own table; ``ANY`` and unknown verbs use the catch-all
table) and returns the first matching route in insertion order, or raises
``RouteNotFoundError``. ``lookup(method, path)`` is the lookup-only
counterpart of ``register``: it applies the active scope prefix first.

Invariants
----------
- Resolution never mutates tables or routes; each call returns a fresh
  ``RouteMatch``.
- Registration is expected to finish before concurrent resolution starts.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import validate_call

from pathroute.validators import default_validators

from .errors import EmptyRouteError, RouteNotFoundError
from .pattern import normalize_path
from .registry import CapabilityRegistry
from .route import Route, RouteMatch
from .table import RouteTable

__all__ = ["BaseRouter", "METHODS", "CATCH_ALL"]

logger = logging.getLogger("pathroute")

CATCH_ALL = "ANY"
METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE", CATCH_ALL)


@dataclass(frozen=True)
class _Scope:
    prefix: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    def join(self, template: str) -> str:
        return normalize_path(self.prefix + (template or ""))


@validate_call
def _scope_options(
    prefix: Optional[str] = None,
    gate: Union[str, List[str], None] = None,
    **options: Any,
) -> Tuple[str, Dict[str, Any]]:
    bag = dict(options)
    if gate is not None:
        bag["gate"] = gate
    return prefix or "", bag


class BaseRouter:
    """Per-method route tables with scoped registration and resolution."""

    __slots__ = ("validators", "_tables", "_scope")

    def __init__(self, *, validators: Optional[CapabilityRegistry] = None) -> None:
        self.validators = validators if validators is not None else default_validators()
        self._tables: Dict[str, RouteTable] = {method: RouteTable(method) for method in METHODS}
        self._scope = _Scope()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(
        self,
        method: str,
        template: str,
        target: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Route:
        """Register ``template`` for ``method`` and return the created route.

        Raises:
            EmptyRouteError: when the effective path is empty.
            ValueError: for an unsupported method name.
        """
        table = self._tables.get(str(method or "").strip().upper())
        if table is None:
            raise ValueError(f"Unsupported method '{method}', expected one of {', '.join(METHODS)}")
        path = self._scope.join(template)
        if not path:
            raise EmptyRouteError()
        merged = dict(self._scope.options)
        merged.update(options or {})
        route = Route(path, target, merged)
        table.add(path, route)
        self._after_route_registered(table.method, route)
        logger.debug("registered %s %s -> %s", table.method, path, target)
        return route

    def get(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register("GET", template, target, {**(options or {}), **extra})

    def post(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register("POST", template, target, {**(options or {}), **extra})

    def put(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register("PUT", template, target, {**(options or {}), **extra})

    def patch(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register("PATCH", template, target, {**(options or {}), **extra})

    def delete(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register("DELETE", template, target, {**(options or {}), **extra})

    def any(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None, **extra: Any) -> Route:
        return self.register(CATCH_ALL, template, target, {**(options or {}), **extra})

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------
    @contextmanager
    def scope(
        self,
        prefix: Optional[str] = None,
        gate: Union[str, List[str], None] = None,
        **options: Any,
    ) -> Iterator["BaseRouter"]:
        """Register routes under a shared prefix and option bag."""
        scope_prefix, bag = _scope_options(prefix, gate, **options)
        previous = self._scope
        merged = dict(previous.options)
        merged.update(bag)
        self._scope = _Scope(prefix=previous.prefix + scope_prefix, options=merged)
        try:
            yield self
        finally:
            self._scope = previous

    def group(self, options: Mapping[str, Any], body: Callable[[], Any]) -> None:
        """Run ``body`` with ``options['prefix']`` and ``options['gate']`` applied."""
        with self.scope(prefix=options.get("prefix"), gate=options.get("gate")):
            body()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def table(self, method: str) -> RouteTable:
        """Return the table consulted for ``method`` (catch-all for unknown verbs)."""
        key = str(method or "").strip().upper()
        return self._tables.get(key, self._tables[CATCH_ALL])

    def resolve(self, method: str, path: str) -> RouteMatch:
        """Return the first route of ``method`` matching ``path``.

        Raises:
            RouteNotFoundError: when no route of the table matches.
        """
        normalized = normalize_path(path)
        matched = self.table(method).first_match(normalized, self.validators)
        if matched is None:
            logger.debug("no route for %s %s", method, normalized)
            raise RouteNotFoundError(normalized)
        return matched

    def lookup(self, method: str, path: str) -> RouteMatch:
        """Resolve a concrete ``path`` relative to the active scope prefix."""
        return self.resolve(method, self._scope.join(path))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def routes(self, method: Optional[str] = None) -> Tuple[Route, ...]:
        if method is not None:
            return tuple(self.table(method))
        return tuple(route for table in self._tables.values() for route in table)

    def reset(self) -> None:
        """Drop every registered route and the active scope."""
        for table in self._tables.values():
            table.clear()
        self._scope = _Scope()

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------
    def _after_route_registered(
        self, method: str, route: Route
    ) -> None:  # pragma: no cover - hook for subclasses
        """Hook invoked after a route is registered."""
        return None

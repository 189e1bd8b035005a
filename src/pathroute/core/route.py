"""Route definition and per-request match result (source of truth).

``Route``
    One registered route: a normalized template, an opaque target string
    (``Handler@method``), per-placeholder rules and an option bag. Routes
    are shared by every request, so matching never mutates them: a
    successful :meth:`Route.match` returns a fresh :class:`RouteMatch`
    carrying the extracted data.

Rules
-----
A rule is attached to a placeholder name and is one of:

- a validator: any object or class exposing ``validate(value) -> bool``;
- a string naming an entry of the validators registry handed to ``match``;
- a regular expression (string or compiled) that must ``fullmatch`` the
  captured value on its own.

The generic ``\\w+`` capture is always applied first; the rule only narrows
it. Rules are checked in placeholder order and the first failing rule ends
the attempt.

``where()`` and its shortcuts replace the complete rule set every time they
are called: ``where_number("id").where_alpha("name")`` leaves only the
``name`` rule in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .pattern import CompiledPattern, compile_template, normalize_path

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .registry import CapabilityRegistry

__all__ = ["Route", "RouteMatch", "NUMBER", "ALPHA", "ALPHA_NUMERIC"]

NUMBER = r"[0-9]+"
ALPHA = r"[^0-9]+"
ALPHA_NUMERIC = r"[A-Za-z0-9]+"


class Route:
    """A single route definition."""

    __slots__ = ("_template", "_target", "_rules", "_options")

    def __init__(self, template: str, target: str, options: Optional[Mapping[str, Any]] = None):
        self._template = normalize_path(template)
        compile_template(self._template)
        self._target = target
        self._rules: Dict[str, Any] = {}
        self._options: Dict[str, Any] = dict(options or {})

    def __repr__(self) -> str:
        return f"Route({self._template!r}, {self._target!r})"

    @property
    def template(self) -> str:
        return self._template

    @property
    def target(self) -> str:
        return self._target

    @property
    def rules(self) -> Dict[str, Any]:
        return dict(self._rules)

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    @property
    def compiled(self) -> CompiledPattern:
        return compile_template(self._template)

    def get_action(self) -> str:
        return self._target

    def get_options(self, key: Optional[str] = None) -> Any:
        """Return the option bag, or the value stored under ``key`` (``None`` if absent)."""
        if key is None:
            return dict(self._options)
        return self._options.get(key)

    def set_options(self, options: Mapping[str, Any]) -> None:
        self._options = dict(options)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------
    def where(self, rules: Mapping[str, Any]) -> "Route":
        self._rules = dict(rules)
        return self

    def where_number(self, *keys: str) -> "Route":
        return self.where({key: NUMBER for key in keys})

    def where_alpha(self, *keys: str) -> "Route":
        return self.where({key: ALPHA for key in keys})

    def where_alpha_numeric(self, *keys: str) -> "Route":
        return self.where({key: ALPHA_NUMERIC for key in keys})

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def match(
        self, path: str, validators: Optional["CapabilityRegistry"] = None
    ) -> Optional["RouteMatch"]:
        compiled = self.compiled
        values = compiled.match(path)
        if values is None:
            return None
        for name, value in zip(compiled.placeholders, values):
            rule = self._rules.get(name)
            if rule is not None and not _satisfies(rule, value, validators):
                return None
        return RouteMatch(route=self, data=dict(zip(compiled.placeholders, values)))


def _satisfies(rule: Any, value: str, validators: Optional["CapabilityRegistry"]) -> bool:
    validate = getattr(rule, "validate", None)
    if callable(validate):
        return bool(validate(value))
    if isinstance(rule, str) and validators is not None and rule in validators:
        return bool(validators.resolve(rule).validate(value))
    return re.fullmatch(rule, value) is not None


@dataclass
class RouteMatch:
    """Result of a successful match: the shared route plus this request's data."""

    route: Route
    data: Dict[str, str] = field(default_factory=dict)

    @property
    def target(self) -> str:
        return self.route.target

    @property
    def template(self) -> str:
        return self.route.template

    def get_action(self) -> str:
        return self.route.target

    def get_options(self, key: Optional[str] = None) -> Any:
        return self.route.get_options(key)

    def get_data(self) -> Dict[str, str]:
        return dict(self.data)

    def set_data(self, data: Mapping[str, str]) -> None:
        self.data = dict(data)

"""Per-method ordered route table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

from .route import Route, RouteMatch

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .registry import CapabilityRegistry

__all__ = ["RouteTable"]


class RouteTable:
    """Routes keyed by effective path; insertion order is match priority.

    Re-adding an existing key replaces the route but keeps the slot of the
    first registration.
    """

    __slots__ = ("method", "_routes")

    def __init__(self, method: str):
        self.method = method
        self._routes: Dict[str, Route] = {}

    def __repr__(self) -> str:
        return f"RouteTable({self.method!r}, {len(self._routes)} routes)"

    def add(self, key: str, route: Route) -> Route:
        self._routes[key] = route
        return route

    def get(self, key: str) -> Optional[Route]:
        return self._routes.get(key)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._routes)

    def clear(self) -> None:
        self._routes.clear()

    def first_match(
        self, path: str, validators: Optional["CapabilityRegistry"] = None
    ) -> Optional[RouteMatch]:
        for route in self._routes.values():
            matched = route.match(path, validators)
            if matched is not None:
                return matched
        return None

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)

"""Route template compilation.

A template such as ``users/{id}/posts/{slug}`` is turned into an anchored
regular expression where every ``{name}`` placeholder captures one or more
ASCII word characters (``[A-Za-z0-9_]``). Literal text is escaped, so a dot in a template only
matches a dot. Both templates and request paths are normalized by stripping
leading and trailing slashes before compiling or matching.

Placeholder rules are not part of the compiled pattern: a rule is applied
by :class:`~pathroute.core.route.Route` to the captured value afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern, Tuple

__all__ = ["CompiledPattern", "compile_template", "normalize_path", "PLACEHOLDER_RE"]

PLACEHOLDER_RE = re.compile(r"\{(\w+)\}", re.ASCII)
_CAPTURE = r"(\w+)"


def normalize_path(path: Optional[str]) -> str:
    """Strip surrounding slashes; ``None`` normalizes to an empty string."""
    return (path or "").strip("/")


@dataclass(frozen=True)
class CompiledPattern:
    """Compiled matcher plus placeholder names in capture order."""

    template: str
    regex: Pattern[str]
    placeholders: Tuple[str, ...]

    def match(self, path: str) -> Optional[Tuple[str, ...]]:
        """Return captured values for ``path`` or ``None`` when it does not match."""
        found = self.regex.fullmatch(normalize_path(path))
        if found is None:
            return None
        return found.groups()


@lru_cache(maxsize=1024)
def compile_template(template: str) -> CompiledPattern:
    """Compile ``template`` into a :class:`CompiledPattern`.

    Raises:
        ValueError: when a placeholder name is repeated in the template.
    """
    normalized = normalize_path(template)
    parts = []
    names = []
    cursor = 0
    for found in PLACEHOLDER_RE.finditer(normalized):
        name = found.group(1)
        if name in names:
            raise ValueError(f"Duplicate placeholder '{name}' in route '{template}'")
        names.append(name)
        parts.append(re.escape(normalized[cursor : found.start()]))
        parts.append(_CAPTURE)
        cursor = found.end()
    parts.append(re.escape(normalized[cursor:]))
    return CompiledPattern(
        template=normalized,
        regex=re.compile("".join(parts), re.ASCII),
        placeholders=tuple(names),
    )

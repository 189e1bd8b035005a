"""Validator capabilities for placeholder rules.

A validator exposes ``validate(value: str) -> bool`` and is attached to a
placeholder with ``route.where({"id": Number})`` or by registry name
(``route.where({"id": "number"})``). Validators receive the raw captured
string and never convert it; the extracted data stays a string.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from pathroute.core.registry import CapabilityRegistry

__all__ = [
    "BaseValidator",
    "Number",
    "Alpha",
    "AlphaNumeric",
    "TypeValidator",
    "default_validators",
]


class BaseValidator:
    """Contract for rule validators: one classmethod taking the raw value."""

    pattern: str = ""

    @classmethod
    def validate(cls, value: str) -> bool:
        return re.fullmatch(cls.pattern, value) is not None


class Number(BaseValidator):
    pattern = r"[0-9]+"


class Alpha(BaseValidator):
    pattern = r"[^0-9]+"


class AlphaNumeric(BaseValidator):
    pattern = r"[A-Za-z0-9]+"


class TypeValidator:
    """Accept values pydantic can parse as ``tp`` (``int``, ``uuid.UUID``, ...)."""

    __slots__ = ("tp", "_adapter")

    def __init__(self, tp: Any):
        self.tp = tp
        self._adapter = TypeAdapter(tp)

    def __repr__(self) -> str:
        return f"TypeValidator({self.tp!r})"

    def validate(self, value: str) -> bool:
        try:
            self._adapter.validate_python(value)
        except ValidationError:
            return False
        return True


def default_validators() -> "CapabilityRegistry":
    """Return a validator registry holding the built-in validators."""
    from pathroute.core.registry import CapabilityRegistry

    return CapabilityRegistry(
        "validator",
        {"number": Number, "alpha": Alpha, "alphanumeric": AlphaNumeric},
    )

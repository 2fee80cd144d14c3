"""Accessor factory: one get/set behavior per field name, shared across types."""

from __future__ import annotations

from collections.abc import Callable
from functools import cache
from typing import Any


@cache
def make_accessor(name: str) -> Callable[..., Any]:
    """Build (once) the accessor behavior for field ``name``.

    Called with only the instance it returns the field (None if never set).
    Called with one extra argument it stores it and returns the new value.
    """

    def accessor(instance: Any, *value: Any) -> Any:
        if not value:
            return instance[name] if name in instance else None
        if len(value) > 1:
            raise TypeError(f"Accessor '{name}' takes at most one value ({len(value)} given)")
        instance[name] = value[0]
        return value[0]

    accessor.__name__ = name
    accessor.__qualname__ = f"accessor.{name}"
    accessor.__classmite_accessor__ = name  # type: ignore[attr-defined]
    return accessor


def is_accessor(fn: Any) -> bool:
    """Check if ``fn`` was produced by make_accessor."""
    return hasattr(fn, "__classmite_accessor__")

"""Core type definitions for classmite."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Final, TypeAlias


class _Unset(Enum):
    """Marker for 'never assigned', distinct from an explicit None."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset.UNSET
"""Sentinel for an attribute that has no value and no default.

An explicit ``None`` default is a legitimate value and satisfies ``required``;
only ``UNSET`` fails the required check.
"""

RawArgs: TypeAlias = Mapping[str, Any]
"""Constructor arguments exactly as the caller passed them."""

Behavior: TypeAlias = Callable[..., Any]
"""A callable invoked with the instance as its first argument."""

InitHook: TypeAlias = Callable[[Any, RawArgs], Any]
"""Per-type initialization hook: ``hook(instance, raw_args)``."""

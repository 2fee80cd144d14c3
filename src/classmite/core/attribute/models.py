"""Attribute specifications and option validation.

Usage:
    spec = AttributeSpec.from_options("age", "Person", {"default": 0})
    spec.has_default  # True

    AttributeSpec.from_options("name", "Person", {"require": True})
    # InvalidAttributeOption: ... Use 'required=True' instead.
"""

from __future__ import annotations

import difflib
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from classmite.core.types import UNSET, RawArgs
from classmite.errors import InvalidAttributeOption

VALID_OPTIONS = frozenset({"required", "default"})

# Spellings of "required" seen in the wild; rejected with a pointed hint.
_REQUIRED_NEAR_MISSES = frozenset(
    {"require", "requires", "requried", "requred", "reqired", "mandatory", "is_required"}
)


@dataclass(slots=True, frozen=True)
class AttributeSpec:
    """Declared field: required flag plus an optional literal or generated default.

    A callable default is a generator and is called as
    ``default(instance_so_far, raw_args)`` once per construction.
    """

    required: bool = False
    default: Any = UNSET

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET

    def resolve_default(self, instance: Any, raw_args: RawArgs) -> Any:
        """Compute the default for one construction.

        Returns:
            The generated or literal value, or UNSET when no default is declared.
        """
        if self.default is UNSET:
            return UNSET
        if callable(self.default):
            return self.default(instance, raw_args)
        return self.default

    @classmethod
    def from_options(cls, attribute: str, owner: str, options: Mapping[str, Any]) -> AttributeSpec:
        """Validate declaration options and build a spec.

        Args:
            attribute: Attribute name, for error messages.
            owner: Declaring type or role name, for error messages.
            options: Keyword options passed to the declaration.

        Raises:
            InvalidAttributeOption: If any key is not ``required`` or ``default``.
        """
        for key in options:
            if key in VALID_OPTIONS:
                continue
            if key in _REQUIRED_NEAR_MISSES:
                raise InvalidAttributeOption(
                    attribute, owner, key, "Use 'required=True' instead."
                )
            close = difflib.get_close_matches(key, sorted(VALID_OPTIONS), n=1)
            hint = f"Did you mean '{close[0]}'?" if close else "Supported options: default, required."
            raise InvalidAttributeOption(attribute, owner, key, hint)

        return cls(
            required=bool(options.get("required", False)),
            default=options.get("default", UNSET),
        )

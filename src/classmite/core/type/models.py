"""Type models: descriptors, behavior origins, and layout snapshots."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Any

from classmite.core.attribute.models import AttributeSpec
from classmite.core.types import Behavior, InitHook


class OriginKind(Enum):
    """Who put a behavior into a type's own behavior map."""

    AUTHORED = auto()  # Defined directly on the type
    ACCESSOR = auto()  # Generated for a declared attribute
    ROLE = auto()  # Installed by role application
    BUILTIN = auto()  # Engine-provided (does, clone)

    @property
    def type_wins(self) -> bool:
        """Behaviors of this kind silently beat role-provided ones."""
        return self in (OriginKind.AUTHORED, OriginKind.ACCESSOR)


@dataclass(slots=True, frozen=True)
class BehaviorOrigin:
    """Provenance of one entry in a type's behavior map."""

    kind: OriginKind
    role: str | None = None  # Providing role, for ROLE entries
    original: str | None = None  # Name the role provides it under, before aliasing


@dataclass(slots=True, frozen=True)
class AppliedRole:
    """One successfully composed role and the alias map used for it."""

    role: str
    aliases: Mapping[str, str] = field(default_factory=dict)
    members: tuple[str, ...] = ()  # The role plus every role it consumes


@dataclass
class TypeDescriptor:
    """Declared shape of a type. Owned and mutated by the registry only."""

    name: str
    handles_attributes: bool = True
    parents: list[str] = field(default_factory=list)
    attributes: dict[str, AttributeSpec] = field(default_factory=dict)
    role_attributes: dict[str, AttributeSpec] = field(default_factory=dict)
    behaviors: dict[str, Behavior] = field(default_factory=dict)
    origins: dict[str, BehaviorOrigin] = field(default_factory=dict)
    applied: list[AppliedRole] = field(default_factory=list)
    init_hook: InitHook | None = None

    def install(self, name: str, fn: Behavior, origin: BehaviorOrigin) -> None:
        """Put ``fn`` into the own behavior map under ``name``."""
        self.behaviors[name] = fn
        self.origins[name] = origin

    def role_names(self) -> list[str]:
        return [record.role for record in self.applied]

    def has_applied(self, role: str) -> bool:
        return any(record.role == role for record in self.applied)


@dataclass(slots=True, frozen=True)
class TypeLayout:
    """Derived, read-only view of a type, computed once and shared by readers.

    Replaced as a whole on invalidation, so readers never mix old and new data.
    """

    name: str
    linearization: tuple[str, ...]
    attributes: Mapping[str, AttributeSpec]
    required: tuple[str, ...]
    hooks: tuple[InitHook, ...]
    behaviors: Mapping[str, Behavior]
    roles: frozenset[str]

    @classmethod
    def build(
        cls,
        name: str,
        linearization: tuple[str, ...],
        attributes: dict[str, AttributeSpec],
        hooks: tuple[InitHook, ...],
        behaviors: dict[str, Any],
        roles: frozenset[str],
    ) -> TypeLayout:
        return cls(
            name=name,
            linearization=linearization,
            attributes=MappingProxyType(attributes),
            required=tuple(n for n, spec in attributes.items() if spec.required),
            hooks=hooks,
            behaviors=MappingProxyType(behaviors),
            roles=roles,
        )

"""Role models: descriptors, application specs, and transitive closures.

Usage:
    specs = normalize_role_specs(["Printable", {"role": "Logger", "alias": {"log": "file_log"}}])
    # (RoleSpec(role="Printable"), RoleSpec(role="Logger", alias={"log": "file_log"}))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from classmite.core.attribute.models import AttributeSpec
from classmite.core.types import Behavior
from classmite.errors import RecursiveInheritance


@dataclass
class RoleDescriptor:
    """Blueprint of a role. Never instantiated, only composed."""

    name: str
    required: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)
    consumed: list[str] = field(default_factory=list)
    attributes: dict[str, AttributeSpec] = field(default_factory=dict)
    behaviors: dict[str, Behavior] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ProvidedBehavior:
    """A behavior a role brings, with the role that actually defines it."""

    provider: str
    name: str
    fn: Behavior


@dataclass(slots=True, frozen=True)
class RoleClosure:
    """Role plus everything it consumes, flattened.

    The role's own declarations win over consumed ones of the same name.
    """

    name: str
    members: tuple[str, ...]  # The role itself, then consumed roles (transitive)
    required: tuple[str, ...]
    excluded: tuple[str, ...]
    attributes: Mapping[str, AttributeSpec]
    behaviors: tuple[ProvidedBehavior, ...]


@dataclass(slots=True, frozen=True)
class RoleSpec:
    """One role to apply, with an optional ``provided -> installed`` rename map."""

    role: str
    alias: Mapping[str, str] = field(default_factory=dict)

    def installed_name(self, provided: str) -> str:
        return self.alias.get(provided, provided)


def normalize_role_specs(
    specs: Iterable[Any], resolve_name: Callable[[Any], str] = str
) -> tuple[RoleSpec, ...]:
    """Turn names, handles, dicts, and RoleSpecs into RoleSpecs.

    Args:
        specs: Items of the form ``"Name"``, ``{"role": "Name", "alias": {...}}``,
            or RoleSpec.
        resolve_name: Maps a bare item (name or handle) to a role name.

    Raises:
        TypeError: If a dict spec has no ``role`` key or a non-mapping alias.
    """
    result: list[RoleSpec] = []
    for spec in specs:
        if isinstance(spec, RoleSpec):
            result.append(spec)
        elif isinstance(spec, Mapping):
            if not spec.get("role"):
                raise TypeError(f"Role spec {spec!r} is missing the 'role' key")
            alias = spec.get("alias") or {}
            if not isinstance(alias, Mapping):
                raise TypeError(f"Alias for role {spec['role']!r} must be a mapping")
            result.append(RoleSpec(role=resolve_name(spec["role"]), alias=dict(alias)))
        else:
            result.append(RoleSpec(role=resolve_name(spec)))
    return tuple(result)


def role_closure(name: str, roles: Mapping[str, RoleDescriptor]) -> RoleClosure:
    """Flatten ``name`` and its consumed roles (depth-first, own entries first).

    Consumed roles missing from ``roles`` are skipped; the registry loads them
    before asking for a closure.

    Raises:
        RecursiveInheritance: If ``name`` consumes itself through any path.
    """
    members: list[str] = []
    _collect(name, roles, members, ())

    required: dict[str, None] = {}
    excluded: dict[str, None] = {}
    attributes: dict[str, AttributeSpec] = {}
    behaviors: dict[str, ProvidedBehavior] = {}
    for member in members:
        desc = roles[member]
        required.update(dict.fromkeys(desc.required))
        excluded.update(dict.fromkeys(desc.excluded))
        for attr, spec in desc.attributes.items():
            attributes.setdefault(attr, spec)
        for bname, fn in desc.behaviors.items():
            behaviors.setdefault(bname, ProvidedBehavior(member, bname, fn))

    return RoleClosure(
        name=name,
        members=tuple(members),
        required=tuple(required),
        excluded=tuple(excluded),
        attributes=attributes,
        behaviors=tuple(behaviors.values()),
    )


def _collect(
    name: str, roles: Mapping[str, RoleDescriptor], out: list[str], path: tuple[str, ...]
) -> None:
    if name in path:
        raise RecursiveInheritance(path[0], name)
    if name in out or name not in roles:
        return
    out.append(name)
    for consumed in roles[name].consumed:
        _collect(consumed, roles, out, (*path, name))

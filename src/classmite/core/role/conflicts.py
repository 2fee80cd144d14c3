"""Behavior-name conflict detection for role composition.

One ownership scan serves both batch and one-at-a-time application: the scan
is seeded with what earlier roles already installed on the type, then walks
the new claims in application order. Applying ``[A, B]`` together and
applying ``A`` then ``B`` therefore find the same conflicts.
"""

from __future__ import annotations

from collections.abc import Container, Iterable, Mapping
from dataclasses import dataclass

from classmite.core.role.models import RoleClosure, RoleSpec
from classmite.errors import AliasedBehaviorConflict, BehaviorConflict


@dataclass(slots=True, frozen=True)
class Claim:
    """A role's intent to install ``original`` under ``installed``."""

    role: str
    original: str
    installed: str

    @property
    def aliased(self) -> bool:
        return self.original != self.installed


@dataclass(slots=True, frozen=True)
class Conflict:
    """Two different roles claiming the same installed name."""

    behavior: str
    roles: tuple[str, str]
    alias: str | None = None

    @property
    def is_alias(self) -> bool:
        return self.alias is not None

    def to_error(self, type_name: str) -> BehaviorConflict:
        if self.alias is not None:
            return AliasedBehaviorConflict(self.behavior, self.alias, self.roles, type_name)
        return BehaviorConflict(self.behavior, self.roles, type_name)


def claims_for(closure: RoleClosure, spec: RoleSpec) -> list[Claim]:
    """Claims for every behavior in ``closure`` after applying ``spec``'s aliases."""
    return [
        Claim(role=b.provider, original=b.name, installed=spec.installed_name(b.name))
        for b in closure.behaviors
    ]


def find_conflicts(
    claims: Iterable[Claim],
    existing: Mapping[str, Claim],
    type_wins: Container[str],
) -> list[Conflict]:
    """Scan claims in order and report every cross-role clash.

    Args:
        claims: New claims, in application order.
        existing: Installed name -> claim for behaviors roles already put on the type.
        type_wins: Installed names the type itself authored. Claims on these are
            skipped silently, never conflicts.

    Returns:
        Conflicts in discovery order (empty if none).
    """
    owners = dict(existing)
    conflicts: list[Conflict] = []
    for claim in claims:
        if claim.installed in type_wins:
            continue
        current = owners.get(claim.installed)
        if current is None or current.role == claim.role:
            owners[claim.installed] = claim
            continue

        roles = tuple(sorted((current.role, claim.role)))
        if claim.aliased:
            conflicts.append(Conflict(claim.original, roles, alias=claim.installed))  # type: ignore[arg-type]
        elif current.aliased:
            conflicts.append(Conflict(current.original, roles, alias=claim.installed))  # type: ignore[arg-type]
        else:
            conflicts.append(Conflict(claim.installed, roles))  # type: ignore[arg-type]
    return conflicts


def select_conflict(conflicts: list[Conflict]) -> Conflict | None:
    """Pick the conflict to report: the first alias conflict, else the first one."""
    for conflict in conflicts:
        if conflict.is_alias:
            return conflict
    return conflicts[0] if conflicts else None

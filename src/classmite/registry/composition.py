"""Role application: composing roles into a type.

Per batch, in order: load roles, skip re-applied ones, check exclusions,
check requirements, scan for conflicts, and only then install behaviors,
merge attributes, and record the roles. A failing check leaves the type
untouched.

Usage:
    registry.apply_roles("Logger", "Printable", {"role": "Debug", "alias": {"log": "debug_log"}})
    registry.apply_role_now(instance, "Auditable")  # runtime, one role at a time
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from classmite.core.attribute import make_accessor
from classmite.core.role import (
    Claim,
    RoleClosure,
    RoleSpec,
    claims_for,
    find_conflicts,
    normalize_role_specs,
    select_conflict,
)
from classmite.core.type import AppliedRole, BehaviorOrigin, OriginKind, TypeDescriptor
from classmite.errors import (
    MissingRequiredBehavior,
    RoleAttributesIgnoredWarning,
    RoleExclusionViolation,
    RoleReapplicationWarning,
)

if TYPE_CHECKING:
    from classmite.registry.registry import Registry

logger = logging.getLogger(__name__)

# apply() -> Registry.apply_roles -> caller
_STACKLEVEL = 4


class RoleComposer:
    """Applies roles to types on behalf of a Registry.

    Args:
        registry: Registry whose descriptors and caches are updated.
    """

    def __init__(self, registry: Registry):
        self._registry = registry

    def apply(self, type_name: str, specs: Iterable[Any], *, batch: bool) -> None:
        """Apply role specs to ``type_name``.

        Args:
            type_name: Target type.
            specs: Role names, handles, alias dicts, or RoleSpecs.
            batch: Validate all specs together before installing any (declaration
                path), or apply them one by one (runtime path).
        """
        from classmite.registry.registry import resolve_name

        normalized = normalize_role_specs(specs, resolve_name)
        with self._registry.lock:
            desc = self._registry.get_type(type_name)
            if batch:
                self._apply_batch(desc, normalized)
            else:
                for spec in normalized:
                    self._apply_batch(desc, (spec,))

    def _apply_batch(self, desc: TypeDescriptor, specs: tuple[RoleSpec, ...]) -> None:
        registry = self._registry
        # Load every role up front so a bad name fails before anything else
        closures = [registry.closure(spec.role) for spec in specs]

        pending: list[tuple[RoleSpec, RoleClosure]] = []
        seen: set[str] = set()
        for spec, closure in zip(specs, closures, strict=True):
            if desc.has_applied(spec.role) or spec.role in seen:
                if registry.settings.warn_on_reapply:
                    warnings.warn(
                        f"Role '{spec.role}' is already applied to type '{desc.name}'",
                        RoleReapplicationWarning,
                        stacklevel=_STACKLEVEL,
                    )
                continue
            seen.add(spec.role)
            pending.append((spec, closure))
        if not pending:
            return

        self._check_exclusions(desc, pending)
        self._check_requirements(desc, pending)
        self._check_conflicts(desc, pending)

        for spec, closure in pending:
            self._install(desc, spec, closure)
            desc.applied.append(AppliedRole(spec.role, dict(spec.alias), closure.members))
            logger.debug(f"Applied role {spec.role} to {desc.name}")
        registry._invalidate(desc.name)

    def _check_exclusions(
        self, desc: TypeDescriptor, pending: list[tuple[RoleSpec, RoleClosure]]
    ) -> None:
        """Fail if any new role excludes, or is excluded by, a composed role."""
        registry = self._registry
        composed = set(registry.layout(desc.name).roles)
        for spec, closure in pending:
            for excluded in closure.excluded:
                if excluded in composed:
                    raise RoleExclusionViolation(spec.role, excluded, desc.name)
            members = set(closure.members)
            for existing in sorted(composed):
                if not registry.is_role(existing):
                    continue
                for excluded in registry.closure(existing).excluded:
                    if excluded in members:
                        raise RoleExclusionViolation(existing, excluded, desc.name)
            composed.update(closure.members)

    def _check_requirements(
        self, desc: TypeDescriptor, pending: list[tuple[RoleSpec, RoleClosure]]
    ) -> None:
        """Fail if a required behavior is neither on the type nor provided by the batch.

        Role attributes count as provided when the type handles attributes,
        since their accessors are installed along with the role's behaviors.
        """
        available = set(self._registry.layout(desc.name).behaviors)
        for spec, closure in pending:
            available.update(spec.installed_name(b.name) for b in closure.behaviors)
            if desc.handles_attributes:
                available.update(closure.attributes)
        for spec, closure in pending:
            missing = [name for name in closure.required if name not in available]
            if missing:
                raise MissingRequiredBehavior(spec.role, desc.name, missing)

    def _check_conflicts(
        self, desc: TypeDescriptor, pending: list[tuple[RoleSpec, RoleClosure]]
    ) -> None:
        existing = {
            name: Claim(origin.role, origin.original or name, name)  # type: ignore[arg-type]
            for name, origin in desc.origins.items()
            if origin.kind is OriginKind.ROLE
        }
        claims = [claim for spec, closure in pending for claim in claims_for(closure, spec)]
        conflict = select_conflict(find_conflicts(claims, existing, _type_wins(desc)))
        if conflict is not None:
            raise conflict.to_error(desc.name)

    def _install(self, desc: TypeDescriptor, spec: RoleSpec, closure: RoleClosure) -> None:
        type_wins = _type_wins(desc)
        for provided in closure.behaviors:
            installed = spec.installed_name(provided.name)
            if installed in type_wins:
                continue
            desc.install(
                installed,
                provided.fn,
                BehaviorOrigin(OriginKind.ROLE, role=provided.provider, original=provided.name),
            )

        if not closure.attributes:
            return
        if not desc.handles_attributes:
            if self._registry.settings.warn_on_dropped_attributes:
                warnings.warn(
                    f"Role '{spec.role}' has attributes ({', '.join(closure.attributes)}) "
                    f"that will be ignored: type '{desc.name}' does not handle attributes",
                    RoleAttributesIgnoredWarning,
                    stacklevel=_STACKLEVEL + 1,
                )
            return
        for name, attr in closure.attributes.items():
            desc.role_attributes.setdefault(name, attr)
            if name not in desc.behaviors:
                desc.install(
                    name,
                    make_accessor(name),
                    BehaviorOrigin(OriginKind.ROLE, role=spec.role, original=name),
                )


def _type_wins(desc: TypeDescriptor) -> set[str]:
    return {name for name, origin in desc.origins.items() if origin.kind.type_wins}

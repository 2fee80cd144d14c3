"""Role functionality: descriptors, specs, closures, and conflict detection."""

from classmite.core.role.conflicts import (
    Claim,
    Conflict,
    claims_for,
    find_conflicts,
    select_conflict,
)
from classmite.core.role.models import (
    ProvidedBehavior,
    RoleClosure,
    RoleDescriptor,
    RoleSpec,
    normalize_role_specs,
    role_closure,
)

__all__ = [
    # Models
    "RoleDescriptor",
    "RoleSpec",
    "RoleClosure",
    "ProvidedBehavior",
    "normalize_role_specs",
    "role_closure",
    # Conflicts
    "Claim",
    "Conflict",
    "claims_for",
    "find_conflicts",
    "select_conflict",
]

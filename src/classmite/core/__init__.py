"""Core functionalities: stateless models and pure operations.

Architecture Note:
    core/ holds descriptors and pure functions (linearization, role closures,
    conflict scans) with no registry state of their own.
    The stateful registry and construction engine live in registry/.
"""

from classmite.core.attribute import VALID_OPTIONS, AttributeSpec, is_accessor, make_accessor
from classmite.core.graph import descendants, inherits_from, linearize
from classmite.core.role import (
    Claim,
    Conflict,
    ProvidedBehavior,
    RoleClosure,
    RoleDescriptor,
    RoleSpec,
    claims_for,
    find_conflicts,
    normalize_role_specs,
    role_closure,
    select_conflict,
)
from classmite.core.type import (
    AppliedRole,
    BehaviorOrigin,
    OriginKind,
    TypeDescriptor,
    TypeLayout,
)
from classmite.core.types import UNSET

__all__ = [
    # Types
    "UNSET",
    # Attribute
    "AttributeSpec",
    "VALID_OPTIONS",
    "make_accessor",
    "is_accessor",
    # Graph
    "linearize",
    "inherits_from",
    "descendants",
    # Role
    "RoleDescriptor",
    "RoleSpec",
    "RoleClosure",
    "ProvidedBehavior",
    "normalize_role_specs",
    "role_closure",
    "Claim",
    "Conflict",
    "claims_for",
    "find_conflicts",
    "select_conflict",
    # Type
    "TypeDescriptor",
    "TypeLayout",
    "AppliedRole",
    "BehaviorOrigin",
    "OriginKind",
]

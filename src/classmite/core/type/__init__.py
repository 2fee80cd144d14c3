"""Type functionality: descriptors and layout snapshots."""

from classmite.core.type.models import (
    AppliedRole,
    BehaviorOrigin,
    OriginKind,
    TypeDescriptor,
    TypeLayout,
)

__all__ = [
    "TypeDescriptor",
    "TypeLayout",
    "AppliedRole",
    "BehaviorOrigin",
    "OriginKind",
]

"""Inheritance graph functionality: linearization and reachability."""

from classmite.core.graph.operations import descendants, inherits_from, linearize

__all__ = [
    "linearize",
    "inherits_from",
    "descendants",
]

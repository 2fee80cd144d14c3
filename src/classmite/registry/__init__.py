"""Stateful services: the type/role registry, role composition, construction."""

from classmite.registry.composition import RoleComposer
from classmite.registry.construction import clone, construct
from classmite.registry.instance import Instance, fields_of, type_of
from classmite.registry.registry import Registry, resolve_name

__all__ = [
    "Registry",
    "RoleComposer",
    "Instance",
    "construct",
    "clone",
    "resolve_name",
    "type_of",
    "fields_of",
]

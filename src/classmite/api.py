"""Module-level API bound to the process-wide default registry.

Usage:
    from classmite import api

    api.declare_type("Point")
    api.declare_attribute("Point", "x", default=0)
    api.declare_attribute("Point", "y", default=0)
    p = api.new("Point", x=3)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from classmite.config import EngineSettings
from classmite.core.attribute import AttributeSpec
from classmite.core.role import RoleDescriptor
from classmite.core.type import TypeDescriptor
from classmite.core.types import Behavior, InitHook
from classmite.registry import Instance, Registry

# Module-level registry instance
_registry = Registry()


def get_registry() -> Registry:
    """Access the global registry.

    Returns:
        The process-local Registry instance.
    """
    return _registry


def reset_registry(settings: EngineSettings | None = None) -> Registry:
    """Replace the global registry with an empty one (mainly for tests).

    Handles created against the old registry keep pointing at it.
    """
    global _registry
    _registry = Registry(settings)
    return _registry


def declare_type(name: str, *, attributes: bool = True, cloneable: bool = False) -> TypeDescriptor:
    return _registry.declare_type(name, attributes=attributes, cloneable=cloneable)


def add_parent(name: Any, *parents: Any) -> None:
    _registry.add_parent(name, *parents)


def declare_attribute(type_name: Any, attribute: str, **options: Any) -> AttributeSpec:
    return _registry.declare_attribute(type_name, attribute, **options)


def define_behavior(type_name: Any, name: str, fn: Behavior) -> None:
    _registry.define_behavior(type_name, name, fn)


def set_init_hook(type_name: Any, hook: InitHook | None) -> None:
    _registry.set_init_hook(type_name, hook)


def declare_role(name: str) -> RoleDescriptor:
    return _registry.declare_role(name)


def require_behaviors(role: Any, *names: str) -> None:
    _registry.require_behaviors(role, *names)


def exclude_roles(role: Any, *names: Any) -> None:
    _registry.exclude_roles(role, *names)


def consume_roles(role: Any, *names: Any) -> None:
    _registry.consume_roles(role, *names)


def provide_behavior(role: Any, name: str, fn: Behavior) -> None:
    _registry.provide_behavior(role, name, fn)


def declare_role_attribute(role: Any, attribute: str, **options: Any) -> AttributeSpec:
    return _registry.declare_role_attribute(role, attribute, **options)


def apply_roles(type_name: Any, *specs: Any) -> None:
    _registry.apply_roles(type_name, *specs)


def apply_role_now(target: Any, *specs: Any) -> None:
    _registry.apply_role_now(target, *specs)


def is_role(name: Any) -> bool:
    return _registry.is_role(name)


def does(target: Any, role: Any) -> bool:
    return _registry.does(target, role)


def applied_roles(target: Any) -> list[str]:
    return _registry.applied_roles(target)


def can(target: Any, behavior: str) -> bool:
    return _registry.can(target, behavior)


def behavior_origin(target: Any, behavior: str) -> str | None:
    return _registry.behavior_origin(target, behavior)


def linearize(target: Any) -> tuple[str, ...]:
    return _registry.linearize(target)


def merged_attributes(target: Any) -> Mapping[str, AttributeSpec]:
    return _registry.merged_attributes(target)


def new(type_name: Any, args: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Instance:
    return _registry.new(type_name, args, **kwargs)


def clone(instance: Instance, /, **overrides: Any) -> Instance:
    """Clone using the registry the instance was built by."""
    return instance._registry.clone(instance, **overrides)

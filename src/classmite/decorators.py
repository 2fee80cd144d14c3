"""Class-body front-end for declaring types and roles.

Usage:
    @role(requires=("to_string",))
    class Printable:
        def render(self):
            return f"<{self.to_string()}>"

    @define(with_=(Printable,))
    class Person:
        first = has(required=True)
        last = has(required=True)
        age = has(default=0)

        def __build__(self, args):
            self["full_name"] = f"{self.first()} {self.last()}"

        def to_string(self):
            return self["full_name"]

    @define(extends=(Person,))
    class Employee:
        id = has(required=True)

    Employee(first="Ada", last="Lovelace", id=1).render()  # "<Ada Lovelace>"

The decorated class is only read, never instantiated. Python base classes
are ignored; use ``extends=`` for inheritance. Plain functions become
behaviors (called with the instance first), ``has()`` markers become
attributes, and ``__build__(self, args)`` becomes the initialization hook.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, overload

from classmite.registry import Instance, Registry

_HOOK_NAME = "__build__"


@dataclass(frozen=True, slots=True)
class Has:
    """Attribute marker collected from a class body."""

    options: Mapping[str, Any] = field(default_factory=dict)


def has(**options: Any) -> Has:
    """Declare an attribute in a class body: ``name = has(required=True)``.

    Options are validated when the enclosing class is decorated.
    """
    return Has(dict(options))


@dataclass(frozen=True, slots=True)
class TypeHandle:
    """Declared type. Calling it constructs an instance."""

    name: str
    registry: Registry
    source: type | None = None

    @property
    def __classmite_name__(self) -> str:
        return self.name

    def __call__(self, args: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Instance:
        return self.registry.new(self.name, args, **kwargs)

    def does(self, role: Any) -> bool:
        return self.registry.does(self.name, role)

    def can(self, behavior: str) -> bool:
        return self.registry.can(self.name, behavior)

    def apply_role(self, *specs: Any) -> None:
        """Compose roles at runtime, one at a time."""
        self.registry.apply_role_now(self.name, *specs)

    @property
    def applied_roles(self) -> list[str]:
        return self.registry.applied_roles(self.name)

    @property
    def linearization(self) -> tuple[str, ...]:
        return self.registry.linearize(self.name)

    def __repr__(self) -> str:
        return f"<type {self.name}>"


@dataclass(frozen=True, slots=True)
class RoleHandle:
    """Declared role. Usable wherever a role name is accepted."""

    name: str
    registry: Registry
    source: type | None = None

    @property
    def __classmite_name__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<role {self.name}>"


def _as_tuple(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Mapping, TypeHandle, RoleHandle)):
        return (value,)
    return tuple(value)


def _harvest(cls: type) -> tuple[list[tuple[str, Has]], list[tuple[str, Callable[..., Any]]], Any]:
    """Split a class body into attribute markers, behaviors, and the init hook."""
    attributes: list[tuple[str, Has]] = []
    behaviors: list[tuple[str, Callable[..., Any]]] = []
    hook = None
    for name, value in vars(cls).items():
        if isinstance(value, Has):
            attributes.append((name, value))
        elif name == _HOOK_NAME:
            hook = value
        elif name.startswith("__") and name.endswith("__"):
            continue
        elif inspect.isfunction(value):
            behaviors.append((name, value))
    return attributes, behaviors, hook


def _default_registry() -> Registry:
    from classmite.api import get_registry

    return get_registry()


@overload
def define(cls: type, /) -> TypeHandle: ...


@overload
def define(
    cls: None = None,
    /,
    *,
    name: str | None = None,
    extends: Any = (),
    with_: Any = (),
    attributes: bool = True,
    cloneable: bool = False,
    registry: Registry | None = None,
) -> Callable[[type], TypeHandle]: ...


def define(
    cls: type | None = None,
    /,
    *,
    name: str | None = None,
    extends: Any = (),
    with_: Any = (),
    attributes: bool = True,
    cloneable: bool = False,
    registry: Registry | None = None,
) -> TypeHandle | Callable[[type], TypeHandle]:
    """Declare a type from a class body.

    Supports three forms:
        @define                           # bare decorator
        @define()                         # parenthesized, no args
        @define(extends=(Base,), with_=("Printable",))

    Args:
        cls: The class to read, or None if called with arguments.
        name: Type name. Defaults to the class name.
        extends: Parent type(s): names or handles.
        with_: Role spec(s) applied as one batch after parents, attributes and
            behaviors are in place.
        attributes: Whether the type handles attributes.
        cloneable: Install a builtin ``clone`` behavior.
        registry: Target registry. Defaults to the global one.

    Returns:
        TypeHandle, or a decorator producing one.
    """

    def decorator(c: type) -> TypeHandle:
        reg = registry or _default_registry()
        type_name = name or c.__name__
        attrs, behaviors, hook = _harvest(c)
        with reg.lock:
            reg.declare_type(type_name, attributes=attributes, cloneable=cloneable)
            parents = _as_tuple(extends)
            if parents:
                reg.add_parent(type_name, *parents)
            for attr_name, marker in attrs:
                reg.declare_attribute(type_name, attr_name, **marker.options)
            for behavior_name, fn in behaviors:
                reg.define_behavior(type_name, behavior_name, fn)
            if hook is not None:
                reg.set_init_hook(type_name, hook)
            roles = _as_tuple(with_)
            if roles:
                reg.apply_roles(type_name, *roles)
        return TypeHandle(type_name, reg, c)

    if cls is None:
        return decorator
    return decorator(cls)


@overload
def role(cls: type, /) -> RoleHandle: ...


@overload
def role(
    cls: None = None,
    /,
    *,
    name: str | None = None,
    requires: Any = (),
    excludes: Any = (),
    consumes: Any = (),
    registry: Registry | None = None,
) -> Callable[[type], RoleHandle]: ...


def role(
    cls: type | None = None,
    /,
    *,
    name: str | None = None,
    requires: Any = (),
    excludes: Any = (),
    consumes: Any = (),
    registry: Registry | None = None,
) -> RoleHandle | Callable[[type], RoleHandle]:
    """Declare a role from a class body.

    Functions become provided behaviors and ``has()`` markers role attributes.
    Roles have no initialization hook; a ``__build__`` in the body is ignored.

    Args:
        cls: The class to read, or None if called with arguments.
        name: Role name. Defaults to the class name.
        requires: Behavior name(s) consuming types must provide.
        excludes: Role(s) that may not be composed alongside this one.
        consumes: Role(s) composed into this one.
        registry: Target registry. Defaults to the global one.
    """

    def decorator(c: type) -> RoleHandle:
        reg = registry or _default_registry()
        role_name = name or c.__name__
        attrs, behaviors, _ = _harvest(c)
        with reg.lock:
            reg.declare_role(role_name)
            required = (requires,) if isinstance(requires, str) else tuple(requires)
            if required:
                reg.require_behaviors(role_name, *required)
            excluded = _as_tuple(excludes)
            if excluded:
                reg.exclude_roles(role_name, *excluded)
            consumed = _as_tuple(consumes)
            if consumed:
                reg.consume_roles(role_name, *consumed)
            for attr_name, marker in attrs:
                reg.declare_role_attribute(role_name, attr_name, **marker.options)
            for behavior_name, fn in behaviors:
                reg.provide_behavior(role_name, behavior_name, fn)
        return RoleHandle(role_name, reg, c)

    if cls is None:
        return decorator
    return decorator(cls)

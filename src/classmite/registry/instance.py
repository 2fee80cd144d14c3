"""Instances: field records tagged with their type, with behavior dispatch.

Usage:
    person = registry.new("Person", name="Ada")
    person.name()          # accessor read  -> "Ada"
    person.name("Grace")   # accessor write -> "Grace"
    person["nickname"]     # raw field access, used by init hooks
    type_of(person)        # "Person"
"""

from __future__ import annotations

from types import MethodType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from classmite.registry.registry import Registry

_SLOTS = ("_type", "_fields", "_registry")


class Instance:
    """Record of field name -> value, tagged with its originating type.

    Attribute access resolves behaviors from the type's cached layout and
    binds them to the instance. Fields are reached with item syntax so they
    never collide with behavior names.
    """

    __slots__ = (*_SLOTS, "__weakref__")

    def __init__(self, type_name: str, registry: Registry, fields: dict[str, Any] | None = None):
        self._type = type_name
        self._registry = registry
        self._fields: dict[str, Any] = {} if fields is None else fields

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name in _SLOTS or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        behavior = self._registry.layout(self._type).behaviors.get(name)
        if behavior is None:
            raise AttributeError(f"'{self._type}' instance has no behavior '{name}'")
        return MethodType(behavior, self)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __dir__(self) -> list[str]:
        return sorted(self._registry.layout(self._type).behaviors)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._fields.items())
        return f"<{self._type} {fields}>" if fields else f"<{self._type}>"


def type_of(instance: Instance) -> str:
    """Name of the type an instance was built from."""
    return instance._type


def fields_of(instance: Instance) -> dict[str, Any]:
    """Shallow copy of an instance's fields."""
    return dict(instance._fields)

"""Construction engine: building instances from raw constructor arguments.

Order of work for ``construct``:
    1. Tag an empty record with the type.
    2. Fill declared attributes: argument, else default (generators receive the
       in-progress instance and the raw arguments), else leave unset.
    3. Fail on the first required attribute still unset. No hook has run yet.
    4. Copy undeclared argument keys onto the instance as free-form fields.
    5. Run each ancestor's initialization hook once, ancestors first.

Hook exceptions propagate unchanged; hooks that already ran are not undone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from classmite.core.types import UNSET
from classmite.errors import MissingRequiredAttribute
from classmite.registry.instance import Instance, fields_of, type_of

if TYPE_CHECKING:
    from classmite.registry.registry import Registry


def construct(registry: Registry, type_name: str, raw_args: dict[str, Any]) -> Instance:
    """Build an instance of ``type_name`` from ``raw_args``.

    Args:
        registry: Registry holding the type.
        type_name: Type to instantiate.
        raw_args: Constructor arguments; passed through to generators and hooks.

    Returns:
        The initialized instance.

    Raises:
        MissingRequiredAttribute: If a required attribute has no value.
        TypeLoadFailure: If the type is not declared.
    """
    layout = registry.layout(type_name)
    fields: dict[str, Any] = {}
    instance = Instance(layout.name, registry, fields)

    for name, spec in layout.attributes.items():
        if name in raw_args:
            fields[name] = raw_args[name]
        elif spec.has_default:
            value = spec.resolve_default(instance, raw_args)
            if value is not UNSET:
                fields[name] = value

    for name in layout.required:
        if name not in fields:
            raise MissingRequiredAttribute(name, type_name)

    for key, value in raw_args.items():
        if key not in layout.attributes:
            fields[key] = value

    for hook in layout.hooks:
        hook(instance, raw_args)
    return instance


def clone(registry: Registry, instance: Instance, overrides: Mapping[str, Any]) -> Instance:
    """Construct a sibling of ``instance`` from its fields merged with overrides.

    This is a full construction: defaults apply only to missing fields and
    every initialization hook runs again.
    """
    raw = fields_of(instance)
    raw.update(overrides)
    return construct(registry, type_of(instance), raw)

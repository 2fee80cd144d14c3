"""classmite: a small runtime type-composition engine.

Types with declared attributes, parent-first initialization hooks across
multiple inheritance, and roles composed with requirement, exclusion,
conflict, and alias rules.

Usage:
    from classmite import define, has, role

    @role(requires=("name",))
    class Greeter:
        def greet(self):
            return f"Hello, {self.name()}"

    @define(with_=(Greeter,))
    class Person:
        name = has(required=True)
        age = has(default=0)

    ada = Person(name="Ada")
    ada.greet()            # "Hello, Ada"
    ada.does("Greeter")    # True

Or, without decorators:
    from classmite import Registry

    registry = Registry()
    registry.declare_type("Point")
    registry.declare_attribute("Point", "x", default=0)
    registry.new("Point").x()  # 0
"""

__version__ = "0.1.0"

# Module-level API (global registry)
from classmite.api import (
    add_parent,
    applied_roles,
    apply_role_now,
    apply_roles,
    behavior_origin,
    can,
    clone,
    consume_roles,
    declare_attribute,
    declare_role,
    declare_role_attribute,
    declare_type,
    define_behavior,
    does,
    exclude_roles,
    get_registry,
    is_role,
    linearize,
    merged_attributes,
    new,
    provide_behavior,
    require_behaviors,
    reset_registry,
    set_init_hook,
)

# Configuration
from classmite.config import EngineSettings

# Core primitives
from classmite.core import UNSET, AttributeSpec, RoleSpec

# Declarative front-end
from classmite.decorators import RoleHandle, TypeHandle, define, has, role

# Errors and warnings
from classmite.errors import (
    AliasedBehaviorConflict,
    AttributesNotSupported,
    BehaviorConflict,
    ClassmiteError,
    ClassmiteWarning,
    InvalidAttributeOption,
    MissingRequiredAttribute,
    MissingRequiredBehavior,
    ParentLoadFailure,
    RecursiveInheritance,
    RoleAttributesIgnoredWarning,
    RoleExclusionViolation,
    RoleLoadFailure,
    RoleReapplicationWarning,
    TypeLoadFailure,
)

# Registry and instances
from classmite.registry import Instance, Registry, fields_of, type_of

__all__ = [
    # Version
    "__version__",
    # Decorators
    "define",
    "role",
    "has",
    "TypeHandle",
    "RoleHandle",
    # Registry
    "Registry",
    "Instance",
    "type_of",
    "fields_of",
    "EngineSettings",
    "AttributeSpec",
    "RoleSpec",
    "UNSET",
    # Global registry API
    "get_registry",
    "reset_registry",
    "declare_type",
    "add_parent",
    "declare_attribute",
    "define_behavior",
    "set_init_hook",
    "declare_role",
    "require_behaviors",
    "exclude_roles",
    "consume_roles",
    "provide_behavior",
    "declare_role_attribute",
    "apply_roles",
    "apply_role_now",
    "is_role",
    "does",
    "applied_roles",
    "can",
    "behavior_origin",
    "linearize",
    "merged_attributes",
    "new",
    "clone",
    # Errors
    "ClassmiteError",
    "RecursiveInheritance",
    "TypeLoadFailure",
    "ParentLoadFailure",
    "InvalidAttributeOption",
    "AttributesNotSupported",
    "MissingRequiredAttribute",
    "RoleLoadFailure",
    "RoleExclusionViolation",
    "MissingRequiredBehavior",
    "BehaviorConflict",
    "AliasedBehaviorConflict",
    # Warnings
    "ClassmiteWarning",
    "RoleReapplicationWarning",
    "RoleAttributesIgnoredWarning",
]

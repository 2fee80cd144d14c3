"""Errors and warnings raised by the composition engine.

Every failure is a declaration-time or construction-time contract violation.
Nothing here is transient, so callers never retry; they fix the declaration.

Usage:
    try:
        registry.new("Person", {})
    except MissingRequiredAttribute as e:
        print(e.attribute, e.type_name)
"""

from __future__ import annotations

from collections.abc import Iterable


class ClassmiteError(Exception):
    """Base class for all engine errors."""

    pass


class RecursiveInheritance(ClassmiteError):
    """Raised when a type (or role) would end up extending itself."""

    def __init__(self, name: str, parent: str):
        self.name = name
        self.parent = parent
        if name == parent:
            message = f"Recursive inheritance detected: {name} cannot extend itself"
        else:
            message = (
                f"Recursive inheritance detected: {name} cannot extend {parent} "
                f"because {parent} already inherits from {name}"
            )
        super().__init__(message)


class TypeLoadFailure(ClassmiteError):
    """Raised when a type name cannot be resolved to a declared type."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Type '{name}' is not declared"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ParentLoadFailure(TypeLoadFailure):
    """Raised when a declared parent cannot be resolved."""

    def __init__(self, child: str, parent: str, reason: str = ""):
        self.child = child
        self.parent = parent
        self.name = parent
        message = f"Failed to load parent '{parent}' for '{child}'"
        if reason:
            message = f"{message}: {reason}"
        ClassmiteError.__init__(self, message)


class InvalidAttributeOption(ClassmiteError):
    """Raised when an attribute is declared with an unsupported option key."""

    def __init__(self, attribute: str, owner: str, option: str, hint: str = ""):
        self.attribute = attribute
        self.owner = owner
        self.option = option
        message = f"Invalid attribute option '{option}' for '{attribute}' in {owner}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class AttributesNotSupported(ClassmiteError):
    """Raised when declaring an attribute on a type without attribute handling."""

    def __init__(self, type_name: str, attribute: str):
        self.type_name = type_name
        self.attribute = attribute
        super().__init__(
            f"Type '{type_name}' does not handle attributes; cannot declare '{attribute}'. "
            f"Declare it with attributes=True."
        )


class MissingRequiredAttribute(ClassmiteError):
    """Raised at construction when a required attribute ends up unset."""

    def __init__(self, attribute: str, type_name: str):
        self.attribute = attribute
        self.type_name = type_name
        super().__init__(f"Required attribute '{attribute}' not provided for type {type_name}")


class RoleLoadFailure(ClassmiteError):
    """Raised when a role name cannot be resolved to a declared role."""

    def __init__(self, role: str, reason: str = ""):
        self.role = role
        message = f"Failed to load role '{role}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(f"{message}. Make sure it is declared with declare_role() or @role.")


class RoleExclusionViolation(ClassmiteError):
    """Raised when composing two roles where one excludes the other."""

    def __init__(self, role: str, excluded: str, type_name: str):
        self.role = role
        self.excluded = excluded
        self.type_name = type_name
        super().__init__(
            f"Role '{role}' cannot be composed with role '{excluded}' in '{type_name}'. "
            f"Check the excludes declaration in {role}"
        )


class MissingRequiredBehavior(ClassmiteError):
    """Raised when a role's required behaviors are not provided by the target type."""

    def __init__(self, role: str, type_name: str, missing: Iterable[str]):
        self.role = role
        self.type_name = type_name
        self.missing = tuple(missing)
        super().__init__(
            f"Role '{role}' requires behavior(s) that are missing in '{type_name}': "
            + ", ".join(self.missing)
        )


class BehaviorConflict(ClassmiteError):
    """Raised when two roles install the same behavior name on a type."""

    def __init__(self, behavior: str, roles: tuple[str, str], type_name: str):
        self.behavior = behavior
        self.roles = roles
        self.type_name = type_name
        super().__init__(self._message())

    def _message(self) -> str:
        first, second = self.roles
        return (
            f"Conflict: behavior '{self.behavior}' provided by both '{first}' and '{second}' "
            f"in type '{self.type_name}'. Use aliasing or excludes to resolve."
        )


class AliasedBehaviorConflict(BehaviorConflict):
    """Raised when a conflict only exists because of an alias."""

    def __init__(self, behavior: str, alias: str, roles: tuple[str, str], type_name: str):
        self.alias = alias
        super().__init__(behavior, roles, type_name)

    def _message(self) -> str:
        first, second = self.roles
        return (
            f"Behavior conflict: {self.behavior} (aliased to {self.alias}) between "
            f"{first} and {second} in type {self.type_name}. Use aliasing or excludes to resolve."
        )


class ClassmiteWarning(UserWarning):
    """Base class for non-fatal engine notices."""

    pass


class RoleReapplicationWarning(ClassmiteWarning):
    """Role is already applied to the type; the application was a no-op."""

    pass


class RoleAttributesIgnoredWarning(ClassmiteWarning):
    """Role attributes were dropped because the type does not handle attributes."""

    pass

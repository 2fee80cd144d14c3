"""Registry: process-wide store of types, roles, and their derived layouts.

Usage:
    registry = Registry()

    registry.declare_type("Animal")
    registry.declare_attribute("Animal", "species", required=True)
    registry.declare_type("Dog")
    registry.add_parent("Dog", "Animal")

    dog = registry.new("Dog", species="Canine")
    dog.species()  # "Canine"

Mutations (declarations, parent links, role application) run under one
re-entrant lock. Readers go through layout(), which returns an immutable
TypeLayout snapshot; invalidation drops snapshots for a type and all of its
descendants in one step, and the next reader rebuilds them under the lock.
"""

from __future__ import annotations

import importlib
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from contextlib import AbstractContextManager, nullcontext
from functools import partial
from typing import Any

from classmite.config import EngineSettings
from classmite.core.attribute import AttributeSpec, make_accessor
from classmite.core.graph import descendants, inherits_from, linearize
from classmite.core.role import RoleClosure, RoleDescriptor, role_closure
from classmite.core.type import BehaviorOrigin, OriginKind, TypeDescriptor, TypeLayout
from classmite.core.types import UNSET, Behavior, InitHook
from classmite.errors import (
    AttributesNotSupported,
    ClassmiteError,
    ParentLoadFailure,
    RecursiveInheritance,
    RoleLoadFailure,
    TypeLoadFailure,
)
from classmite.registry.instance import Instance, type_of

logger = logging.getLogger(__name__)


def resolve_name(obj: Any) -> str:
    """Name for a type/role given as a string, handle, or instance.

    Raises:
        TypeError: If ``obj`` is none of those.
    """
    if isinstance(obj, str):
        return obj
    if isinstance(obj, Instance):
        return type_of(obj)
    name = getattr(obj, "__classmite_name__", None)
    if isinstance(name, str):
        return name
    raise TypeError(f"Expected a type or role name, handle, or instance, got {obj!r}")


def _module_candidates(name: str) -> list[str]:
    """Modules that may declare ``name``: the name itself, then its package."""
    if not all(part.isidentifier() for part in name.split(".")):
        return []
    candidates = [name]
    package, _, _ = name.rpartition(".")
    if package:
        candidates.append(package)
    return candidates


class Registry:
    """Process-local registry of type and role descriptors.

    Args:
        settings: Engine configuration. Defaults to EngineSettings() which
            reads CLASSMITE_* environment variables.
    """

    def __init__(self, settings: EngineSettings | None = None):
        """Initialize empty registry."""
        self.settings = settings or EngineSettings()
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self.settings.thread_safe else nullcontext()
        )
        self._types: dict[str, TypeDescriptor] = {}
        self._roles: dict[str, RoleDescriptor] = {}
        # Same list objects as TypeDescriptor.parents, keyed for graph functions
        self._parents: dict[str, list[str]] = {}
        self._children: dict[str, set[str]] = {}
        self._layouts: dict[str, TypeLayout] = {}
        self._closures: dict[str, RoleClosure] = {}
        self._origins: dict[tuple[str, str], str | None] = {}

        # Late import to avoid circular dependency
        from classmite.registry.composition import RoleComposer

        self._composer = RoleComposer(self)

    @property
    def lock(self) -> AbstractContextManager[Any]:
        """The mutation lock. Hold it to batch several declarations atomically."""
        return self._lock

    # -- Types -------------------------------------------------------------

    def declare_type(
        self, name: str, *, attributes: bool = True, cloneable: bool = False
    ) -> TypeDescriptor:
        """Declare a type, or reopen it if it already exists.

        Args:
            name: Type name.
            attributes: Whether the type handles attributes (declared fields and
                role attributes). Only honored on first declaration.
            cloneable: Install a builtin ``clone`` behavior unless the type
                authors one.

        Returns:
            The type's descriptor.
        """
        with self._lock:
            desc = self._types.get(name)
            if desc is None:
                desc = TypeDescriptor(name=name, handles_attributes=attributes)
                desc.install("does", self._does_behavior, BehaviorOrigin(OriginKind.BUILTIN))
                self._types[name] = desc
                self._parents[name] = desc.parents
                logger.debug(f"Declared type: {name}")
            if cloneable and "clone" not in desc.behaviors:
                desc.install("clone", self._clone_behavior, BehaviorOrigin(OriginKind.BUILTIN))
                self._invalidate(name)
            return desc

    def is_type(self, name: Any) -> bool:
        """Check if ``name`` is a declared type."""
        return resolve_name(name) in self._types

    def get_type(self, name: Any) -> TypeDescriptor:
        """Descriptor for a declared type (autoloading it if needed).

        Raises:
            TypeLoadFailure: If the type cannot be resolved.
        """
        type_name = resolve_name(name)
        desc = self._types.get(type_name)
        if desc is not None:
            return desc
        with self._lock:
            self._load(type_name, self._types, partial(TypeLoadFailure, type_name))
            return self._types[type_name]

    def add_parent(self, name: Any, *parents: Any) -> None:
        """Append parents to a type's ordered parent list.

        Already-linked parents are skipped, so repeated calls are idempotent.

        Raises:
            RecursiveInheritance: If a parent is the type itself or one of its
                descendants.
            ParentLoadFailure: If a parent is not a declared type and cannot be
                autoloaded.
        """
        type_name = resolve_name(name)
        with self._lock:
            desc = self.get_type(type_name)
            try:
                for parent in map(resolve_name, parents):
                    if parent == type_name:
                        raise RecursiveInheritance(type_name, parent)
                    self._load(parent, self._types, partial(ParentLoadFailure, type_name, parent))
                    if parent in desc.parents:
                        continue
                    if inherits_from(parent, type_name, self._parents):
                        raise RecursiveInheritance(type_name, parent)
                    desc.parents.append(parent)
                    self._children.setdefault(parent, set()).add(type_name)
                    logger.debug(f"Linked parent: {type_name} -> {parent}")
            finally:
                self._invalidate(type_name)

    def declare_attribute(self, type_name: Any, attribute: str, **options: Any) -> AttributeSpec:
        """Declare (or redeclare) a field on a type.

        Installs an accessor behavior named ``attribute`` unless the type
        already has a behavior of that name. Redeclaring replaces the spec.

        Args:
            type_name: Type to declare on.
            attribute: Field name.
            **options: ``required`` and/or ``default``.

        Raises:
            InvalidAttributeOption: On any other option key.
            AttributesNotSupported: If the type was declared with attributes=False.
        """
        name = resolve_name(type_name)
        spec = AttributeSpec.from_options(attribute, name, options)
        with self._lock:
            desc = self.get_type(name)
            if not desc.handles_attributes:
                raise AttributesNotSupported(name, attribute)
            desc.attributes[attribute] = spec
            if attribute not in desc.behaviors:
                desc.install(attribute, make_accessor(attribute), BehaviorOrigin(OriginKind.ACCESSOR))
            self._invalidate(name)
        return spec

    def define_behavior(self, type_name: Any, name: str, fn: Behavior) -> None:
        """Author a behavior directly on a type. Replaces any existing entry."""
        if not callable(fn):
            raise TypeError(f"Behavior '{name}' must be callable, got {fn!r}")
        target = resolve_name(type_name)
        with self._lock:
            self.get_type(target).install(name, fn, BehaviorOrigin(OriginKind.AUTHORED))
            self._invalidate(target)

    def set_init_hook(self, type_name: Any, hook: InitHook | None) -> None:
        """Set the type's initialization hook, called as ``hook(instance, raw_args)``."""
        if hook is not None and not callable(hook):
            raise TypeError(f"Initialization hook must be callable, got {hook!r}")
        target = resolve_name(type_name)
        with self._lock:
            self.get_type(target).init_hook = hook
            self._invalidate(target)

    # -- Roles -------------------------------------------------------------

    def declare_role(self, name: str) -> RoleDescriptor:
        """Declare a role, or reopen it if it already exists."""
        with self._lock:
            desc = self._roles.get(name)
            if desc is None:
                desc = RoleDescriptor(name=name)
                self._roles[name] = desc
                logger.debug(f"Declared role: {name}")
            return desc

    def is_role(self, name: Any) -> bool:
        """Check if ``name`` is a declared role."""
        return resolve_name(name) in self._roles

    def get_role(self, name: Any) -> RoleDescriptor:
        """Descriptor for a declared role (autoloading it if needed).

        Raises:
            RoleLoadFailure: If the role cannot be resolved.
        """
        role_name = resolve_name(name)
        desc = self._roles.get(role_name)
        if desc is not None:
            return desc
        with self._lock:
            self._load(role_name, self._roles, partial(RoleLoadFailure, role_name))
            return self._roles[role_name]

    def require_behaviors(self, role: Any, *names: str) -> None:
        """Add behavior names every consuming type must provide."""
        self._update_role(role, lambda desc: _extend_unique(desc.required, names))

    def exclude_roles(self, role: Any, *names: Any) -> None:
        """Declare roles that can never be composed alongside ``role``."""
        excluded = [resolve_name(n) for n in names]
        self._update_role(role, lambda desc: _extend_unique(desc.excluded, excluded))

    def consume_roles(self, role: Any, *names: Any) -> None:
        """Compose other roles into ``role``.

        Requirements, exclusions, attributes and behaviors of consumed roles are
        merged when ``role`` is applied to a type; nothing is validated here.

        Raises:
            RecursiveInheritance: If this creates a consumption cycle.
            RoleLoadFailure: If a consumed role cannot be resolved.
        """
        role_name = resolve_name(role)
        with self._lock:
            desc = self.get_role(role_name)
            added: list[str] = []
            for other in map(resolve_name, names):
                if other == role_name:
                    raise RecursiveInheritance(role_name, other)
                self.get_role(other)
                if other not in desc.consumed:
                    desc.consumed.append(other)
                    added.append(other)
            self._closures.clear()
            try:
                self.closure(role_name)
            except RecursiveInheritance:
                for other in added:
                    desc.consumed.remove(other)
                raise

    def provide_behavior(self, role: Any, name: str, fn: Behavior) -> None:
        """Add a behavior the role installs on consuming types."""
        if not callable(fn):
            raise TypeError(f"Behavior '{name}' must be callable, got {fn!r}")
        self._update_role(role, lambda desc: desc.behaviors.__setitem__(name, fn))

    def declare_role_attribute(self, role: Any, attribute: str, **options: Any) -> AttributeSpec:
        """Declare a field the role adds to consuming types that handle attributes."""
        role_name = resolve_name(role)
        spec = AttributeSpec.from_options(attribute, role_name, options)
        self._update_role(role_name, lambda desc: desc.attributes.__setitem__(attribute, spec))
        return spec

    def closure(self, role: Any) -> RoleClosure:
        """Role flattened with everything it consumes (cached)."""
        role_name = resolve_name(role)
        cached = self._closures.get(role_name)
        if cached is not None:
            return cached
        with self._lock:
            self.get_role(role_name)
            result = role_closure(role_name, self._roles)
            self._closures[role_name] = result
            return result

    def _update_role(self, role: Any, mutate: Callable[[RoleDescriptor], Any]) -> None:
        with self._lock:
            mutate(self.get_role(role))
            self._closures.clear()

    # -- Composition -------------------------------------------------------

    def apply_roles(self, type_name: Any, *specs: Any) -> None:
        """Compose roles into a type as one batch.

        Each spec is a role name/handle or ``{"role": name, "alias": {old: new}}``.
        All checks (exclusions, requirements, conflicts) run for the whole batch
        before anything is installed.
        """
        self._composer.apply(resolve_name(type_name), specs, batch=True)

    def apply_role_now(self, target: Any, *specs: Any) -> None:
        """Compose roles one at a time into a type (or an instance's type)."""
        self._composer.apply(resolve_name(target), specs, batch=False)

    # -- Queries -----------------------------------------------------------

    def does(self, target: Any, role: Any) -> bool:
        """Check if a type, instance, or role composes ``role``.

        True when the role, or a role that consumes it, was applied to the type
        or any of its ancestors.
        """
        name = resolve_name(target)
        role_name = resolve_name(role)
        if name in self._types:
            return role_name in self.layout(name).roles
        if name in self._roles:
            return role_name in self.closure(name).members
        return False

    def applied_roles(self, target: Any) -> list[str]:
        """Roles applied directly to the type, in application order."""
        return self.get_type(target).role_names()

    def can(self, target: Any, behavior: str) -> bool:
        """Check if a type or instance resolves ``behavior``."""
        return behavior in self.layout(resolve_name(target)).behaviors

    def behavior_origin(self, target: Any, behavior: str) -> str | None:
        """Type or role that supplied the behavior ``target`` resolves, if any."""
        name = resolve_name(target)
        key = (name, behavior)
        cached = self._origins.get(key, UNSET)
        if cached is not UNSET:
            return cached
        with self._lock:
            layout = self.layout(name)
            origin: str | None = None
            for owner in reversed(layout.linearization):
                entry = self._types[owner].origins.get(behavior)
                if entry is not None:
                    origin = entry.role if entry.kind is OriginKind.ROLE else owner
                    break
            self._origins[key] = origin
            return origin

    def linearize(self, target: Any) -> tuple[str, ...]:
        """Ancestor-first order of the type, itself last."""
        return self.layout(resolve_name(target)).linearization

    def inherits_from(self, target: Any, ancestor: Any) -> bool:
        """Check if ``ancestor`` is a direct or indirect parent of the type."""
        return inherits_from(resolve_name(target), resolve_name(ancestor), self._parents)

    def descendants(self, target: Any) -> set[str]:
        """Every type that inherits from ``target``."""
        return descendants(resolve_name(target), self._children)

    def merged_attributes(self, target: Any) -> Mapping[str, AttributeSpec]:
        """Attributes across the ancestry (descendant wins), then role attributes."""
        return self.layout(resolve_name(target)).attributes

    def types(self) -> list[str]:
        return list(self._types)

    def roles(self) -> list[str]:
        return list(self._roles)

    # -- Construction ------------------------------------------------------

    def new(self, type_name: Any, args: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Instance:
        """Build an instance from a mapping and/or keyword arguments.

        Raises:
            MissingRequiredAttribute: If a required field is unset after defaults.
            TypeLoadFailure: If the type is not declared.
        """
        from classmite.registry.construction import construct

        raw = dict(args) if args else {}
        raw.update(kwargs)
        return construct(self, resolve_name(type_name), raw)

    def clone(self, instance: Instance, /, **overrides: Any) -> Instance:
        """New instance of the same type from ``instance``'s fields plus overrides."""
        from classmite.registry.construction import clone

        return clone(self, instance, overrides)

    def _clone_behavior(self, instance: Instance, /, **overrides: Any) -> Instance:
        return self.clone(instance, **overrides)

    def _does_behavior(self, instance: Instance, role: Any) -> bool:
        return self.does(instance, role)

    # -- Layout cache ------------------------------------------------------

    def layout(self, type_name: str) -> TypeLayout:
        """Cached derived view of a type. Built under the lock on first use."""
        cached = self._layouts.get(type_name)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._layouts.get(type_name)
            if cached is None:
                cached = self._build_layout(type_name)
                self._layouts[type_name] = cached
            return cached

    def _build_layout(self, type_name: str) -> TypeLayout:
        self.get_type(type_name)
        order = linearize(type_name, self._parents)
        descs = [self._types[name] for name in order]

        attributes: dict[str, AttributeSpec] = {}
        behaviors: dict[str, Behavior] = {}
        roles: set[str] = set()
        for desc in descs:
            attributes.update(desc.attributes)
            behaviors.update(desc.behaviors)
            for record in desc.applied:
                roles.update(record.members)
        # Role attributes never override declared ones; nearer roles win
        for desc in reversed(descs):
            for name, spec in desc.role_attributes.items():
                attributes.setdefault(name, spec)

        hooks = tuple(desc.init_hook for desc in descs if desc.init_hook is not None)
        return TypeLayout.build(
            name=type_name,
            linearization=order,
            attributes=attributes,
            hooks=hooks,
            behaviors=behaviors,
            roles=frozenset(roles),
        )

    def _invalidate(self, type_name: str) -> None:
        """Drop cached layouts and origins for a type and all of its descendants."""
        affected = descendants(type_name, self._children)
        affected.add(type_name)
        for name in affected:
            self._layouts.pop(name, None)
        for key in [k for k in self._origins if k[0] in affected]:
            del self._origins[key]
        logger.debug(f"Invalidated layouts: {sorted(affected)}")

    # -- Loading -----------------------------------------------------------

    def _load(
        self, name: str, table: Mapping[str, Any], failure: Callable[[str], ClassmiteError]
    ) -> None:
        """Make sure ``name`` is in ``table``, autoloading it if allowed.

        Raises:
            ClassmiteError: ``failure(reason)``, chained to the import error if
                a candidate module failed while importing.
        """
        if name in table:
            return
        error = self._autoload(name, table)
        if name not in table:
            raise failure(str(error) if error is not None else "") from error

    def _autoload(self, name: str, table: Mapping[str, Any]) -> Exception | None:
        """Import the modules expected to declare ``name``.

        A candidate module that simply does not exist is skipped. Any other
        failure while importing is kept and returned (the first one), so the
        caller can report it when ``name`` is still missing.
        """
        if not self.settings.autoload:
            return None
        error: Exception | None = None
        for module in _module_candidates(name):
            try:
                importlib.import_module(module)
            except Exception as e:
                if isinstance(e, ModuleNotFoundError) and _names_module(e, module):
                    logger.debug(f"No module {module} to autoload {name}")
                else:
                    logger.debug(f"Autoload of {module} for {name} failed: {e!r}")
                    error = error or e
                continue
            if name in table:
                logger.debug(f"Autoloaded {name} from {module}")
                return None
        return error


def _extend_unique(target: list[str], items: Iterable[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


def _names_module(error: ModuleNotFoundError, module: str) -> bool:
    """Check if ``error`` is about ``module`` (or one of its packages) being absent."""
    missing = error.name
    return missing is not None and (module == missing or module.startswith(f"{missing}."))

"""Tests for the module-level API and autoloading declarations from modules."""

import sys
import textwrap

import pytest

import classmite
from classmite import ParentLoadFailure, RoleLoadFailure, api


@pytest.fixture
def plugin_package(tmp_path, monkeypatch):
    """Importable package whose modules declare dotted names in the global registry."""
    package = tmp_path / "cm_plugins"
    package.mkdir()
    (package / "__init__.py").write_text("")
    (package / "shapes.py").write_text(
        textwrap.dedent(
            """
            from classmite import api

            api.declare_type("cm_plugins.shapes.Shape")
            api.declare_attribute("cm_plugins.shapes.Shape", "sides", required=True)
            """
        )
    )
    (package / "roles.py").write_text(
        textwrap.dedent(
            """
            from classmite import api

            api.declare_role("cm_plugins.roles.Describable")
            api.provide_behavior(
                "cm_plugins.roles.Describable",
                "describe",
                lambda self: f"{self.sides()} sides",
            )
            """
        )
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    yield package
    for module in ("cm_plugins", "cm_plugins.shapes", "cm_plugins.roles"):
        sys.modules.pop(module, None)


def test_module_functions_use_global_registry(global_registry):
    classmite.declare_type("Point")
    classmite.declare_attribute("Point", "x", default=0)
    classmite.define_behavior("Point", "moved", lambda self, dx: self.x() + dx)

    point = classmite.new("Point", x=2)

    assert point.moved(3) == 5
    assert api.get_registry() is global_registry
    assert global_registry.types() == ["Point"]


def test_reset_registry_starts_empty(global_registry):
    classmite.declare_type("Temp")

    fresh = classmite.reset_registry()

    assert fresh is api.get_registry()
    assert fresh.types() == []
    assert global_registry.is_type("Temp")


def test_module_level_clone_uses_owning_registry(global_registry):
    classmite.declare_type("Pair")
    pair = classmite.new("Pair", left=1, right=2)

    copy = classmite.clone(pair, right=3)

    assert classmite.fields_of(copy) == {"left": 1, "right": 3}


def test_role_queries_through_module_api(global_registry):
    classmite.declare_role("Walks")
    classmite.provide_behavior("Walks", "walk", lambda self: "walking")
    classmite.declare_type("Dog")
    classmite.apply_roles("Dog", "Walks")

    dog = classmite.new("Dog")

    assert classmite.is_role("Walks")
    assert classmite.does(dog, "Walks")
    assert classmite.applied_roles("Dog") == ["Walks"]
    assert classmite.can(dog, "walk")
    assert classmite.behavior_origin("Dog", "walk") == "Walks"


def test_parent_autoloaded_from_module(global_registry, plugin_package):
    classmite.declare_type("Square")
    classmite.add_parent("Square", "cm_plugins.shapes.Shape")

    square = classmite.new("Square", sides=4)

    assert square.sides() == 4
    assert classmite.linearize("Square") == ("cm_plugins.shapes.Shape", "Square")


def test_role_autoloaded_from_module(global_registry, plugin_package):
    classmite.declare_type("Triangle")
    classmite.declare_attribute("Triangle", "sides", default=3)

    classmite.apply_roles("Triangle", "cm_plugins.roles.Describable")

    assert classmite.new("Triangle").describe() == "3 sides"


def test_unresolvable_parent_and_role(global_registry, plugin_package):
    classmite.declare_type("Orphan")

    with pytest.raises(ParentLoadFailure):
        classmite.add_parent("Orphan", "cm_plugins.shapes.Missing")
    with pytest.raises(RoleLoadFailure):
        classmite.apply_roles("Orphan", "cm_plugins.nowhere.Role")
    with pytest.raises(RoleLoadFailure):
        classmite.apply_roles("Orphan", "not a module name")


@pytest.fixture
def broken_package(tmp_path, monkeypatch):
    """Packages that fail while being imported."""
    exploding = tmp_path / "cm_exploding"
    exploding.mkdir()
    (exploding / "__init__.py").write_text("raise RuntimeError('boom')\n")
    missing_dep = tmp_path / "cm_missing_dep"
    missing_dep.mkdir()
    (missing_dep / "__init__.py").write_text("import cm_no_such_dependency\n")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield tmp_path
    for module in ("cm_exploding", "cm_missing_dep"):
        sys.modules.pop(module, None)


def test_role_module_failing_on_import(global_registry, broken_package):
    """CRITICAL: an import-time error surfaces as a load failure with its cause."""
    classmite.declare_type("T")

    with pytest.raises(RoleLoadFailure, match="boom") as exc:
        classmite.apply_roles("T", "cm_exploding.Thing")

    assert exc.value.role == "cm_exploding.Thing"
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert classmite.applied_roles("T") == []


def test_parent_module_failing_on_import(global_registry, broken_package):
    classmite.declare_type("Child")

    with pytest.raises(ParentLoadFailure, match="boom") as exc:
        classmite.add_parent("Child", "cm_exploding.Base")

    assert exc.value.parent == "cm_exploding.Base"
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert classmite.linearize("Child") == ("Child",)


def test_missing_dependency_of_candidate_module_is_reported(global_registry, broken_package):
    classmite.declare_type("T")

    with pytest.raises(RoleLoadFailure, match="cm_no_such_dependency") as exc:
        classmite.apply_roles("T", "cm_missing_dep.Role")

    assert isinstance(exc.value.__cause__, ModuleNotFoundError)


def test_absent_module_has_no_cause(global_registry):
    classmite.declare_type("T")

    with pytest.raises(RoleLoadFailure) as exc:
        classmite.apply_roles("T", "cm_absent_package.Role")

    assert exc.value.__cause__ is None

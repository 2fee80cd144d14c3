"""Tests for role closures and the conflict scan."""

import pytest

from classmite import AliasedBehaviorConflict, BehaviorConflict, RecursiveInheritance
from classmite.core.role import (
    Claim,
    Conflict,
    RoleDescriptor,
    RoleSpec,
    find_conflicts,
    normalize_role_specs,
    role_closure,
    select_conflict,
)


def _fn(self):
    return None


def test_normalize_role_specs_accepts_all_forms():
    specs = normalize_role_specs(
        ["A", {"role": "B", "alias": {"log": "file_log"}}, RoleSpec("C")]
    )

    assert specs == (
        RoleSpec("A"),
        RoleSpec("B", {"log": "file_log"}),
        RoleSpec("C"),
    )
    assert specs[1].installed_name("log") == "file_log"
    assert specs[1].installed_name("other") == "other"


def test_normalize_role_specs_requires_role_key():
    with pytest.raises(TypeError, match="missing the 'role' key"):
        normalize_role_specs([{"alias": {"a": "b"}}])


def test_closure_merges_consumed_roles():
    roles = {
        "Outer": RoleDescriptor("Outer", required=["x"], consumed=["Inner"], behaviors={"m": _fn}),
        "Inner": RoleDescriptor(
            "Inner", required=["y", "x"], excluded=["Other"], behaviors={"m": _fn, "n": _fn}
        ),
    }

    closure = role_closure("Outer", roles)

    assert closure.members == ("Outer", "Inner")
    assert closure.required == ("x", "y")
    assert closure.excluded == ("Other",)
    # Own behavior wins over consumed one of the same name
    assert [(b.provider, b.name) for b in closure.behaviors] == [("Outer", "m"), ("Inner", "n")]


def test_closure_detects_consumption_cycle():
    roles = {
        "A": RoleDescriptor("A", consumed=["B"]),
        "B": RoleDescriptor("B", consumed=["A"]),
    }

    with pytest.raises(RecursiveInheritance):
        role_closure("A", roles)


def test_plain_conflict_between_two_roles():
    claims = [Claim("Zeta", "m", "m"), Claim("Alpha", "m", "m")]

    conflicts = find_conflicts(claims, existing={}, type_wins=set())

    assert conflicts == [Conflict("m", ("Alpha", "Zeta"))]


def test_type_authored_names_are_never_conflicts():
    claims = [Claim("A", "m", "m"), Claim("B", "m", "m")]

    assert find_conflicts(claims, existing={}, type_wins={"m"}) == []


def test_same_role_is_redefinition_not_conflict():
    existing = {"m": Claim("A", "m", "m")}

    assert find_conflicts([Claim("A", "m", "m")], existing, type_wins=set()) == []


def test_alias_conflict_names_original_and_alias():
    existing = {"common": Claim("Basic", "common", "common")}
    claims = [Claim("Conflicting", "exclusive", "common")]

    conflicts = find_conflicts(claims, existing, type_wins=set())

    assert conflicts == [Conflict("exclusive", ("Basic", "Conflicting"), alias="common")]


def test_existing_alias_makes_conflict_alias_kind():
    existing = {"file_log": Claim("FileLog", "log", "file_log")}
    claims = [Claim("Other", "file_log", "file_log")]

    (conflict,) = find_conflicts(claims, existing, type_wins=set())

    assert conflict.is_alias
    assert conflict.behavior == "log"
    assert conflict.alias == "file_log"


def test_select_prefers_alias_conflict():
    plain = Conflict("m", ("A", "B"))
    aliased = Conflict("n", ("A", "C"), alias="m2")

    assert select_conflict([plain, aliased]) is aliased
    assert select_conflict([plain]) is plain
    assert select_conflict([]) is None


def test_conflict_to_error_kinds():
    plain = Conflict("m", ("A", "B")).to_error("T")
    aliased = Conflict("n", ("A", "C"), alias="m").to_error("T")

    assert type(plain) is BehaviorConflict
    assert isinstance(aliased, AliasedBehaviorConflict)
    assert "(aliased to m)" in str(aliased)

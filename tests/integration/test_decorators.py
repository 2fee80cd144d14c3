"""End-to-end tests for the class-body front-end."""

import pytest

from classmite import (
    BehaviorConflict,
    InvalidAttributeOption,
    MissingRequiredAttribute,
    MissingRequiredBehavior,
    RoleHandle,
    TypeHandle,
    define,
    has,
    role,
)


@pytest.fixture
def people(registry):
    @role(requires=("to_string",), registry=registry)
    class Printable:
        def render(self):
            return f"<{self.to_string()}>"

    @define(with_=(Printable,), registry=registry)
    class Person:
        first = has(required=True)
        last = has(required=True)
        age = has(default=0)

        def __build__(self, args):
            self["full_name"] = f"{self.first()} {self.last()}"

        def to_string(self):
            return self["full_name"]

    @define(extends=Person, registry=registry)
    class Employee:
        id = has(required=True)

    return Printable, Person, Employee


def test_handles_are_returned(people):
    printable, person, employee = people

    assert isinstance(printable, RoleHandle)
    assert isinstance(person, TypeHandle)
    assert person.name == "Person"
    assert employee.linearization == ("Person", "Employee")


def test_constructing_through_handle(people):
    _, person, _ = people

    ada = person(first="Ada", last="Lovelace")

    assert ada.render() == "<Ada Lovelace>"
    assert ada.age() == 0
    assert ada.does("Printable")


def test_subtype_inherits_everything(people):
    printable, person, employee = people

    worker = employee({"first": "Grace", "last": "Hopper"}, id=1)

    assert worker.render() == "<Grace Hopper>"
    assert worker.id() == 1
    assert employee.does(printable)
    assert employee.applied_roles == []
    assert person.applied_roles == ["Printable"]


def test_subtype_requires_inherited_attributes(people):
    _, _, employee = people

    with pytest.raises(MissingRequiredAttribute, match="'first'"):
        employee(last="Hopper", id=1)


def test_bare_decorator_forms(registry, global_registry):
    @define
    class Bare:
        size = has(default=3)

    @define()
    class Parenthesized:
        pass

    assert Bare().size() == 3
    assert Parenthesized.can("does")
    assert not Parenthesized().does("Anything")
    assert global_registry.types() == ["Bare", "Parenthesized"]
    assert registry.types() == []


def test_explicit_name_and_plain_type(registry):
    @define(name="app.Counter", attributes=False, registry=registry)
    class Counter:
        def bump(self):
            self["n"] = self["n"] + 1 if "n" in self else 1
            return self["n"]

    counter = Counter()

    assert counter.bump() == 1
    assert counter.bump() == 2
    assert registry.is_type("app.Counter")
    assert not registry.get_type("app.Counter").handles_attributes


def test_role_attributes_and_consumption(registry):
    @role(registry=registry)
    class Timestamped:
        created = has(default=lambda inst, args: "now")

    @role(consumes=Timestamped, registry=registry)
    class Audited:
        def audit(self):
            return f"created {self.created()}"

    @define(with_=Audited, registry=registry)
    class Record:
        pass

    assert Record().audit() == "created now"
    assert Record.does("Timestamped")


def test_aliases_in_class_body(registry):
    @role(registry=registry)
    class FileLog:
        def log(self, msg):
            return f"file: {msg}"

    @role(registry=registry)
    class DebugLog:
        def log(self, msg):
            return f"debug: {msg}"

    @define(
        with_=(
            {"role": FileLog, "alias": {"log": "file_log"}},
            {"role": DebugLog, "alias": {"log": "debug_log"}},
        ),
        registry=registry,
    )
    class Service:
        pass

    service = Service()
    assert service.file_log("a") == "file: a"
    assert service.debug_log("b") == "debug: b"


def test_conflict_surfaces_at_decoration(registry):
    @role(registry=registry)
    class A:
        def m(self):
            return "a"

    @role(registry=registry)
    class B:
        def m(self):
            return "b"

    with pytest.raises(BehaviorConflict):

        @define(with_=(A, B), registry=registry)
        class T:
            pass


def test_missing_requirement_surfaces_at_decoration(registry):
    @role(requires="identify", registry=registry)
    class NeedsId:
        pass

    with pytest.raises(MissingRequiredBehavior):

        @define(with_=NeedsId, registry=registry)
        class T:
            pass


def test_bad_attribute_option_surfaces_at_decoration(registry):
    with pytest.raises(InvalidAttributeOption, match="required=True"):

        @define(registry=registry)
        class T:
            name = has(require=True)


def test_runtime_role_application_through_handle(registry):
    @role(registry=registry)
    class Greeter:
        def greet(self):
            return "hi"

    @define(registry=registry)
    class Plain:
        pass

    instance = Plain()
    Plain.apply_role(Greeter)

    assert instance.greet() == "hi"
    assert Plain.applied_roles == ["Greeter"]


def test_cloneable_type(registry):
    @define(cloneable=True, registry=registry)
    class Point:
        x = has(default=0)
        y = has(default=0)

    moved = Point(x=1, y=2).clone(x=10)

    assert (moved.x(), moved.y()) == (10, 2)

"""Tests for linearization and graph reachability.

Critical Invariants:
- Every ancestor appears exactly once
- Every name appears after all of its ancestors
- Declared parent order decides sibling order
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from classmite.core.graph import descendants, inherits_from, linearize


@pytest.mark.parametrize(
    ("parents_of_d", "expected"),
    [
        (["B", "C"], ("A", "B", "C", "D")),
        (["C", "B"], ("A", "C", "B", "D")),
    ],
)
def test_diamond_linearization(parents_of_d, expected):
    """CRITICAL: diamonds never duplicate or reorder the shared ancestor."""
    parents = {"B": ["A"], "C": ["A"], "D": parents_of_d}

    assert linearize("D", parents) == expected


def test_single_type_is_its_own_linearization():
    assert linearize("A", {}) == ("A",)


def test_deep_chain_does_not_recurse():
    depth = 5000
    parents = {f"T{i}": [f"T{i - 1}"] for i in range(1, depth)}

    order = linearize(f"T{depth - 1}", parents)

    assert order[0] == "T0"
    assert len(order) == depth


def test_inherits_from_is_transitive():
    parents = {"B": ["A"], "C": ["B"]}

    assert inherits_from("C", "A", parents)
    assert not inherits_from("A", "C", parents)
    assert not inherits_from("A", "A", parents)


def test_descendants_follow_children():
    children = {"A": {"B", "C"}, "B": {"D"}, "C": {"D"}}

    assert descendants("A", children) == {"B", "C", "D"}
    assert descendants("D", children) == set()


@st.composite
def dag_strategy(draw):
    """Random DAG: node i may only have parents with a smaller index."""
    size = draw(st.integers(min_value=1, max_value=12))
    parents = {}
    for i in range(size):
        candidates = [f"N{j}" for j in range(i)]
        if candidates:
            chosen = draw(st.lists(st.sampled_from(candidates), unique=True, max_size=3))
        else:
            chosen = []
        parents[f"N{i}"] = chosen
    return parents


def _ancestors(name, parents):
    result = set()
    stack = list(parents.get(name, ()))
    while stack:
        current = stack.pop()
        if current not in result:
            result.add(current)
            stack.extend(parents.get(current, ()))
    return result


@given(parents=dag_strategy())
def test_linearization_contains_each_ancestor_once(parents):
    """PROPERTY: the order is exactly {self} ∪ ancestors, without duplicates."""
    target = max(parents, key=lambda n: int(n[1:]))

    order = linearize(target, parents)

    assert len(order) == len(set(order))
    assert set(order) == _ancestors(target, parents) | {target}
    assert order[-1] == target


@given(parents=dag_strategy())
def test_linearization_places_ancestors_first(parents):
    """PROPERTY: every name comes after all of its own ancestors."""
    target = max(parents, key=lambda n: int(n[1:]))

    order = linearize(target, parents)
    position = {name: i for i, name in enumerate(order)}

    for name in order:
        for ancestor in _ancestors(name, parents):
            assert position[ancestor] < position[name]

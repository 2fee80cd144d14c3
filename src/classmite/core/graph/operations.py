"""Pure inheritance-graph operations over a ``name -> parents`` mapping.

The linearization is a depth-first, parents-before-self walk in declared
parent order. Each name appears once, after every one of its ancestors:

    A
   / \\
  B   C      linearize(D) == ("A", "B", "C", "D")   # D extends B, C
   \\ /       linearize(D) == ("A", "C", "B", "D")   # D extends C, B
    D
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping, Sequence


def linearize(name: str, parents: Mapping[str, Sequence[str]]) -> tuple[str, ...]:
    """Ancestor-first order for ``name``, ending with ``name`` itself.

    Iterative so deep hierarchies don't hit the recursion limit.

    Args:
        name: Type to linearize.
        parents: Direct parents per name, in declaration order. Missing
            names are treated as roots.

    Returns:
        Tuple of names, ancestors first, ``name`` last.
    """
    order: list[str] = []
    visited: set[str] = {name}
    # Each frame: (node, iterator over its parents)
    stack: list[tuple[str, Iterator[str]]] = [(name, iter(parents.get(name, ())))]
    while stack:
        node, pending = stack[-1]
        for parent in pending:
            if parent not in visited:
                visited.add(parent)
                stack.append((parent, iter(parents.get(parent, ()))))
                break
        else:
            stack.pop()
            order.append(node)
    return tuple(order)


def inherits_from(name: str, ancestor: str, parents: Mapping[str, Sequence[str]]) -> bool:
    """Check if ``ancestor`` is reachable from ``name`` through parent links."""
    seen: set[str] = set()
    queue = deque(parents.get(name, ()))
    while queue:
        current = queue.popleft()
        if current == ancestor:
            return True
        if current in seen:
            continue
        seen.add(current)
        queue.extend(parents.get(current, ()))
    return False


def descendants(name: str, children: Mapping[str, Sequence[str] | set[str]]) -> set[str]:
    """All names that inherit from ``name``, directly or indirectly."""
    result: set[str] = set()
    queue = deque(children.get(name, ()))
    while queue:
        current = queue.popleft()
        if current in result:
            continue
        result.add(current)
        queue.extend(children.get(current, ()))
    return result

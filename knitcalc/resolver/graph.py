"""
Component ordering derived from the dependency graph in reference data.

Each component lists the upstream components whose results it reads.
``topological_order`` performs a topological sort (Kahn's algorithm) on this
graph and returns component names in a valid calculation sequence. When
several components have no remaining dependencies, declaration order in
components.yaml is preserved as the tiebreaker, so the order is stable
across calls.
"""

from __future__ import annotations

from collections.abc import Mapping

from knitcalc.errors import ConfigurationError
from knitcalc.reference import ComponentEntry


def topological_order(components: Mapping[str, ComponentEntry]) -> list[str]:
    """Return component names in dependency order.

    Parameters
    ----------
    components:
        Component entries keyed by name, in declaration order.

    Returns
    -------
    list[str]
        Every component name, each after all of its upstream components.

    Raises
    ------
    ConfigurationError
        If the dependency graph contains a cycle.
    """
    names = list(components)
    name_index = {name: i for i, name in enumerate(names)}
    remaining: dict[str, set[str]] = {
        name: {dep for dep in entry.depends_on if dep in name_index}
        for name, entry in components.items()
    }

    result: list[str] = []
    placed: set[str] = set()

    while len(result) < len(names):
        available = sorted(
            (name for name in names if name not in placed and not remaining[name]),
            key=lambda n: name_index[n],
        )
        if not available:
            cycle_members = [name for name in names if name not in placed]
            raise ConfigurationError(
                f"Cycle detected in component dependency graph among: {cycle_members}"
            )

        node = available[0]
        result.append(node)
        placed.add(node)
        for deps in remaining.values():
            deps.discard(node)

    return result


def upstream_closure(names: set[str], components: Mapping[str, ComponentEntry]) -> set[str]:
    """*names* plus every component they transitively depend on."""
    closure = set(names)
    pending = list(names)
    while pending:
        entry = components.get(pending.pop())
        if entry is None:
            continue
        for dep in entry.depends_on:
            if dep not in closure:
                closure.add(dep)
                pending.append(dep)
    return closure

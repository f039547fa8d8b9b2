"""Expanding ``$CLAUDIUS_SECRET_X`` references between collected variables."""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import CircularDependencyError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SECRET_PREFIX = "CLAUDIUS_SECRET_"

_NAME = rf"{SECRET_PREFIX}[A-Z_][A-Z0-9_]*"
VARIABLE_REFERENCE = re.compile(rf"\$(?:\{{({_NAME})\}}|({_NAME}))")


@dataclass
class VariableNode:
    name: str
    raw_value: str
    dependencies: list[str] = field(default_factory=list)
    resolved_value: str | None = None


def referenced_names(value: str) -> list[str]:
    return [m.group(1) or m.group(2) for m in VARIABLE_REFERENCE.finditer(value)]


class VariableGraph:
    """Variables keyed by name; edges are the names each value refers to."""

    def __init__(self) -> None:
        self.nodes: dict[str, VariableNode] = {}

    def add_variable(self, name: str, value: str) -> None:
        self.nodes[name] = VariableNode(name, value, referenced_names(value))

    def topological_sort(self) -> list[str]:
        """Kahn's algorithm. Names outside the graph do not create edges."""
        in_degree = {name: 0 for name in self.nodes}
        dependents: dict[str, list[str]] = {name: [] for name in self.nodes}
        for name, node in self.nodes.items():
            for dep in node.dependencies:
                if dep in self.nodes:
                    dependents[dep].append(name)
                    in_degree[name] += 1

        queue = deque(sorted(name for name, degree in in_degree.items() if degree == 0))
        order = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for dependent in dependents[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(order) != len(self.nodes):
            raise CircularDependencyError(
                name for name, degree in in_degree.items() if degree > 0
            )
        return order

    def resolve_all(self, external: Mapping[str, str] | None = None) -> dict[str, str]:
        """Expand every variable; returns full names (prefix kept) to values."""
        external = external or {}
        order = self.topological_sort()
        logger.debug("Topological sort order: %s", order)
        for name in order:
            node = self.nodes[name]
            node.resolved_value = VARIABLE_REFERENCE.sub(
                lambda m, owner=name: self._lookup(m, owner, external), node.raw_value
            )
        return {name: node.resolved_value or "" for name, node in self.nodes.items()}

    def _lookup(self, match: re.Match[str], owner: str, external: Mapping[str, str]) -> str:
        ref = match.group(1) or match.group(2)
        node = self.nodes.get(ref)
        if node is not None and node.resolved_value is not None:
            return node.resolved_value
        if ref in external:
            return external[ref]
        logger.warning("Unresolved variable reference %s in %s", ref, owner)
        return match.group(0)


def expand_variables(
    variables: Mapping[str, str], external: Mapping[str, str] | None = None
) -> dict[str, str]:
    graph = VariableGraph()
    for name, value in variables.items():
        graph.add_variable(name, value)
    return graph.resolve_all(external)


def strip_prefix(variables: Mapping[str, str]) -> dict[str, str]:
    return {name.removeprefix(SECRET_PREFIX): value for name, value in variables.items()}

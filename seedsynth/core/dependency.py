"""Table dependency graph built from foreign key constraints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from seedsynth.core.schema import SchemaExtractor

logger = logging.getLogger(__name__)


@dataclass
class TableNode:
    """Dependency edges for one table."""

    dependencies: set[str] = field(default_factory=set)
    dependents: set[str] = field(default_factory=set)


class DependencyGraph:
    """
    Directed graph of tables: an edge A -> B means A has a FK referencing B.

    Tables keep their declaration order, and each table keeps the order its
    dependencies were declared in, so the topological sort is deterministic.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, TableNode] = {}
        self._dependency_order: dict[str, list[str]] = {}

    def add_table(self, table: str) -> None:
        """Add a table node to the graph."""
        if table not in self._nodes:
            self._nodes[table] = TableNode()
            self._dependency_order[table] = []

    def add_dependency(self, table: str, depends_on: str) -> None:
        """Add a dependency: table depends on depends_on."""
        self.add_table(table)
        self.add_table(depends_on)

        if depends_on not in self._nodes[table].dependencies:
            self._nodes[table].dependencies.add(depends_on)
            self._dependency_order[table].append(depends_on)
        self._nodes[depends_on].dependents.add(table)

    @property
    def tables(self) -> list[str]:
        return list(self._nodes)

    def __contains__(self, table: object) -> bool:
        return table in self._nodes

    def __getitem__(self, table: str) -> TableNode:
        return self._nodes[table]

    def get_dependencies(self, table: str) -> list[str]:
        """Get the tables this table depends on, in declaration order."""
        return list(self._dependency_order.get(table, []))

    def get_dependents(self, table: str) -> set[str]:
        """Get the tables that depend on this table."""
        node = self._nodes.get(table)
        return set(node.dependents) if node else set()

    def topological_sort(
        self, on_cycle: Optional[Callable[[str], None]] = None
    ) -> list[str]:
        """
        Sort tables so every referenced table precedes the tables referencing it.

        Depth-first: each table's dependencies are emitted before the table
        itself. A table reached again while it is still being visited closes a
        cycle; ``on_cycle`` is called with that table and the edge is skipped,
        so the result always covers every table exactly once.

        Args:
            on_cycle: Callback receiving the table at which a cycle was detected

        Returns:
            All tables in insertion order
        """
        result: list[str] = []
        visited: set[str] = set()
        visiting: set[str] = set()

        def visit(table: str) -> None:
            if table in visiting:
                logger.debug(f"Cycle detected at '{table}'")
                if on_cycle is not None:
                    on_cycle(table)
                return
            if table in visited:
                return

            visiting.add(table)
            for dep in self._dependency_order[table]:
                visit(dep)
            visiting.discard(table)
            visited.add(table)
            result.append(table)

        for table in self._nodes:
            if table not in visited:
                visit(table)

        return result

    def detect_cycles(self) -> list[list[str]]:
        """
        Detect circular dependencies, including self-references.

        Returns list of cycles, where each cycle is a list of table names
        starting and ending with the same table.
        """
        cycles: list[list[str]] = []
        visited: set[str] = set()
        path: list[str] = []

        def dfs(node: str) -> None:
            if node in path:
                cycle_start = path.index(node)
                cycle = path[cycle_start:] + [node]
                if cycle not in cycles:
                    cycles.append(cycle)
                return

            if node in visited:
                return

            visited.add(node)
            path.append(node)

            for dep in self._dependency_order[node]:
                dfs(dep)

            path.pop()

        for node in self._nodes:
            if node not in visited:
                dfs(node)

        return cycles


def build_dependency_graph(extractor: SchemaExtractor) -> DependencyGraph:
    """
    Build the dependency graph for every table in a parsed schema.

    Foreign keys that reference tables missing from the schema are ignored.

    Args:
        extractor: Parsed schema

    Returns:
        DependencyGraph with one node per table
    """
    graph = DependencyGraph()
    for table in extractor.table_names:
        graph.add_table(table)

    for table in extractor.table_names:
        for fk in extractor.get_constraints(table).foreign_keys:
            if not extractor.has_table(fk.referenced_table):
                logger.debug(
                    f"Ignoring FK {table}.{fk.column} -> '{fk.referenced_table}' "
                    f"(table not in schema)"
                )
                continue
            if fk.is_self_reference(table):
                logger.debug(f"Self-referencing FK {table}.{fk.column}")
            graph.add_dependency(table, fk.referenced_table)

    return graph

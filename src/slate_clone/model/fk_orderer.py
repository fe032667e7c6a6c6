"""Foreign key dependency ordering for safe cloning.

This module provides the ForeignKeyOrderer class which computes a
topologically sorted clone order for collections based on their
foreign key dependencies.

A collection can only be cloned once the identity maps of every collection
it references are complete, so referenced collections must be cloned before
the collections that reference them.

Example:
    orderer = ForeignKeyOrderer(PRODUCTION_SCHEMA)

    # Get safe clone order
    ordered = orderer.get_insertion_order()
    # locations, cast, crew, ... scenes, shots, schedule_events, budget_items

    # Get deletion order (reverse of insertion)
    delete_order = orderer.get_deletion_order()
"""

from __future__ import annotations

import logging
from graphlib import CycleError, TopologicalSorter
from typing import Iterable

from slate_clone.core.exceptions import SchemaCycleError
from slate_clone.model.schema import CollectionSchema, validate_schema

logger = logging.getLogger(__name__)


class ForeignKeyOrderer:
    """Computes clone order for collections based on FK dependencies.

    Unlike a relational loader this orderer never breaks cycles: a cycle means
    some identity map would be needed before it exists, so the schema is
    rejected when the orderer is built.

    Ties between collections that become ready at the same time are broken by
    declaration order, so the same schema always yields the same order.
    """

    def __init__(self, schema: Iterable[CollectionSchema]):
        """Initialize the orderer.

        Args:
            schema: Collection schema entries.

        Raises:
            SlateCloneConfigurationError: If the schema is malformed.
            SchemaCycleError: If the schema contains a cycle or a self reference.
        """
        self._entries = validate_schema(schema)
        self._position = {name: i for i, name in enumerate(self._entries)}
        self._order = self._sort(self._build_dependency_graph())

    def _build_dependency_graph(self) -> dict[str, set[str]]:
        """Build FK dependency graph.

        Returns:
            Dict mapping collection name -> set of collection names it depends on.
        """
        graph: dict[str, set[str]] = {}
        for name, entry in self._entries.items():
            deps = entry.referenced_collections
            if name in deps:
                raise SchemaCycleError([name, name])
            graph[name] = deps
        return graph

    def _sort(self, graph: dict[str, set[str]]) -> list[str]:
        ts = TopologicalSorter(graph)
        try:
            ts.prepare()
        except CycleError as e:
            cycle = list(e.args[1]) if len(e.args) > 1 else []
            logger.error(f"Cycle in collection dependencies: {' -> '.join(cycle)}")
            raise SchemaCycleError(cycle) from e

        ordered: list[str] = []
        while ts.is_active():
            ready = sorted(ts.get_ready(), key=self._position.__getitem__)
            ordered.extend(ready)
            ts.done(*ready)
        return ordered

    def get_insertion_order(self) -> list[CollectionSchema]:
        """Compute FK-safe clone order.

        Returns:
            Ordered list of schema entries (clone from first to last).
        """
        return [self._entries[name] for name in self._order]

    def get_deletion_order(self) -> list[CollectionSchema]:
        """Compute FK-safe deletion order.

        Returns collections in reverse dependency order: collections that are
        referenced are deleted last.
        """
        return list(reversed(self.get_insertion_order()))

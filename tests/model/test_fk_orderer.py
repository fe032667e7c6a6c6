"""Tests for ForeignKeyOrderer clone ordering and cycle rejection."""

from __future__ import annotations

import pytest

from slate_clone.core.exceptions import SchemaCycleError, SlateCloneConfigurationError
from slate_clone.model.fk_orderer import ForeignKeyOrderer
from slate_clone.model.schema import PRODUCTION_SCHEMA, array, collection, single


def _make_schema(edges: dict[str, list[str]]):
    """Build schema entries from {collection: [referenced collections]}."""
    return [
        collection(name, *(single(f"{target}Id", target) for target in targets))
        for name, targets in edges.items()
    ]


def _names(entries):
    return [e.collection_name for e in entries]


class TestForeignKeyOrderer:
    """Tests for ForeignKeyOrderer."""

    def test_simple_linear_order(self):
        """Test linear FK chain: C -> B -> A."""
        orderer = ForeignKeyOrderer(_make_schema({"C": ["B"], "B": ["A"], "A": []}))
        assert _names(orderer.get_insertion_order()) == ["A", "B", "C"]

    def test_no_dependencies_keeps_declaration_order(self):
        orderer = ForeignKeyOrderer(_make_schema({"B": [], "C": [], "A": []}))
        assert _names(orderer.get_insertion_order()) == ["B", "C", "A"]

    def test_order_is_deterministic(self):
        schema = _make_schema({"A": [], "B": ["A"], "C": ["A"], "D": ["B", "C"]})
        first = _names(ForeignKeyOrderer(schema).get_insertion_order())
        for _ in range(5):
            assert _names(ForeignKeyOrderer(schema).get_insertion_order()) == first

    def test_two_node_cycle_rejected(self):
        with pytest.raises(SchemaCycleError) as exc_info:
            ForeignKeyOrderer(_make_schema({"A": ["B"], "B": ["A"]}))
        assert set(exc_info.value.cycle) == {"A", "B"}

    def test_three_node_cycle_rejected(self):
        with pytest.raises(SchemaCycleError):
            ForeignKeyOrderer(_make_schema({"A": ["B"], "B": ["C"], "C": ["A"]}))

    def test_self_reference_rejected(self):
        schema = [collection("budget_categories", single("parentCategoryId", "budget_categories"))]
        with pytest.raises(SchemaCycleError) as exc_info:
            ForeignKeyOrderer(schema)
        assert exc_info.value.cycle == ["budget_categories", "budget_categories"]

    def test_unknown_reference_rejected(self):
        with pytest.raises(SlateCloneConfigurationError):
            ForeignKeyOrderer(_make_schema({"scenes": ["locations"]}))

    def test_duplicate_collection_rejected(self):
        schema = [collection("cast"), collection("cast")]
        with pytest.raises(SlateCloneConfigurationError):
            ForeignKeyOrderer(schema)

    def test_deletion_order_is_reverse(self):
        orderer = ForeignKeyOrderer(_make_schema({"A": [], "B": ["A"], "C": ["B"]}))
        assert _names(orderer.get_deletion_order()) == ["C", "B", "A"]


class TestProductionOrder:
    """The derived order of the production schema."""

    def test_every_reference_precedes_its_dependents(self):
        order = _names(ForeignKeyOrderer(PRODUCTION_SCHEMA).get_insertion_order())
        position = {name: i for i, name in enumerate(order)}
        for entry in PRODUCTION_SCHEMA:
            for target in entry.referenced_collections:
                assert position[target] < position[entry.collection_name]
        assert len(order) == len(PRODUCTION_SCHEMA)

    def test_expected_order(self):
        order = _names(ForeignKeyOrderer(PRODUCTION_SCHEMA).get_insertion_order())
        assert order == [
            "locations",
            "cast",
            "crew",
            "equipment",
            "budget_categories",
            "equipment_packages",
            "schedule_days",
            "scenes",
            "shots",
            "schedule_events",
            "budget_items",
        ]

    def test_leaves_first(self):
        orderer = ForeignKeyOrderer(PRODUCTION_SCHEMA)
        order = _names(orderer.get_insertion_order())
        leaves = {e.collection_name for e in PRODUCTION_SCHEMA if not e.foreign_keys}
        assert set(order[: len(leaves)]) == leaves

    def test_array_reference_counts_as_dependency(self):
        orderer = ForeignKeyOrderer([collection("cast"), collection("scenes", array("castMemberIds", "cast"))])
        assert _names(orderer.get_insertion_order()) == ["cast", "scenes"]

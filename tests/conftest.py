"""
Pytest configuration and shared fixtures.

The template snapshot sets every foreign key declared in PRODUCTION_SCHEMA at
least once, points a few of them outside the template (GLOBAL_* ids), and
contains a second project whose documents must never be cloned.
"""

from datetime import datetime, timezone

import pytest

from slate_clone.core.config import CloneConfig
from slate_clone.store import Document, InMemoryDocumentStore

TEMPLATE_ID = "TEMPLATE"
FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _doc(name: str, project_id: str = TEMPLATE_ID, **fields) -> dict:
    return {
        "id": name,
        "name": name,
        "projectId": project_id,
        "createdBy": "admin",
        "createdAt": "2025-01-01T00:00:00+00:00",
        "updatedAt": "2025-01-01T00:00:00+00:00",
        **fields,
    }


def build_template_snapshot() -> dict:
    return {
        "projects": {
            TEMPLATE_ID: {
                "id": TEMPLATE_ID,
                "name": 'Nike "Breaking Limits"',
                "description": "Demo commercial shoot",
                "orgId": "demo-public",
                "isTemplate": True,
                "isPublic": True,
                "createdBy": "admin",
                "createdAt": "2025-01-01T00:00:00+00:00",
                "updatedAt": "2025-01-01T00:00:00+00:00",
                "budgetTotal": 790000,
            },
            "OTHER": {"name": "Someone else's project", "orgId": "org-x", "isTemplate": False},
        },
        "users": {
            "U1": {"email": "una@example.com", "displayName": "Una"},
        },
        "locations": {
            "L1": _doc("L1", address="Portland"),
            "L2": _doc("L2", address="Beaverton"),
            "L9": _doc("L9", project_id="OTHER"),
        },
        "cast": {"C1": _doc("C1", role="lead")},
        "crew": {
            "CR1": _doc("CR1", department="Direction"),
            "CR2": _doc("CR2", department="Production"),
        },
        "equipment": {
            "E1": _doc("E1", category="Camera"),
            "E2": _doc("E2", category="Lighting"),
        },
        "equipment_packages": {"P1": _doc("P1", equipmentIds=["E1", "E2"])},
        "budget_categories": {"BC1": _doc("BC1", parentCategoryId=None)},
        "schedule_days": {
            "D1": _doc(
                "D1",
                locationId="L1",
                basecampLocationId="L2",
                crewParkLocationId="L1",
                techTrucksLocationId="L2",
                bgHoldingLocationId="L1",
                bgParkingLocationId="GLOBAL_LOC",
                directorCrewId="CR1",
                executiveProducerCrewId="CR2",
                productionCoordinatorCrewId="CR1",
            ),
        },
        "scenes": {
            "S1": _doc("S1", locationId="L1", castMemberIds=["C1"], shootingDayIds=["D1"]),
            "S2": _doc("S2", locationId="GLOBAL_LOC", castMemberIds=["C1", "GLOBAL_CAST"], shootingDayIds=[]),
        },
        "shots": {
            "SH1": _doc("SH1", sceneId="S1"),
            "SH2": _doc("SH2", sceneId="S2"),
        },
        "schedule_events": {
            "EV1": _doc(
                "EV1",
                sceneId="S1",
                shotId="SH1",
                locationId="L2",
                shootingDayId="D1",
                castIds=["C1"],
                crewIds=["CR1", "CR2"],
                equipmentIds=["E1"],
            ),
        },
        "budget_items": {
            "BI1": _doc(
                "BI1",
                categoryId="BC1",
                linkedCrewMemberId="CR2",
                linkedEquipmentId="E2",
                linkedLocationId="L1",
                linkedCastMemberId="C1",
                linkedScheduleEventId="EV1",
                linkedSceneId="S2",
                amount=1200,
            ),
            "BI2": _doc("BI2", categoryId="BC1", amount=300),
        },
    }


class FaultyStore(InMemoryDocumentStore):
    """InMemoryDocumentStore that fails chosen operations.

    Args:
        fail_batches: Collection -> index of the batch of that collection to fail.
        fail_reads: Collections whose read_by_parent raises.
        fail_creates: Collections whose create_document raises.
        fail_queries: Make query_by_flag raise.
        fail_gets: Collections whose get_document raises.
    """

    def __init__(self, fail_batches=None, fail_reads=(), fail_creates=(), fail_queries=False, fail_gets=(), **kwargs):
        super().__init__(**kwargs)
        self.fail_batches = dict(fail_batches or {})
        self.fail_reads = set(fail_reads)
        self.fail_creates = set(fail_creates)
        self.fail_queries = fail_queries
        self.fail_gets = set(fail_gets)
        self.batch_calls: dict[str, int] = {}
        self.write_calls = 0

    def read_by_parent(self, collection, parent_field, parent_id):
        if collection in self.fail_reads:
            raise ConnectionError(f"read of {collection} timed out")
        return super().read_by_parent(collection, parent_field, parent_id)

    def batch_write(self, ops, max_batch_size):
        self.write_calls += 1
        collection = ops[0].collection
        index = self.batch_calls.get(collection, 0)
        self.batch_calls[collection] = index + 1
        if self.fail_batches.get(collection) == index:
            raise ConnectionError(f"batch {index} of {collection} rejected")
        return super().batch_write(ops, max_batch_size)

    def create_document(self, collection, data):
        self.write_calls += 1
        if collection in self.fail_creates:
            raise ConnectionError(f"create in {collection} rejected")
        return super().create_document(collection, data)

    def query_by_flag(self, collection, owner_field, owner_scope, flag_field, flag_value):
        if self.fail_queries:
            raise ConnectionError("query timed out")
        return super().query_by_flag(collection, owner_field, owner_scope, flag_field, flag_value)

    def get_document(self, collection, doc_id):
        if collection in self.fail_gets:
            raise ConnectionError(f"get in {collection} timed out")
        return super().get_document(collection, doc_id)


@pytest.fixture
def template_snapshot():
    return build_template_snapshot()


@pytest.fixture
def template_store(template_snapshot):
    return InMemoryDocumentStore.from_snapshot(template_snapshot)


@pytest.fixture
def faulty_store(template_snapshot):
    """Factory building a FaultyStore loaded with the template."""

    def make(**kwargs) -> FaultyStore:
        return FaultyStore.from_snapshot(template_snapshot, **kwargs)

    return make


@pytest.fixture
def config():
    return CloneConfig(source_root_id=TEMPLATE_ID)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def by_name():
    """Index documents by their ``name`` field."""

    def index(documents: list[Document]) -> dict[str, Document]:
        return {doc.data["name"]: doc for doc in documents}

    return index

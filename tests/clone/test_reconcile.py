"""Tests for the orphan reconciler."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import FIXED_NOW

from slate_clone.clone.orchestrator import CloneOrchestrator
from slate_clone.clone.reconcile import OrphanReconciler, parse_timestamp
from slate_clone.core.config import CloneConfig
from slate_clone.core.exceptions import MembershipProvisioningFailure
from slate_clone.model.schema import PRODUCTION_SCHEMA


def _orphan(store, config, created_at):
    """Clone the template into a project whose owner membership fails."""
    store.fail_creates.add("project_members")
    orchestrator = CloneOrchestrator(store, config, clock=lambda: created_at)
    job = orchestrator.new_job("U1", "org-orphan")
    with pytest.raises(MembershipProvisioningFailure):
        orchestrator.execute(job)
    store.fail_creates.discard("project_members")
    return job.new_root_id


@pytest.fixture
def stale():
    return FIXED_NOW - timedelta(hours=2)


class TestParseTimestamp:
    def test_values(self):
        aware = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp(aware) == aware
        assert parse_timestamp("2026-01-01T00:00:00") == aware
        assert parse_timestamp("2026-01-01T00:00:00+00:00") == aware
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None


class TestOrphanReconciler:
    def test_sweep_deletes_stale_orphan(self, faulty_store, config, clock, stale):
        store = faulty_store()
        orphan = _orphan(store, config, stale)
        owned = CloneOrchestrator(store, config, clock=lambda: stale).run("U2", "org-2").new_root_id

        report = OrphanReconciler(store, config, clock=clock).sweep()

        assert report.examined == 2
        assert report.orphans == [orphan]
        assert report.deleted[orphan]["scenes"] == 2
        assert report.deleted[orphan]["projects"] == 1
        assert store.get_document("projects", orphan) is None
        for entry in PRODUCTION_SCHEMA:
            assert store.read_by_parent(entry.collection_name, "projectId", orphan) == []
        assert store.get_document("projects", owned) is not None
        assert len(store.read_by_parent("scenes", "projectId", owned)) == 2
        assert store.get_document("projects", "TEMPLATE") is not None

    def test_recent_orphan_kept(self, faulty_store, config, clock):
        store = faulty_store()
        orphan = _orphan(store, config, FIXED_NOW - timedelta(minutes=5))
        report = OrphanReconciler(store, config, clock=clock).sweep()
        assert report.orphans == []
        assert store.get_document("projects", orphan) is not None

    def test_grace_period_setting(self, faulty_store, config, clock):
        store = faulty_store()
        orphan = _orphan(store, config, FIXED_NOW - timedelta(minutes=5))
        eager = CloneConfig(source_root_id="TEMPLATE", orphan_grace_period_seconds=60)
        assert OrphanReconciler(store, eager, clock=clock).sweep().orphans == [orphan]

    def test_dry_run(self, faulty_store, config, clock, stale):
        store = faulty_store()
        orphan = _orphan(store, config, stale)
        report = OrphanReconciler(store, config, clock=clock).sweep(dry_run=True)
        assert report.orphans == [orphan]
        assert report.deleted == {}
        assert report.to_dict()["dry_run"] is True
        assert store.get_document("projects", orphan) is not None

    def test_missing_timestamp_skipped(self, template_store, config, clock):
        root = template_store.create_document("projects", {"orgId": "org-3", "isClonedDemo": True})
        report = OrphanReconciler(template_store, config, clock=clock).sweep()
        assert report.skipped == [root]
        assert report.orphans == []
        assert template_store.get_document("projects", root) is not None

    def test_delete_removes_memberships(self, template_store, config, clock, stale):
        root = CloneOrchestrator(template_store, config, clock=lambda: stale).run("U1", "org-1").new_root_id
        counts = OrphanReconciler(template_store, config, clock=clock).delete_clone(root)
        assert counts["project_members"] == 1
        assert template_store.read_by_parent("project_members", "projectId", root) == []

"""Cleanup of clones that never received an owner.

A job that fails in membership provisioning leaves a fully populated project
no user can reach. OrphanReconciler finds clone roots without an owner
membership that are older than ``config.orphan_grace_period`` and deletes them
together with every dependent document, dependents first.

The grace period keeps the sweep away from jobs that are still running.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from slate_clone.clone.collection import utc_now
from slate_clone.clone.membership import MembershipProvisioner
from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.model.fk_orderer import ForeignKeyOrderer
from slate_clone.model.schema import PRODUCTION_SCHEMA, CollectionSchema
from slate_clone.store.interfaces import Document, DocumentStore


def parse_timestamp(value: Any) -> datetime | None:
    """Interpret a stored timestamp. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value)
        except ValueError:
            return None
    else:
        return None
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


@dataclass
class SweepReport:
    """What a reconciliation sweep found and removed."""

    examined: int = 0
    orphans: list[DocumentId] = field(default_factory=list)
    deleted: dict[DocumentId, dict[str, int]] = field(default_factory=dict)
    skipped: list[DocumentId] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "examined": self.examined,
            "orphans": list(self.orphans),
            "deleted": {k: dict(v) for k, v in self.deleted.items()},
            "skipped": list(self.skipped),
            "dry_run": self.dry_run,
        }


class OrphanReconciler(LoggerMixin):
    """Finds and deletes clone roots nobody owns.

    Args:
        store: Document store.
        config: Clone configuration.
        schema: Collections hanging off a root. Defaults to PRODUCTION_SCHEMA.
        clock: Returns the current time.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: CloneConfig,
        schema: Iterable[CollectionSchema] = PRODUCTION_SCHEMA,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self.orderer = ForeignKeyOrderer(schema)
        self.clock = clock
        self.membership = MembershipProvisioner(store, config, clock=clock)

    def _clone_roots(self) -> list[Document]:
        cfg = self.config
        return self.store.query_by_flag(cfg.root_collection, cfg.owner_scope_field, None, cfg.clone_flag_field, True)

    def find_orphans(self) -> tuple[list[Document], list[DocumentId], int]:
        """Return (orphans, roots skipped for lack of a timestamp, roots examined)."""
        cutoff = self.clock() - self.config.orphan_grace_period
        orphans, skipped = [], []
        roots = self._clone_roots()
        for root in roots:
            if self.membership.has_owner(root.id):
                continue
            created = parse_timestamp(root.get("createdAt"))
            if created is None:
                self._logger.warning(f"Unowned clone {root.id} has no usable createdAt, leaving it")
                skipped.append(root.id)
            elif created <= cutoff:
                orphans.append(root)
        return orphans, skipped, len(roots)

    def delete_clone(self, root_id: DocumentId) -> dict[str, int]:
        """Delete a root, its membership records and every dependent document.

        Returns:
            Number of documents deleted per collection.
        """
        cfg = self.config
        counts: dict[str, int] = {}
        collections = [(e.collection_name, e.parent_field) for e in self.orderer.get_deletion_order()]
        collections.append((cfg.membership_collection, cfg.parent_field))
        for name, parent_field in collections:
            documents = self.store.read_by_parent(name, parent_field, root_id)
            for doc in documents:
                self.store.delete_document(name, doc.id)
            counts[name] = len(documents)
        self.store.delete_document(cfg.root_collection, root_id)
        counts[cfg.root_collection] = 1
        self._logger.info(f"Deleted clone {root_id} ({sum(counts.values())} documents)")
        return counts

    def sweep(self, dry_run: bool = False) -> SweepReport:
        """Delete every orphaned clone older than the grace period.

        Args:
            dry_run: Report orphans without deleting anything.
        """
        orphans, skipped, examined = self.find_orphans()
        report = SweepReport(
            examined=examined,
            orphans=[root.id for root in orphans],
            skipped=skipped,
            dry_run=dry_run,
        )
        if orphans:
            self._logger.warning(f"Found {len(orphans)} unowned clones: {', '.join(report.orphans)}")
        if not dry_run:
            for root in orphans:
                report.deleted[root.id] = self.delete_clone(root.id)
        return report

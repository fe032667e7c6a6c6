"""Prevents a second clone for the same owner."""

from __future__ import annotations

from slate_clone.core.config import CloneConfig
from slate_clone.core.exceptions import SourceUnavailable
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.store.interfaces import DocumentStore


class DuplicateGuard(LoggerMixin):
    """Checks whether a namespace already owns a cloned template.

    The check is binary. A namespace holding a partial clone from a failed job
    counts as having a clone.
    """

    def __init__(self, store: DocumentStore, config: CloneConfig):
        self.store = store
        self.config = config

    def has_existing_clone(self, owner_namespace: str) -> bool:
        """Return True if ``owner_namespace`` already has a root flagged as a clone.

        Raises:
            SourceUnavailable: If the store could not be read.
        """
        cfg = self.config
        try:
            matches = self.store.query_by_flag(
                cfg.root_collection, cfg.owner_scope_field, owner_namespace, cfg.clone_flag_field, True
            )
        except Exception as e:
            raise SourceUnavailable(f"Duplicate check failed for {owner_namespace}: {e}") from e
        return bool(matches)

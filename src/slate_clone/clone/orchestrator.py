"""Runs a clone job from duplicate check to owner provisioning.

The orchestrator is strictly sequential. Collections are cloned in the
topological order derived from the collection schema, so the identity map of
every referenced collection is complete before a dependent collection is
read. Nothing is undone on failure: collections written before the failing
one stay committed, and the job reports which step failed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from slate_clone.clone.collection import CollectionCloner, strip_fields, utc_now
from slate_clone.clone.guard import DuplicateGuard
from slate_clone.clone.identity import IdentityMapper
from slate_clone.clone.job import CloneJob, CloneResult
from slate_clone.clone.membership import MembershipProvisioner
from slate_clone.clone.reader import SourceGraphReader
from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId, RootStrippedFields
from slate_clone.core.exceptions import (
    CloneError,
    DuplicateExists,
    RootCreationFailure,
    SlateCloneConfigurationError,
)
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.model.fk_orderer import ForeignKeyOrderer
from slate_clone.model.schema import PRODUCTION_SCHEMA, CollectionSchema
from slate_clone.store.ids import auto_id
from slate_clone.store.interfaces import Document, DocumentStore, Fields


class CloneOrchestrator(LoggerMixin):
    """Clones a template project and its dependent collections for one owner.

    Args:
        store: Document store holding the template and receiving the clone.
        config: Clone configuration. ``config.source_root_id`` is the template.
        schema: Collections to clone. Defaults to PRODUCTION_SCHEMA.
        id_factory: Produces ids for cloned documents.
        clock: Returns the timestamp written to audit fields.

    Raises:
        SchemaCycleError: If the schema contains a cycle.
        SlateCloneConfigurationError: If the schema is malformed.

    Example:
        >>> orchestrator = CloneOrchestrator(store, CloneConfig(source_root_id="SomJJD3bEqn2yHhXW79e"))
        >>> result = orchestrator.run("user-1", "org-1")
        >>> result.per_collection_counts["scenes"]
        10
    """

    def __init__(
        self,
        store: DocumentStore,
        config: CloneConfig,
        schema: Iterable[CollectionSchema] = PRODUCTION_SCHEMA,
        id_factory: Callable[[], str] = auto_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self.orderer = ForeignKeyOrderer(schema)
        self.clone_order = self.orderer.get_insertion_order()
        self.id_factory = id_factory
        self.clock = clock
        self.guard = DuplicateGuard(store, config)
        self.reader = SourceGraphReader(store, config)
        self.membership = MembershipProvisioner(store, config, clock=clock)

    def new_job(self, owner_id: str, owner_namespace: str, source_root_id: DocumentId | None = None) -> CloneJob:
        """Create a job in NotStarted.

        Without a template id the job clones whichever template the fallback
        lookup finds.

        Raises:
            SlateCloneConfigurationError: If no template id is given or
                configured and ``template_fallback`` is off.
        """
        source_root_id = source_root_id or self.config.source_root_id
        if not source_root_id and not self.config.template_fallback:
            raise SlateCloneConfigurationError("No template project configured (source_root_id)")
        return CloneJob(
            owner_id=owner_id,
            owner_namespace=owner_namespace,
            source_root_id=DocumentId(source_root_id) if source_root_id else None,
            collections=[entry.collection_name for entry in self.clone_order],
        )

    def run(self, owner_id: str, owner_namespace: str, source_root_id: DocumentId | None = None) -> CloneResult:
        """Clone the template for ``owner_id``.

        Returns:
            New root id and per-collection document counts.

        Raises:
            CloneError: The typed failure of the job.
        """
        return self.execute(self.new_job(owner_id, owner_namespace, source_root_id))

    def execute(self, job: CloneJob) -> CloneResult:
        """Drive ``job`` through its states.

        The job is updated in place, so callers holding it can inspect the
        state it stopped in. Any exception, typed or not, leaves the job in
        Failed before it propagates.
        """
        try:
            if self.guard.has_existing_clone(job.owner_namespace):
                raise DuplicateExists(job.owner_namespace)
            job.duplicate_checked()

            source_root = self.reader.read_root(job.source_root_id)
            job.source_root_id = source_root.id
            job.new_root_id = self._create_root(source_root, job)

            identity = IdentityMapper(self.id_factory)
            cloner = CollectionCloner(self.store, self.config, identity, job.owner_id, clock=self.clock)
            for index, entry in enumerate(self.clone_order):
                job.start_collection(index)
                job.finish_collection(cloner.clone(entry, job.source_root_id, job.new_root_id))

            self.membership.provision_owner(job.new_root_id, job.owner_id, job.owner_namespace)
            job.membership_provisioned()
        except CloneError as e:
            job.fail(e)
            self._logger.debug(f"Clone job stopped in {job.state_label}: {e}")
            raise
        except Exception as e:
            if not job.is_terminal:
                job.fail(CloneError(f"Unexpected failure: {type(e).__name__}: {e}"))
            self._logger.debug(f"Clone job stopped in {job.state_label}: {e}")
            raise

        result = job.complete()
        self._logger.info(
            f"Cloned {job.source_root_id} into {result.new_root_id} "
            f"({result.total_documents} documents in {len(result.per_collection_counts)} collections)"
        )
        return result

    def _root_fields(self, source_root: Document, job: CloneJob) -> Fields:
        cfg = self.config
        now = self.clock()
        data = strip_fields(source_root.data, RootStrippedFields)
        data.update(
            {
                cfg.owner_scope_field: job.owner_namespace,
                "createdBy": job.owner_id,
                "isPublic": False,
                cfg.template_flag_field: False,
                cfg.clone_flag_field: True,
                cfg.back_reference_field: source_root.id,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        if cfg.clone_name is not None:
            data["name"] = cfg.clone_name
        if cfg.clone_description is not None:
            data["description"] = cfg.clone_description
        return data

    def _create_root(self, source_root: Document, job: CloneJob) -> DocumentId:
        try:
            new_root_id = self.store.create_document(self.config.root_collection, self._root_fields(source_root, job))
        except Exception as e:
            raise RootCreationFailure(f"Failed to create cloned project from {source_root.id}: {e}") from e
        self._logger.info(f"Created project {new_root_id} from template {source_root.id}")
        return new_root_id

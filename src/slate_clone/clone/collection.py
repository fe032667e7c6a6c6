"""Clones one collection of the template graph."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from slate_clone.clone.identity import IdentityMapper
from slate_clone.clone.reader import SourceGraphReader
from slate_clone.clone.resolver import ReferenceResolver
from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId, SystemFields
from slate_clone.core.exceptions import CollectionWriteFailure, SlateCloneConfigurationError
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.model.schema import CollectionSchema
from slate_clone.store.interfaces import DocumentStore, Fields, WriteOp


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def strip_fields(data: Fields, fields: list[str]) -> Fields:
    return {k: v for k, v in data.items() if k not in fields}


class CollectionCloner(LoggerMixin):
    """Copies every document of one collection from the template into a new root.

    Documents are written in batches of at most ``config.max_batch_size``. If a
    batch fails the remaining batches of the collection are not attempted and
    the batches already committed stay in the store.

    Args:
        store: Document store.
        config: Clone configuration.
        identity: Identity mapper of the running job.
        owner_id: User who becomes the author of every cloned document.
        clock: Returns the timestamp written to createdAt/updatedAt.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: CloneConfig,
        identity: IdentityMapper,
        owner_id: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self.identity = identity
        self.owner_id = owner_id
        self.clock = clock
        self.reader = SourceGraphReader(store, config)
        self.resolver = ReferenceResolver(identity)

    def clone(self, schema_entry: CollectionSchema, source_root_id: DocumentId, new_root_id: DocumentId) -> int:
        """Clone one collection.

        Args:
            schema_entry: Schema of the collection to clone.
            source_root_id: Template root the source documents belong to.
            new_root_id: Root the copies are attached to.

        Returns:
            Number of documents written.

        Raises:
            SlateCloneConfigurationError: If a referenced collection has not
                been cloned yet.
            CollectionReadFailure: If the source collection could not be read.
            CollectionWriteFailure: If a batch could not be written.
        """
        name = schema_entry.collection_name
        pending = sorted(c for c in schema_entry.referenced_collections if not self.identity.is_complete(c))
        if pending:
            raise SlateCloneConfigurationError(
                f"Cannot clone {name} before {', '.join(pending)}"
            )

        documents = self.reader.read_collection(schema_entry, source_root_id)
        self.identity.exclude(doc.id for doc in documents)

        now = self.clock()
        ops = []
        for doc in documents:
            data = self.resolver.resolve(strip_fields(doc.data, SystemFields), schema_entry)
            data.update(
                {
                    schema_entry.parent_field: new_root_id,
                    "createdBy": self.owner_id,
                    "createdAt": now,
                    "updatedAt": now,
                }
            )
            ops.append(WriteOp(collection=name, doc_id=self.identity.allocate(name, doc.id), data=data))

        count = self._write(name, ops)
        self.identity.mark_complete(name)
        self._logger.info(f"Cloned {count} {name}")
        return count

    def _write(self, name: str, ops: list[WriteOp]) -> int:
        batch_size = self.config.max_batch_size
        count = 0
        for batch_index, i in enumerate(range(0, len(ops), batch_size)):
            batch = ops[i:i + batch_size]
            try:
                self.store.batch_write(batch, batch_size)
            except Exception as e:
                self._logger.error(f"Batch {batch_index} of {name} failed after {count} writes: {e}")
                raise CollectionWriteFailure(name, batch_index) from e
            count += len(batch)
        return count

"""In-memory document store.

InMemoryDocumentStore implements the DocumentStore protocol over plain
dictionaries. It is used by the command line tool, which loads a JSON snapshot
of collections, and by the test suite. Documents are copied on the way in and
on the way out so callers never share state with the store.

Snapshot format::

    {
        "projects": {"SomJJD3bEqn2yHhXW79e": {"name": "...", "isTemplate": true}},
        "scenes": {"S1": {"projectId": "SomJJD3bEqn2yHhXW79e", "locationId": "L1"}}
    }
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

from slate_clone.core.constants import DocumentId
from slate_clone.store.ids import auto_id
from slate_clone.store.interfaces import Document, Fields, WriteOp

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class InMemoryDocumentStore:
    """Dictionary backed DocumentStore.

    Args:
        id_factory: Produces ids for create_document. Defaults to auto_id.
    """

    def __init__(self, id_factory: Callable[[], str] = auto_id):
        self._collections: dict[str, dict[str, Fields]] = {}
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    @classmethod
    def from_snapshot(cls, snapshot: dict[str, dict[str, Fields]] | str | Path, **kwargs) -> "InMemoryDocumentStore":
        """Build a store from a snapshot dictionary or a JSON snapshot file."""
        if isinstance(snapshot, (str, Path)):
            with Path(snapshot).open() as f:
                snapshot = json.load(f)
        store = cls(**kwargs)
        for collection, documents in snapshot.items():
            for doc_id, data in documents.items():
                store._put(collection, doc_id, data)
        return store

    def to_snapshot(self) -> dict[str, dict[str, Fields]]:
        return copy.deepcopy(self._collections)

    def dump(self, path: str | Path, indent: int = 2) -> None:
        """Write the store contents as a JSON snapshot."""
        with Path(path).open("w") as f:
            json.dump(self._collections, f, indent=indent, default=_json_default)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def collection_names(self) -> list[str]:
        return list(self._collections)

    def documents(self, collection: str) -> list[Document]:
        return [
            Document(id=DocumentId(doc_id), data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
        ]

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    # ------------------------------------------------------------------
    # DocumentStore protocol
    # ------------------------------------------------------------------
    def read_by_parent(self, collection: str, parent_field: str, parent_id: DocumentId) -> list[Document]:
        return [doc for doc in self.documents(collection) if doc.data.get(parent_field) == parent_id]

    def create_document(self, collection: str, data: Fields) -> DocumentId:
        doc_id = self._id_factory()
        while doc_id in self._collections.get(collection, {}):
            doc_id = self._id_factory()
        self._put(collection, doc_id, data)
        return DocumentId(doc_id)

    def batch_write(self, ops: list[WriteOp], max_batch_size: int) -> list[DocumentId]:
        """Create every document in ``ops`` or none of them.

        Raises:
            ValueError: If the batch is larger than max_batch_size, or an id is
                repeated or already exists.
        """
        if len(ops) > max_batch_size:
            raise ValueError(f"Batch of {len(ops)} writes exceeds the limit of {max_batch_size}")

        seen: set[tuple[str, str]] = set()
        for op in ops:
            key = (op.collection, op.doc_id)
            if key in seen or op.doc_id in self._collections.get(op.collection, {}):
                raise ValueError(f"Document {op.collection}/{op.doc_id} already exists")
            seen.add(key)

        for op in ops:
            self._put(op.collection, op.doc_id, op.data)
        logger.debug(f"Committed batch of {len(ops)} writes")
        return [op.doc_id for op in ops]

    def query_by_flag(
        self,
        collection: str,
        owner_field: str,
        owner_scope: str | None,
        flag_field: str,
        flag_value: bool,
    ) -> list[Document]:
        return [
            doc
            for doc in self.documents(collection)
            if doc.data.get(flag_field) == flag_value
            and (owner_scope is None or doc.data.get(owner_field) == owner_scope)
        ]

    def get_document(self, collection: str, doc_id: DocumentId) -> Document | None:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return Document(id=doc_id, data=copy.deepcopy(data))

    def delete_document(self, collection: str, doc_id: DocumentId) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    def _put(self, collection: str, doc_id: str, data: Fields) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

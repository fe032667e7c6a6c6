"""Protocols describing the document store consumed by the clone engine.

The engine does not depend on any particular database product. It talks to a
DocumentStore, which needs four operations for the clone itself, plus a
lookup and a delete used for root lookup, owner profiles and orphan sweeps.

Classes:
    Document: A stored document and its id.
    WriteOp: A create operation for batch_write.
    DocumentStore: The store protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from slate_clone.core.constants import DocumentId

Fields = dict[str, Any]


@dataclass(frozen=True)
class Document:
    """A document read from the store."""

    id: DocumentId
    data: Fields = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass(frozen=True)
class WriteOp:
    """Create ``data`` as document ``doc_id`` of ``collection``."""

    collection: str
    doc_id: DocumentId
    data: Fields


@runtime_checkable
class DocumentStore(Protocol):
    def read_by_parent(self, collection: str, parent_field: str, parent_id: DocumentId) -> list[Document]: ...

    def create_document(self, collection: str, data: Fields) -> DocumentId: ...

    def batch_write(self, ops: list[WriteOp], max_batch_size: int) -> list[DocumentId]: ...

    def query_by_flag(
        self,
        collection: str,
        owner_field: str,
        owner_scope: str | None,
        flag_field: str,
        flag_value: bool,
    ) -> list[Document]: ...

    def get_document(self, collection: str, doc_id: DocumentId) -> Document | None: ...

    def delete_document(self, collection: str, doc_id: DocumentId) -> None: ...

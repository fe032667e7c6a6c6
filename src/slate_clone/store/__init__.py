"""Document store abstraction consumed by the clone engine."""

from slate_clone.store.ids import auto_id
from slate_clone.store.interfaces import Document, DocumentStore, Fields, WriteOp
from slate_clone.store.memory import InMemoryDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "Fields",
    "InMemoryDocumentStore",
    "WriteOp",
    "auto_id",
]

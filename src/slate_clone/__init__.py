__all__ = [
    "CloneConfig",
    "CloneError",
    "CloneOrchestrator",
    "CloneOutcome",
    "CloneResult",
    "CollectionSchema",
    "DocumentStore",
    "ForeignKeyField",
    "InMemoryDocumentStore",
    "OrphanReconciler",
    "PRODUCTION_SCHEMA",
    "SlateCloneException",
    "clone_template_for",
]

from importlib.metadata import PackageNotFoundError, version

from slate_clone.clone import CloneOrchestrator, CloneOutcome, CloneResult, OrphanReconciler, clone_template_for
from slate_clone.core import CloneConfig, CloneError, SlateCloneException
from slate_clone.model import PRODUCTION_SCHEMA, CollectionSchema, ForeignKeyField
from slate_clone.store import DocumentStore, InMemoryDocumentStore

try:
    __version__ = version("slate_clone")
except PackageNotFoundError:
    # package is not installed
    pass

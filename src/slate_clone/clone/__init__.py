"""Template cloning engine.

Clones a template project and its dependent collections into a new
namespace, remapping every declared foreign key through per-collection
identity maps.
"""

from slate_clone.clone.collection import CollectionCloner
from slate_clone.clone.guard import DuplicateGuard
from slate_clone.clone.identity import IdentityMapper
from slate_clone.clone.job import CloneJob, CloneResult
from slate_clone.clone.membership import MembershipProvisioner
from slate_clone.clone.orchestrator import CloneOrchestrator
from slate_clone.clone.provision import CloneOutcome, clone_template_for
from slate_clone.clone.reader import SourceGraphReader
from slate_clone.clone.reconcile import OrphanReconciler, SweepReport
from slate_clone.clone.resolver import ReferenceResolver

__all__ = [
    "CloneJob",
    "CloneOrchestrator",
    "CloneOutcome",
    "CloneResult",
    "CollectionCloner",
    "DuplicateGuard",
    "IdentityMapper",
    "MembershipProvisioner",
    "OrphanReconciler",
    "ReferenceResolver",
    "SourceGraphReader",
    "SweepReport",
    "clone_template_for",
]

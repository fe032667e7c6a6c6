from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId
from slate_clone.core.enums import Cardinality, CloneJobState, MemberRole, MemberStatus
from slate_clone.core.exceptions import (
    CloneError,
    CollectionReadFailure,
    CollectionWriteFailure,
    DuplicateExists,
    IdentityAllocationError,
    InvalidJobTransition,
    MembershipProvisioningFailure,
    RootCreationFailure,
    SchemaCycleError,
    SlateCloneConfigurationError,
    SlateCloneException,
    SourceRootNotFound,
    SourceUnavailable,
)

__all__ = [
    "CloneConfig",
    "DocumentId",
    "Cardinality",
    "CloneJobState",
    "MemberRole",
    "MemberStatus",
    "SlateCloneException",
    "SlateCloneConfigurationError",
    "SchemaCycleError",
    "IdentityAllocationError",
    "InvalidJobTransition",
    "CloneError",
    "SourceUnavailable",
    "SourceRootNotFound",
    "DuplicateExists",
    "RootCreationFailure",
    "CollectionReadFailure",
    "CollectionWriteFailure",
    "MembershipProvisioningFailure",
]

"""
Custom exceptions used throughout the slate_clone package.

Two families live here. Errors raised for programming or configuration
mistakes (bad schema, bad config, illegal job transition) derive directly from
SlateCloneException. Failures of a clone job derive from CloneError; these are
the typed results handed back to the account-provisioning flow.
"""


class SlateCloneException(Exception):
    """Exception class specific to the slate_clone module.

    Args:
        msg (str): Optional message for the exception.
    """

    def __init__(self, msg=""):
        super().__init__(msg)
        self._msg = msg


class SlateCloneConfigurationError(SlateCloneException):
    """Invalid clone configuration."""


class SchemaCycleError(SlateCloneException):
    """The collection schema contains a dependency cycle.

    Args:
        cycle: Collection names along the cycle, first name repeated at the end.
    """

    def __init__(self, cycle: list[str]):
        super().__init__(f"Collection schema has a dependency cycle: {' -> '.join(cycle)}")
        self.cycle = cycle


class IdentityAllocationError(SlateCloneException):
    """A source id was allocated twice within one job."""


class InvalidJobTransition(SlateCloneException):
    """A clone job was asked to move between states that are not connected."""


class CloneError(SlateCloneException):
    """Base class of every failure a clone job can report to its caller."""


class SourceUnavailable(CloneError):
    """The duplicate check or the source root read failed. Nothing was written."""


class SourceRootNotFound(SourceUnavailable):
    """Neither the configured template root nor a fallback template exists."""

    def __init__(self, source_root_id: str | None):
        msg = f"Template project {source_root_id} not found" if source_root_id else "No template project found"
        super().__init__(msg)
        self.source_root_id = source_root_id


class DuplicateExists(CloneError):
    """The owner already has a clone. A defined no-op outcome."""

    def __init__(self, owner_namespace: str):
        super().__init__(f"Namespace {owner_namespace} already has a cloned template")
        self.owner_namespace = owner_namespace


class RootCreationFailure(CloneError):
    """Writing the new root entity failed. No collections were cloned."""


class CollectionReadFailure(CloneError):
    """Reading one source collection failed.

    Collections cloned before this one remain committed.
    """

    def __init__(self, collection: str, msg: str = ""):
        super().__init__(msg or f"Failed to read source collection {collection}")
        self.collection = collection


class CollectionWriteFailure(CloneError):
    """A batch write failed partway through a collection.

    Batches before ``batch_index`` in this collection and all earlier
    collections remain committed.
    """

    def __init__(self, collection: str, batch_index: int, msg: str = ""):
        super().__init__(msg or f"Failed to write batch {batch_index} of collection {collection}")
        self.collection = collection
        self.batch_index = batch_index


class MembershipProvisioningFailure(CloneError):
    """The clone is fully populated but nobody owns it."""

    def __init__(self, new_root_id: str, msg: str = ""):
        super().__init__(msg or f"Failed to provision owner for cloned project {new_root_id}")
        self.new_root_id = new_root_id

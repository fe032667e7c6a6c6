"""Configuration management for slate_clone.

This module provides the CloneConfig class holding everything a clone job
needs to know that is not part of the collection schema: which template root
to copy, how the root and membership collections are named, batch limits and
the settings of the orphan reconciler.

The configuration is a pydantic model and is registered in the hydra-zen
store under the ``slate_clone`` group so that applications composing their
own Hydra configuration can pull it in.

Example:
    Programmatic configuration:
        >>> config = CloneConfig(source_root_id="SomJJD3bEqn2yHhXW79e")
        >>> orchestrator = CloneOrchestrator(store, config)

    With hydra-zen:
        >>> from hydra_zen import instantiate
        >>> from slate_clone.core.config import CloneConf
        >>> config = instantiate(CloneConf(source_root_id="SomJJD3bEqn2yHhXW79e"))
"""

import logging
from datetime import timedelta
from typing import Any

from hydra_zen import builds, store
from pydantic import BaseModel, field_validator, model_validator

from slate_clone.core.constants import (
    BACK_REFERENCE_FIELD,
    CLONE_FLAG_FIELD,
    MAX_BATCH_SIZE,
    MEMBERSHIP_COLLECTION,
    OWNER_SCOPE_FIELD,
    PARENT_FIELD,
    ROOT_COLLECTION,
    TEMPLATE_FLAG_FIELD,
    USERS_COLLECTION,
)


class CloneConfig(BaseModel):
    """Configuration model for clone jobs.

    Attributes:
        source_root_id: Id of the template project that is copied for new users.
            Required for cloning, unused by the orphan sweep.
        root_collection: Collection holding root entities.
        membership_collection: Collection holding access-control records.
        users_collection: Collection holding user profiles.
        parent_field: Field linking every cloned document to its root.
        owner_scope_field: Field on the root naming the owning namespace.
        clone_flag_field: Marker set on roots created by a clone job.
        template_flag_field: Marker identifying template roots.
        back_reference_field: Field on a cloned root naming its source root.
        max_batch_size: Largest number of documents written per batch.
        clone_name: Name given to the cloned root. None keeps the template's name.
        clone_description: Description given to the cloned root. None keeps the template's.
        template_fallback: Use any template root when source_root_id does not exist.
        orphan_grace_period_seconds: Age after which an unowned clone is swept.
        logging_level: Logging level for slate_clone. Defaults to WARNING.
    """

    source_root_id: str | None = None
    root_collection: str = ROOT_COLLECTION
    membership_collection: str = MEMBERSHIP_COLLECTION
    users_collection: str = USERS_COLLECTION
    parent_field: str = PARENT_FIELD
    owner_scope_field: str = OWNER_SCOPE_FIELD
    clone_flag_field: str = CLONE_FLAG_FIELD
    template_flag_field: str = TEMPLATE_FLAG_FIELD
    back_reference_field: str = BACK_REFERENCE_FIELD
    max_batch_size: int = MAX_BATCH_SIZE
    clone_name: str | None = None
    clone_description: str | None = None
    template_fallback: bool = True
    orphan_grace_period_seconds: float = 3600.0
    logging_level: Any = logging.WARNING

    @field_validator("source_root_id")
    @classmethod
    def check_source_root_id(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("source_root_id must not be empty")
        return value

    @field_validator("max_batch_size")
    @classmethod
    def check_batch_size(cls, value: int) -> int:
        if not 1 <= value <= MAX_BATCH_SIZE:
            raise ValueError(f"max_batch_size must be between 1 and {MAX_BATCH_SIZE}")
        return value

    @field_validator("orphan_grace_period_seconds")
    @classmethod
    def check_grace_period(cls, value: float) -> float:
        if value < 0:
            raise ValueError("orphan_grace_period_seconds must not be negative")
        return value

    @model_validator(mode="after")
    def check_collections(self) -> "CloneConfig":
        """The root, membership and users collections must be distinct."""
        names = {self.root_collection, self.membership_collection, self.users_collection}
        if len(names) != 3:
            raise ValueError("root, membership and users collections must be distinct")
        return self

    @property
    def orphan_grace_period(self) -> timedelta:
        return timedelta(seconds=self.orphan_grace_period_seconds)


# =============================================================================
# Hydra Integration
# =============================================================================

CloneConf = builds(CloneConfig, populate_full_signature=True)

store(CloneConf, group="slate_clone", name="default")

store.add_to_hydra_store()

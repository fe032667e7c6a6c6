"""Grants the invoking user ownership of a cloned project."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from slate_clone.clone.collection import utc_now
from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId
from slate_clone.core.enums import MemberRole, MemberStatus
from slate_clone.core.exceptions import MembershipProvisioningFailure
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.store.interfaces import DocumentStore


class MembershipProvisioner(LoggerMixin):
    """Creates the owner membership record of a new root."""

    def __init__(
        self,
        store: DocumentStore,
        config: CloneConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self.clock = clock

    def provision_owner(self, new_root_id: DocumentId, owner_id: str, owner_namespace: str) -> DocumentId:
        """Make ``owner_id`` the active owner of ``new_root_id``.

        The owner's email and display name are copied from their profile when
        one exists.

        Returns:
            Id of the membership record.

        Raises:
            MembershipProvisioningFailure: If the record could not be written.
        """
        cfg = self.config
        try:
            profile = self.store.get_document(cfg.users_collection, owner_id)
            profile_data = profile.data if profile is not None else {}
            now = self.clock()
            member_id = self.store.create_document(
                cfg.membership_collection,
                {
                    cfg.parent_field: new_root_id,
                    cfg.owner_scope_field: owner_namespace,
                    "userId": owner_id,
                    "email": profile_data.get("email") or "",
                    "displayName": profile_data.get("displayName") or "User",
                    "role": MemberRole.owner.value,
                    "status": MemberStatus.active.value,
                    "invitedBy": owner_id,
                    "invitedAt": now,
                    "joinedAt": now,
                },
            )
        except Exception as e:
            raise MembershipProvisioningFailure(
                new_root_id, f"Failed to provision owner {owner_id} for cloned project {new_root_id}: {e}"
            ) from e
        self._logger.info(f"Added {owner_id} as owner of {new_root_id}")
        return member_id

    def has_owner(self, root_id: DocumentId) -> bool:
        """Return True if some membership record makes someone owner of ``root_id``."""
        cfg = self.config
        members = self.store.read_by_parent(cfg.membership_collection, cfg.parent_field, root_id)
        return any(m.get("role") == MemberRole.owner.value for m in members)

"""In-memory record of one clone job and its state machine.

States::

    NotStarted -> DuplicateChecked -> Cloning[0] -> ... -> Cloning[N-1]
        -> MembershipProvisioned -> Completed

``Failed`` is reachable from every non-terminal state and is absorbing. A job
is never persisted; it lives for one invocation and is reported through
logging.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from slate_clone.core.constants import DocumentId
from slate_clone.core.enums import CloneJobState
from slate_clone.core.exceptions import CloneError, InvalidJobTransition

_TRANSITIONS: dict[CloneJobState, set[CloneJobState]] = {
    CloneJobState.not_started: {CloneJobState.duplicate_checked, CloneJobState.failed},
    CloneJobState.duplicate_checked: {
        CloneJobState.cloning,
        CloneJobState.membership_provisioned,
        CloneJobState.failed,
    },
    CloneJobState.cloning: {
        CloneJobState.cloning,
        CloneJobState.membership_provisioned,
        CloneJobState.failed,
    },
    CloneJobState.membership_provisioned: {CloneJobState.completed, CloneJobState.failed},
    CloneJobState.completed: set(),
    CloneJobState.failed: set(),
}


@dataclass
class CloneResult:
    """What a successful job hands back."""

    new_root_id: DocumentId
    per_collection_counts: dict[str, int]

    @property
    def total_documents(self) -> int:
        return sum(self.per_collection_counts.values())


@dataclass
class CloneJob:
    """One end-to-end invocation of the clone engine for one owner.

    Attributes:
        owner_id: User the clone is created for.
        owner_namespace: Namespace (organization) the clone is created in.
        source_root_id: Template root being copied. None until the template
            fallback picks one.
        collections: Collection names in clone order.
        new_root_id: Id of the new root once it exists.
        per_collection_counts: Documents written per completed collection.
        state: Current state.
        collection_index: Index into ``collections`` while cloning.
        failure: The error that moved the job to Failed.
    """

    owner_id: str
    owner_namespace: str
    source_root_id: DocumentId | None
    collections: list[str] = field(default_factory=list)
    new_root_id: DocumentId | None = None
    per_collection_counts: dict[str, int] = field(default_factory=dict)
    state: CloneJobState = CloneJobState.not_started
    collection_index: int | None = None
    failure: CloneError | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (CloneJobState.completed, CloneJobState.failed)

    @property
    def current_collection(self) -> str | None:
        if self.collection_index is None:
            return None
        return self.collections[self.collection_index]

    def _move(self, state: CloneJobState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise InvalidJobTransition(f"Clone job cannot move from {self.state.value} to {state.value}")
        self.state = state
        if self.is_terminal:
            self.finished_at = datetime.now(timezone.utc)

    def duplicate_checked(self) -> None:
        self._move(CloneJobState.duplicate_checked)

    def start_collection(self, index: int) -> None:
        """Enter Cloning[index]. Collections must be entered in order."""
        expected = 0 if self.state == CloneJobState.duplicate_checked else (self.collection_index or 0) + 1
        if index != expected or index >= len(self.collections):
            raise InvalidJobTransition(f"Clone job cannot enter Cloning[{index}], expected Cloning[{expected}]")
        self._move(CloneJobState.cloning)
        self.collection_index = index

    def finish_collection(self, count: int) -> None:
        if self.state != CloneJobState.cloning:
            raise InvalidJobTransition(f"No collection is being cloned in state {self.state.value}")
        self.per_collection_counts[self.current_collection] = count

    def membership_provisioned(self) -> None:
        last = len(self.collections) - 1
        if self.collections and (self.state != CloneJobState.cloning or self.collection_index != last):
            raise InvalidJobTransition("Membership can only be provisioned after the last collection")
        if self.state == CloneJobState.cloning and self.current_collection not in self.per_collection_counts:
            raise InvalidJobTransition(f"Collection {self.current_collection} has not finished")
        self._move(CloneJobState.membership_provisioned)

    def complete(self) -> CloneResult:
        self._move(CloneJobState.completed)
        return CloneResult(new_root_id=self.new_root_id, per_collection_counts=dict(self.per_collection_counts))

    def fail(self, error: CloneError) -> None:
        self._move(CloneJobState.failed)
        self.failure = error

    @property
    def state_label(self) -> str:
        """State name, with the collection index while cloning (``Cloning[3]``)."""
        if self.state == CloneJobState.cloning:
            return f"{self.state.value}[{self.collection_index}]"
        return self.state.value

    def to_dict(self) -> dict[str, Any]:
        """Return the job as a JSON-serializable dictionary."""
        return {
            "owner_id": self.owner_id,
            "owner_namespace": self.owner_namespace,
            "source_root_id": self.source_root_id,
            "new_root_id": self.new_root_id,
            "state": self.state.value,
            "collection_index": self.collection_index,
            "current_collection": self.current_collection,
            "per_collection_counts": dict(self.per_collection_counts),
            "failure": type(self.failure).__name__ if self.failure else None,
            "failure_message": str(self.failure) if self.failure else None,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_text(self) -> str:
        """Return the job as human-readable text."""
        lines = [
            f"Clone of {self.source_root_id or 'any template'} for {self.owner_id} ({self.owner_namespace})",
            f"State:        {self.state_label}",
            f"New project:  {self.new_root_id or '-'}",
        ]
        for name in self.collections:
            count = self.per_collection_counts.get(name)
            lines.append(f"  {name:<20} {'-' if count is None else count}")
        if self.failure:
            lines.append(f"Failure:      {type(self.failure).__name__}: {self.failure}")
        return "\n".join(lines)

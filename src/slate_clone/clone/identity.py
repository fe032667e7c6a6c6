"""Old-id to new-id bookkeeping for one clone job."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from slate_clone.core.constants import DocumentId
from slate_clone.core.exceptions import IdentityAllocationError
from slate_clone.store.ids import auto_id


class IdentityMapper:
    """Allocates a fresh id for every source document, per collection.

    Allocation is 1:1: an old id is allocated at most once per collection and
    a new id is never handed out twice, nor equal to any id the mapper has
    been told belongs to the source graph.

    A mapper belongs to exactly one clone job and is discarded with it.

    Args:
        id_factory: Produces candidate ids. Defaults to auto_id.
    """

    def __init__(self, id_factory: Callable[[], str] = auto_id):
        self._id_factory = id_factory
        self._maps: dict[str, dict[DocumentId, DocumentId]] = {}
        self._issued: set[str] = set()
        self._excluded: set[str] = set()
        self._complete: set[str] = set()

    def exclude(self, ids: Iterable[str]) -> None:
        """Never hand out any of ``ids`` as a new id."""
        self._excluded.update(ids)

    def allocate(self, collection: str, old_id: DocumentId) -> DocumentId:
        """Allocate the new id for ``old_id`` in ``collection``.

        Raises:
            IdentityAllocationError: If ``old_id`` was already allocated.
        """
        mapping = self._maps.setdefault(collection, {})
        if old_id in mapping:
            raise IdentityAllocationError(f"{collection}/{old_id} was already allocated")

        new_id = self._id_factory()
        while new_id in self._issued or new_id in self._excluded or new_id == old_id:
            new_id = self._id_factory()

        self._issued.add(new_id)
        mapping[old_id] = DocumentId(new_id)
        return mapping[old_id]

    def resolve(self, collection: str, old_id: DocumentId) -> DocumentId | None:
        """Return the new id for ``old_id``, or None if it was never allocated."""
        return self._maps.get(collection, {}).get(old_id)

    def mark_complete(self, collection: str) -> None:
        """Record that every source document of ``collection`` has been allocated."""
        self._maps.setdefault(collection, {})
        self._complete.add(collection)

    def is_complete(self, collection: str) -> bool:
        return collection in self._complete

    def mapping(self, collection: str) -> dict[DocumentId, DocumentId]:
        """Copy of the old-id to new-id map of ``collection``."""
        return dict(self._maps.get(collection, {}))

    def __len__(self) -> int:
        return sum(len(m) for m in self._maps.values())

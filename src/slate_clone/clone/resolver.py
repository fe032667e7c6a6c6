"""Foreign key rewriting.

Every declared foreign key is resolved through the identity map. Values the
map has never seen point outside the cloned set (shared records, for
instance) and are passed through unchanged.
"""

from __future__ import annotations

from typing import Any

from slate_clone.clone.identity import IdentityMapper
from slate_clone.core.enums import Cardinality
from slate_clone.model.schema import CollectionSchema
from slate_clone.store.interfaces import Fields


class ReferenceResolver:
    """Rewrites the foreign-key fields of a document using an IdentityMapper."""

    def __init__(self, identity: IdentityMapper):
        self.identity = identity

    def resolve(self, data: Fields, schema_entry: CollectionSchema) -> Fields:
        """Return a copy of ``data`` with every declared foreign key remapped.

        Args:
            data: Document fields. Not modified.
            schema_entry: Schema of the collection the document belongs to.

        Returns:
            New dict of fields.
        """
        resolved = dict(data)
        for fk in schema_entry.foreign_keys:
            value = resolved.get(fk.field)
            if value is None:
                continue
            if fk.cardinality == Cardinality.array:
                if isinstance(value, list):
                    resolved[fk.field] = [self._resolve_one(fk.referenced_collection, v) for v in value]
            else:
                resolved[fk.field] = self._resolve_one(fk.referenced_collection, value)
        return resolved

    def _resolve_one(self, collection: str, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        new_id = self.identity.resolve(collection, value)
        return value if new_id is None else new_id

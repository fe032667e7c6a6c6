"""Model module for slate_clone.

Key components:
- CollectionSchema / ForeignKeyField: static description of cloned collections
- PRODUCTION_SCHEMA: the collections of a production project
- ForeignKeyOrderer: compute FK-safe clone and deletion order
"""

from slate_clone.model.fk_orderer import ForeignKeyOrderer
from slate_clone.model.schema import (
    PRODUCTION_SCHEMA,
    CollectionSchema,
    ForeignKeyField,
    validate_schema,
)

__all__ = [
    "PRODUCTION_SCHEMA",
    "CollectionSchema",
    "ForeignKeyField",
    "ForeignKeyOrderer",
    "validate_schema",
]

"""Collection schema describing how cloned collections reference each other.

Each CollectionSchema entry names one collection that participates in a clone
and lists its foreign-key fields together with the collection each field
points into. The full set of entries is a DAG; the clone order is derived from
it by ForeignKeyOrderer rather than written down by hand.

Fields that would close a cycle are intentionally left undeclared. Their
values are copied as-is, like any reference to a document outside the cloned
set.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from slate_clone.core.constants import PARENT_FIELD
from slate_clone.core.enums import Cardinality
from slate_clone.core.exceptions import SlateCloneConfigurationError


class ForeignKeyField(BaseModel):
    """A field holding one or more ids of documents in another collection.

    Attributes:
        field: Name of the field on the referencing document.
        referenced_collection: Collection the ids belong to.
        cardinality: Whether the field holds one id or a list of ids.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    referenced_collection: str
    cardinality: Cardinality = Cardinality.single


class CollectionSchema(BaseModel):
    """Static descriptor of one cloned collection."""

    model_config = ConfigDict(frozen=True)

    collection_name: str
    parent_field: str = PARENT_FIELD
    foreign_keys: tuple[ForeignKeyField, ...] = Field(default_factory=tuple)

    @property
    def referenced_collections(self) -> set[str]:
        return {fk.referenced_collection for fk in self.foreign_keys}


def single(field: str, referenced_collection: str) -> ForeignKeyField:
    return ForeignKeyField(field=field, referenced_collection=referenced_collection)


def array(field: str, referenced_collection: str) -> ForeignKeyField:
    return ForeignKeyField(
        field=field, referenced_collection=referenced_collection, cardinality=Cardinality.array
    )


def collection(name: str, *foreign_keys: ForeignKeyField, parent_field: str = PARENT_FIELD) -> CollectionSchema:
    return CollectionSchema(collection_name=name, parent_field=parent_field, foreign_keys=foreign_keys)


def validate_schema(entries: Iterable[CollectionSchema]) -> dict[str, CollectionSchema]:
    """Index schema entries by collection name and check their references.

    Args:
        entries: Schema entries.

    Returns:
        Dict mapping collection name to its entry, in declaration order.

    Raises:
        SlateCloneConfigurationError: If a collection is declared twice or a
            foreign key points at a collection that is not part of the schema.
    """
    by_name: dict[str, CollectionSchema] = {}
    for entry in entries:
        if entry.collection_name in by_name:
            raise SlateCloneConfigurationError(f"Collection {entry.collection_name} is declared twice")
        by_name[entry.collection_name] = entry

    for entry in by_name.values():
        seen_fields = set()
        for fk in entry.foreign_keys:
            if fk.field in seen_fields:
                raise SlateCloneConfigurationError(
                    f"Field {entry.collection_name}.{fk.field} is declared twice"
                )
            seen_fields.add(fk.field)
            if fk.referenced_collection not in by_name:
                raise SlateCloneConfigurationError(
                    f"{entry.collection_name}.{fk.field} references unknown collection {fk.referenced_collection}"
                )
    return by_name


# Collections of a production project and the references between them.
PRODUCTION_SCHEMA: tuple[CollectionSchema, ...] = (
    collection("locations"),
    collection("cast"),
    collection("crew"),
    collection("equipment"),
    collection("equipment_packages", array("equipmentIds", "equipment")),
    collection("budget_categories"),
    collection(
        "schedule_days",
        single("locationId", "locations"),
        single("basecampLocationId", "locations"),
        single("crewParkLocationId", "locations"),
        single("techTrucksLocationId", "locations"),
        single("bgHoldingLocationId", "locations"),
        single("bgParkingLocationId", "locations"),
        single("directorCrewId", "crew"),
        single("executiveProducerCrewId", "crew"),
        single("productionCoordinatorCrewId", "crew"),
    ),
    collection(
        "scenes",
        single("locationId", "locations"),
        array("castMemberIds", "cast"),
        array("shootingDayIds", "schedule_days"),
    ),
    collection("shots", single("sceneId", "scenes")),
    collection(
        "schedule_events",
        single("sceneId", "scenes"),
        single("shotId", "shots"),
        single("locationId", "locations"),
        single("shootingDayId", "schedule_days"),
        array("castIds", "cast"),
        array("crewIds", "crew"),
        array("equipmentIds", "equipment"),
    ),
    collection(
        "budget_items",
        single("categoryId", "budget_categories"),
        single("linkedCrewMemberId", "crew"),
        single("linkedEquipmentId", "equipment"),
        single("linkedLocationId", "locations"),
        single("linkedCastMemberId", "cast"),
        single("linkedScheduleEventId", "schedule_events"),
        single("linkedSceneId", "scenes"),
    ),
)

"""
Shared test data: one schema covering every property type, and one
entity per interesting value of each type.

Entity ids name the value they carry so assertions read as lists of ids.
"""

from datetime import datetime, timedelta, timezone

from entity_logic import Entity

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SCHEMA = {
    "groups": [{"id": 1, "name": "Inventory"}],
    "properties": [
        {"key": "meta.id", "type": "string", "name": "ID"},
        {"key": "meta.location", "type": "location", "name": "Location", "modifiable": True},
        {"key": "inventory.1", "type": "boolean", "name": "Boolean", "modifiable": True, "group_id": 1},
        {"key": "inventory.2", "type": "number", "name": "Number", "modifiable": True, "group_id": 1},
        {"key": "inventory.3", "type": "string", "name": "String", "modifiable": True, "group_id": 1},
        {"key": "inventory.4", "type": "date", "name": "Date", "modifiable": True, "group_id": 1},
        {"key": "inventory.5", "type": "date", "name": "Other date", "modifiable": True, "group_id": 1},
        {
            "key": "inventory.6",
            "type": "enum",
            "name": "Enum",
            "modifiable": True,
            "group_id": 1,
            "alternatives": ["alternative1", "alternative2"],
        },
        {"key": "inventory.7", "type": "photo", "name": "Photo", "modifiable": True, "group_id": 1},
        {"key": "inventory.8", "type": "array:number", "name": "Numbers", "modifiable": True, "group_id": 1},
        {"key": "inventory.9", "type": "array:string", "name": "Strings", "modifiable": True, "group_id": 1},
        {"key": "inventory.10", "type": "string", "name": "Read-only string", "group_id": 1},
        {"key": "inventory.11", "type": "array:string", "name": "Read-only strings", "group_id": 1},
    ],
    "translations": {"en-US": {"inventory.1": "Boolean"}},
}


def build_entities(now: datetime) -> list[Entity]:
    """One entity per value under test, in a fixed order."""
    def entity(entity_id: str, **props) -> Entity:
        properties = {"meta.id": entity_id}
        properties.update({f"inventory.{k[1:]}": v for k, v in props.items()})
        return Entity(properties=properties, id=entity_id)

    return [
        entity("undefined"),
        entity("boolean_false", i1=False),
        entity("boolean_true", i1=True),
        entity("number_1", i2=1),
        entity("number_0", i2=0),
        entity("string_len", i3="string"),
        entity("string_nolen", i3=""),
        entity("date_epoch", i4=EPOCH),
        entity("date_5min", i4=now - timedelta(minutes=5)),
        entity("enum", i6="alternative1"),
        entity("photo", i7="https://example.com/photo.jpg"),
        entity("array_even", i8=[0, 2, 4]),
        entity("array_odd", i8=[1, 3, 5]),
        entity("array_string_first", i9=["string1", "string2", "string3"]),
        entity("array_string_second", i9=["string4", "string5", "string6"]),
        Entity(properties={"meta.id": "location", "meta.location": [15.6, 56.2]}, id="location"),
    ]


ALL_IDS = [
    "undefined",
    "boolean_false",
    "boolean_true",
    "number_1",
    "number_0",
    "string_len",
    "string_nolen",
    "date_epoch",
    "date_5min",
    "enum",
    "photo",
    "array_even",
    "array_odd",
    "array_string_first",
    "array_string_second",
    "location",
]


def ids(entities) -> list:
    return [e.id for e in entities]


def all_but(*excluded: str) -> list[str]:
    return [i for i in ALL_IDS if i not in excluded]

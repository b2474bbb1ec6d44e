"""
Schema Model: property and group declarations for one entity type.

The schema is a lookup table for the rest of the package. Validation
runs once, before an EntitySchema is built, and collects every problem
it finds so a broken declaration can be fixed in one pass.

Raw declaration format (as loaded from JSON/YAML by the caller):

    {
        "groups": [{"id": 1, "name": "Inventory"}],
        "properties": [
            {"key": "inventory.6", "type": "enum", "name": "Kind",
             "alternatives": ["a", "b"], "modifiable": True, "group_id": 1},
        ],
        "translations": {"en-US": {"inventory.6": "Kind"}},
    }
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from ..config import build_key_pattern, get_config
from ..errors import SchemaError
from ..rules.types import PropType, is_number


@dataclass(frozen=True)
class SchemaGroup:
    """A named group that properties may reference by id."""
    id: int | float
    name: str


@dataclass(frozen=True)
class SchemaProp:
    """
    Declaration of one entity property.

    Attributes:
        key: Unique key, namespaced by convention ("meta.id", "inventory.3")
        type: Declared value type; never changes once declared
        name: Display label, unused by filtering
        group_id: Optional reference to a SchemaGroup
        modifiable: True if users may change the value between revisions
        alternatives: Accepted values, present iff type is enum
        help_text / help_image: Presentation data carried through untouched
    """
    key: str
    type: PropType
    name: str
    group_id: Optional[int | float] = None
    modifiable: bool = False
    alternatives: Optional[tuple[str, ...]] = None
    help_text: Optional[str] = None
    help_image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaProp":
        alternatives = data.get("alternatives")
        return cls(
            key=data["key"],
            type=PropType(data["type"]),
            name=data["name"],
            group_id=data.get("group_id"),
            modifiable=bool(data.get("modifiable", False)),
            alternatives=tuple(alternatives) if alternatives is not None else None,
            help_text=data.get("help_text"),
            help_image=data.get("help_image"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"key": self.key, "type": self.type.value, "name": self.name}
        if self.group_id is not None:
            out["group_id"] = self.group_id
        if self.modifiable:
            out["modifiable"] = True
        if self.alternatives is not None:
            out["alternatives"] = list(self.alternatives)
        if self.help_text is not None:
            out["help_text"] = self.help_text
        if self.help_image is not None:
            out["help_image"] = self.help_image
        return out


@dataclass(frozen=True)
class EntitySchema:
    """
    A validated schema.

    Build it with EntitySchema.from_dict(raw), which validates first.
    props_by_key is a read-only key -> SchemaProp mapping.
    """
    groups: tuple[SchemaGroup, ...]
    properties: tuple[SchemaProp, ...]
    translations: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self,
            "_props_by_key",
            MappingProxyType({p.key: p for p in self.properties}),
        )

    @property
    def props_by_key(self) -> Mapping[str, SchemaProp]:
        return self._props_by_key

    def get(self, key: str) -> Optional[SchemaProp]:
        return self._props_by_key.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._props_by_key

    def __iter__(self) -> Iterator[SchemaProp]:
        return iter(self.properties)

    def __len__(self) -> int:
        return len(self.properties)

    def read_only_props(self) -> list[SchemaProp]:
        """Properties not marked modifiable, in declaration order."""
        return [p for p in self.properties if not p.modifiable]

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        namespaces: Iterable[str] | None = None,
    ) -> "EntitySchema":
        """
        Validate a raw declaration and build the schema.

        Raises:
            SchemaError: If the declaration is malformed
        """
        validate_schema(data, namespaces)
        return cls(
            groups=tuple(SchemaGroup(id=g["id"], name=g["name"]) for g in data["groups"]),
            properties=tuple(SchemaProp.from_dict(p) for p in data["properties"]),
            translations=MappingProxyType(dict(data.get("translations") or {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": [{"id": g.id, "name": g.name} for g in self.groups],
            "properties": [p.to_dict() for p in self.properties],
            "translations": {k: dict(v) for k, v in self.translations.items()},
        }


# =============================================================================
# Validation
# =============================================================================

def _validate_groups(groups: Sequence[Any], errors: list[str]) -> set:
    group_ids: set = set()
    for i, group in enumerate(groups):
        if not isinstance(group, Mapping):
            errors.append(f"group[{i}] must be an object")
            continue
        gid = group.get("id")
        if not is_number(gid):
            errors.append(f"group[{i}] must have a numeric id")
        elif gid in group_ids:
            errors.append(f"group[{i}] duplicates id {gid}")
        else:
            group_ids.add(gid)
        if not isinstance(group.get("name"), str):
            errors.append(f"group[{i}] must have a string name")
    return group_ids


def _validate_prop(
    i: int,
    prop: Any,
    key_pattern: re.Pattern,
    group_ids: set,
    seen_keys: set,
    errors: list[str],
) -> None:
    if not isinstance(prop, Mapping):
        errors.append(f"property[{i}] must be an object")
        return

    key = prop.get("key")
    label = f"property '{key}'" if isinstance(key, str) else f"property[{i}]"

    if not isinstance(key, str) or not key_pattern.match(key):
        errors.append(f"{label} has an invalid key (expected <namespace>.<id>)")
    elif key in seen_keys:
        errors.append(f"{label} is declared more than once")
    else:
        seen_keys.add(key)

    raw_type = prop.get("type")
    prop_type = PropType.parse(raw_type) if raw_type is not None else None
    if raw_type is None:
        errors.append(f"{label} is missing type")
    elif prop_type is None:
        errors.append(
            f"{label} has unknown type '{raw_type}'. "
            f"Allowed: {', '.join(t.value for t in PropType)}"
        )

    if not isinstance(prop.get("name"), str):
        errors.append(f"{label} is missing name")

    alternatives = prop.get("alternatives")
    if prop_type is PropType.ENUM:
        if (
            not isinstance(alternatives, (list, tuple))
            or not alternatives
            or not all(isinstance(a, str) for a in alternatives)
        ):
            errors.append(f"{label} is an enum and needs a non-empty list of string alternatives")
    elif alternatives is not None:
        errors.append(f"{label} has alternatives but is not an enum")

    modifiable = prop.get("modifiable")
    if modifiable is not None and not isinstance(modifiable, bool):
        errors.append(f"{label} has a non-boolean modifiable flag")

    group_id = prop.get("group_id")
    if group_id is not None and (not is_number(group_id) or group_id not in group_ids):
        errors.append(f"{label} references unknown group {group_id}")


def validate_schema(data: Mapping[str, Any], namespaces: Iterable[str] | None = None) -> None:
    """
    Validate a raw schema declaration.

    Args:
        data: Mapping with "groups" and "properties" lists
        namespaces: Allowed key namespaces (default: from config)

    Raises:
        SchemaError: Listing every problem found
    """
    if not isinstance(data, Mapping):
        raise SchemaError([f"schema must be an object, got {type(data).__name__}"])

    errors: list[str] = []
    groups = data.get("groups")
    properties = data.get("properties")

    if not isinstance(groups, (list, tuple)):
        errors.append("schema is missing a groups list")
    if not isinstance(properties, (list, tuple)):
        errors.append("schema is missing a properties list")
    if errors:
        raise SchemaError(errors)

    if namespaces is None:
        namespaces = get_config().filter.key_namespaces
    key_pattern = build_key_pattern(namespaces)

    group_ids = _validate_groups(groups, errors)
    seen_keys: set = set()
    for i, prop in enumerate(properties):
        _validate_prop(i, prop, key_pattern, group_ids, seen_keys, errors)

    if errors:
        raise SchemaError(errors)

"""
Filter node types.

This module defines:
- Entity: Identity plus a property mapping
- FilterCondition: One clause of a filter (field, type, operator, value)
- NoValue / ScalarValue / RangeValue / ListValue: Operand nodes, one per
  operator arity, produced by the condition validator from the raw value
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from ..errors import ValidationError
from .types import PropType


# =============================================================================
# Entities
# =============================================================================

@dataclass(frozen=True)
class Entity:
    """
    An entity to be filtered.

    Attributes:
        properties: Property key -> value. A key that is absent, or present
            with value None, is "unknown".
        id: Opaque identity, never inspected by the engine
    """
    properties: Mapping[str, Any] = field(default_factory=dict)
    id: Any = None


def entity_properties(entity: Any) -> Mapping[str, Any]:
    """
    Return the property mapping of an entity.

    Accepts Entity, any object with a `properties` mapping, or a plain
    mapping holding a "properties" key.
    """
    if isinstance(entity, Mapping):
        props = entity.get("properties")
    else:
        props = getattr(entity, "properties", None)
    if props is None:
        return {}
    return props


# =============================================================================
# Operand Nodes
# =============================================================================

@dataclass(frozen=True)
class NoValue:
    """Operand of operators that take no value (known, unknown, true, false)."""

    def __repr__(self) -> str:
        return "NoValue"


NO_VALUE = NoValue()


@dataclass(frozen=True)
class ScalarValue:
    """
    A single operand value.

    Examples:
        ScalarValue(50)                      # number.gt
        ScalarValue("main*street")           # string.matches
        ScalarValue(datetime(2024, 1, 1))    # date.before
    """
    value: Any

    def __repr__(self) -> str:
        return f"Scalar({self.value!r})"


@dataclass(frozen=True)
class RangeValue:
    """
    A closed range for between/not_between.

    Semantics: low <= value <= high. A range with low > high is accepted
    and simply contains nothing.
    """
    low: Any
    high: Any

    def __repr__(self) -> str:
        return f"Range({self.low!r}, {self.high!r})"


@dataclass(frozen=True)
class ListValue:
    """
    A list of operand values for any_of/none_of/all_of.

    Attributes:
        values: Tuple of values (frozen for immutability). May be empty.
    """
    values: tuple

    def __repr__(self) -> str:
        return f"List({list(self.values)!r})"


Operand = Union[NoValue, ScalarValue, RangeValue, ListValue]


# =============================================================================
# Filter Condition
# =============================================================================

_REQUIRED_KEYS = ("field", "type", "operator")


@dataclass(frozen=True)
class FilterCondition:
    """
    One clause of a filter.

    Attributes:
        field: Schema property key
        type: Declared property type; must equal the schema's type
        operator: Operator name legal for the type (e.g. "eq", "any_of")
        value: Raw operand; None for no-arg operators, a scalar, a
            two-element [low, high] range, or a list

    Examples:
        FilterCondition("inventory.2", PropType.NUMBER, "between", [0, 10])
        FilterCondition("inventory.6", PropType.ENUM, "any_of", ["a", "b"])
        FilterCondition("meta.location", PropType.LOCATION, "known")
    """
    field: str
    type: PropType | str
    operator: str
    value: Any = None

    def __post_init__(self):
        # Normalize known type strings; anything else is left for the validator to reject
        prop_type = PropType.parse(self.type)
        if prop_type is not None:
            object.__setattr__(self, "type", prop_type)

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCondition":
        """
        Build a condition from its mapping form.

        Raises:
            ValidationError: If field, type or operator is missing
        """
        missing = [k for k in _REQUIRED_KEYS if data.get(k) is None]
        if missing:
            raise ValidationError(
                f"Filter condition is missing required key(s): {', '.join(missing)}",
                field=data.get("field"),
                operator=data.get("operator"),
            )
        return cls(
            field=data["field"],
            type=data["type"],
            operator=data["operator"],
            value=data.get("value"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Mapping form; omits value for no-arg conditions."""
        out: dict[str, Any] = {
            "field": self.field,
            "type": str(self.type),
            "operator": self.operator,
        }
        if self.value is not None:
            out["value"] = list(self.value) if isinstance(self.value, tuple) else self.value
        return out

    def __repr__(self) -> str:
        if self.value is None:
            return f"Cond({self.field} {self.type}.{self.operator})"
        return f"Cond({self.field} {self.type}.{self.operator} {self.value!r})"


def as_condition(condition: FilterCondition | Mapping[str, Any]) -> FilterCondition:
    """Accept a FilterCondition or its mapping form."""
    if isinstance(condition, FilterCondition):
        return condition
    if isinstance(condition, Mapping):
        return FilterCondition.from_dict(condition)
    raise ValidationError(
        f"Filter condition must be a FilterCondition or mapping, got {type(condition).__name__}"
    )


__all__ = [
    "Entity",
    "entity_properties",
    "NoValue",
    "NO_VALUE",
    "ScalarValue",
    "RangeValue",
    "ListValue",
    "Operand",
    "FilterCondition",
    "as_condition",
]

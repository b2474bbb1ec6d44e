"""
Operator Registry - Single source of truth for operator semantics.

Two-level table: property type -> operator name -> OperatorSpec.
Used by:
- The condition validator (reject unknown (type, operator) pairs and
  ill-shaped values before anything is evaluated)
- The execution engine (build the predicate for a validated condition)

Design:
- Each operator declares the params it takes; the value shape is derived
  from them, so validation and evaluation cannot drift apart
- The table is built once at import and exposed read-only
- Adding an operator means adding a row here and a constructor in eval.py
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, FrozenSet, Mapping, Optional, Tuple

from . import eval as ops
from .nodes import Operand
from .types import PropType, ValueShape

_LIST_PARAMS = (PropType.NUMBER_ARRAY, PropType.STRING_ARRAY)


@dataclass(frozen=True)
class OperatorSpec:
    """
    Specification for a single operator of a single property type.

    Attributes:
        name: Operator name (e.g., "eq", "any_of")
        prop_type: Property type the operator belongs to
        params: Argument contract. () takes no value, (T,) one scalar,
            (T, T) a [low, high] range, (array:T,) a list of T
        build: Predicate constructor, build(field, operand) -> predicate
    """
    name: str
    prop_type: PropType
    params: Tuple[PropType, ...]
    build: Callable[[str, Operand], ops.Predicate]

    @property
    def shape(self) -> ValueShape:
        if not self.params:
            return ValueShape.NONE
        if len(self.params) == 2:
            return ValueShape.RANGE
        if self.params[0] in _LIST_PARAMS:
            return ValueShape.LIST
        return ValueShape.SCALAR

    @property
    def value_type(self) -> Optional[PropType]:
        """Scalar type each supplied value (or list element) must have."""
        if not self.params:
            return None
        return self.params[0].element_type

    def __repr__(self) -> str:
        params = ", ".join(p.value for p in self.params)
        return f"OperatorSpec({self.prop_type.value}.{self.name}({params}))"


def _table(prop_type: PropType, *entries: tuple) -> Mapping[str, OperatorSpec]:
    """Build one read-only row of the registry, presence operators first."""
    rows = {
        "known": OperatorSpec("known", prop_type, (), ops.build_known),
        "unknown": OperatorSpec("unknown", prop_type, (), ops.build_unknown),
    }
    for name, params, build in entries:
        rows[name] = OperatorSpec(name, prop_type, params, build)
    return MappingProxyType(rows)


_NUM = PropType.NUMBER
_STR = PropType.STRING
_DATE = PropType.DATE
_NUMS = PropType.NUMBER_ARRAY
_STRS = PropType.STRING_ARRAY


# =============================================================================
# OPERATOR REGISTRY - Single Source of Truth
# =============================================================================

OPERATOR_REGISTRY: Mapping[PropType, Mapping[str, OperatorSpec]] = MappingProxyType({
    PropType.BOOLEAN: _table(
        PropType.BOOLEAN,
        ("true", (), ops.build_true),
        ("false", (), ops.build_false),
    ),
    PropType.NUMBER: _table(
        PropType.NUMBER,
        ("eq", (_NUM,), ops.build_number_eq),
        ("neq", (_NUM,), ops.build_number_neq),
        ("gt", (_NUM,), ops.build_number_gt),
        ("gte", (_NUM,), ops.build_number_gte),
        ("lt", (_NUM,), ops.build_number_lt),
        ("lte", (_NUM,), ops.build_number_lte),
        ("between", (_NUM, _NUM), ops.build_number_between),
        ("not_between", (_NUM, _NUM), ops.build_number_not_between),
        ("any_of", (_NUMS,), ops.build_number_any_of),
        ("none_of", (_NUMS,), ops.build_number_none_of),
    ),
    PropType.STRING: _table(
        PropType.STRING,
        ("eq", (_STR,), ops.build_string_eq),
        ("neq", (_STR,), ops.build_string_neq),
        ("matches", (_STR,), ops.build_matches),
        ("not_matches", (_STR,), ops.build_not_matches),
        ("any_of", (_STRS,), ops.build_string_any_of),
        ("none_of", (_STRS,), ops.build_string_none_of),
    ),
    PropType.ENUM: _table(
        PropType.ENUM,
        ("eq", (_STR,), ops.build_enum_eq),
        ("neq", (_STR,), ops.build_enum_neq),
        ("matches", (_STR,), ops.build_matches),
        ("not_matches", (_STR,), ops.build_not_matches),
        ("any_of", (_STRS,), ops.build_enum_any_of),
        ("none_of", (_STRS,), ops.build_enum_none_of),
    ),
    PropType.DATE: _table(
        PropType.DATE,
        ("before", (_DATE,), ops.build_date_before),
        ("after", (_DATE,), ops.build_date_after),
        ("between", (_DATE, _DATE), ops.build_date_between),
        ("not_between", (_DATE, _DATE), ops.build_date_not_between),
    ),
    PropType.PHOTO: _table(PropType.PHOTO),
    PropType.NUMBER_ARRAY: _table(
        PropType.NUMBER_ARRAY,
        ("any_of", (_NUMS,), ops.build_number_array_any_of),
        ("none_of", (_NUMS,), ops.build_number_array_none_of),
        ("all_of", (_NUMS,), ops.build_number_array_all_of),
    ),
    PropType.STRING_ARRAY: _table(
        PropType.STRING_ARRAY,
        ("any_of", (_STRS,), ops.build_string_array_any_of),
        ("none_of", (_STRS,), ops.build_string_array_none_of),
        ("all_of", (_STRS,), ops.build_string_array_all_of),
    ),
    PropType.LOCATION: _table(PropType.LOCATION),
})

# Every operator name used by at least one type
ALL_OPERATORS: FrozenSet[str] = frozenset(
    name for row in OPERATOR_REGISTRY.values() for name in row
)


def get_operator_spec(prop_type: PropType | str, operator: str) -> Optional[OperatorSpec]:
    """
    Get operator specification from registry.

    Args:
        prop_type: Property type (enum member or wire string)
        operator: Operator name

    Returns:
        OperatorSpec if the pair exists, None otherwise
    """
    parsed = PropType.parse(prop_type)
    if parsed is None:
        return None
    return OPERATOR_REGISTRY[parsed].get(operator)


def operators_for(prop_type: PropType | str) -> Tuple[str, ...]:
    """Operator names legal for a property type, in registry order."""
    parsed = PropType.parse(prop_type)
    if parsed is None:
        return ()
    return tuple(OPERATOR_REGISTRY[parsed])


def is_operator_supported(prop_type: PropType | str, operator: str) -> bool:
    """Check if operator exists for the property type."""
    return get_operator_spec(prop_type, operator) is not None

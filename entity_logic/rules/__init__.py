"""
Filter rules: property types, operator registry, condition validation
and the condition codec.

Design principles:
- One registry row per (property type, operator); validation and
  evaluation both read it, so they cannot disagree
- Conditions are validated against the live schema before use
- Operand values become typed nodes (NoValue, ScalarValue, RangeValue,
  ListValue) once validated
- Evaluation never raises: a mis-shaped stored value fails to match
"""

from .types import (
    PropType,
    ValueShape,
    ReasonCode,
    EvalResult,
    is_number,
    is_finite_number,
    is_sequence,
    scalars_equal,
    values_equal,
)
from .nodes import (
    Entity,
    entity_properties,
    FilterCondition,
    as_condition,
    NoValue,
    NO_VALUE,
    ScalarValue,
    RangeValue,
    ListValue,
    Operand,
)
from .eval import (
    Predicate,
    compile_glob,
)
from .registry import (
    OperatorSpec,
    OPERATOR_REGISTRY,
    ALL_OPERATORS,
    get_operator_spec,
    operators_for,
    is_operator_supported,
)
from .validator import (
    CompiledCondition,
    validate_condition,
    validate_filter,
    compile_condition,
    compile_filter,
)
from .codec import (
    serialize_filter_condition,
    unserialize_filter_condition,
    serialize_filter,
    unserialize_filter,
    is_filter_condition_equal,
    is_filter_equal,
    dump_filter,
    load_filter,
)

__all__ = [
    # Types
    "PropType",
    "ValueShape",
    "ReasonCode",
    "EvalResult",
    "is_number",
    "is_finite_number",
    "is_sequence",
    "scalars_equal",
    "values_equal",
    # Nodes
    "Entity",
    "entity_properties",
    "FilterCondition",
    "as_condition",
    "NoValue",
    "NO_VALUE",
    "ScalarValue",
    "RangeValue",
    "ListValue",
    "Operand",
    # Evaluation
    "Predicate",
    "compile_glob",
    # Registry
    "OperatorSpec",
    "OPERATOR_REGISTRY",
    "ALL_OPERATORS",
    "get_operator_spec",
    "operators_for",
    "is_operator_supported",
    # Validation
    "CompiledCondition",
    "validate_condition",
    "validate_filter",
    "compile_condition",
    "compile_filter",
    # Codec
    "serialize_filter_condition",
    "unserialize_filter_condition",
    "serialize_filter",
    "unserialize_filter",
    "is_filter_condition_equal",
    "is_filter_equal",
    "dump_filter",
    "load_filter",
]

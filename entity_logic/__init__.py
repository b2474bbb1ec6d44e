"""
entity-logic: schema-governed filtering of entities.

Given a schema (typed property declarations) and a filter (a list of
conditions), validate the filter against the schema and evaluate it over
entities. Also validates property bags on write and guards read-only
properties between revisions.
"""

from .errors import SchemaError, ValidationError
from .rules import (
    PropType,
    Entity,
    FilterCondition,
    OperatorSpec,
    OPERATOR_REGISTRY,
    EvalResult,
    ReasonCode,
    validate_condition,
    validate_filter,
    serialize_filter_condition,
    unserialize_filter_condition,
    serialize_filter,
    unserialize_filter,
    is_filter_condition_equal,
    is_filter_equal,
    dump_filter,
    load_filter,
)
from .schema import (
    SchemaGroup,
    SchemaProp,
    EntitySchema,
    validate_schema,
    validate_properties,
    validate_properties_modifiable,
)
from .engine import (
    EntityLogic,
    SeparatedResults,
    execute,
    matches,
    execute_with_separated_results,
    explain,
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "SchemaError",
    "ValidationError",
    # Schema
    "SchemaGroup",
    "SchemaProp",
    "EntitySchema",
    "validate_schema",
    "validate_properties",
    "validate_properties_modifiable",
    # Filters
    "PropType",
    "Entity",
    "FilterCondition",
    "OperatorSpec",
    "OPERATOR_REGISTRY",
    "EvalResult",
    "ReasonCode",
    "validate_condition",
    "validate_filter",
    # Codec
    "serialize_filter_condition",
    "unserialize_filter_condition",
    "serialize_filter",
    "unserialize_filter",
    "is_filter_condition_equal",
    "is_filter_equal",
    "dump_filter",
    "load_filter",
    # Engine
    "EntityLogic",
    "SeparatedResults",
    "execute",
    "matches",
    "execute_with_separated_results",
    "explain",
]

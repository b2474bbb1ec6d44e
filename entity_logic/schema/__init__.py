"""
Schema Model plus the write-side validators that consume it.
"""

from .model import (
    SchemaGroup,
    SchemaProp,
    EntitySchema,
    validate_schema,
)
from .properties import (
    EXPECTED_SHAPES,
    value_matches_prop_type,
    validate_properties,
)
from .mutability import validate_properties_modifiable

__all__ = [
    "SchemaGroup",
    "SchemaProp",
    "EntitySchema",
    "validate_schema",
    "EXPECTED_SHAPES",
    "value_matches_prop_type",
    "validate_properties",
    "validate_properties_modifiable",
]

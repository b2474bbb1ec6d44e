"""
Property Validator: check an entity property bag against the schema.

Used on writes. Only keys present in the bag are checked, so partial
updates are legal; a None value clears a property and is always accepted.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ..config import ISO_DATE_PREFIX
from ..errors import ValidationError
from ..rules.types import PropType, is_finite_number, is_sequence
from ..utils.logger import get_logger
from .model import EntitySchema

# Human-readable shape per type, for error messages
EXPECTED_SHAPES: dict[PropType, str] = {
    PropType.BOOLEAN: "a boolean",
    PropType.NUMBER: "a finite number",
    PropType.STRING: "a string",
    PropType.ENUM: "a string",
    PropType.PHOTO: "a string (URL)",
    PropType.DATE: "a date/datetime or an ISO-8601 date string",
    PropType.NUMBER_ARRAY: "a list of finite numbers",
    PropType.STRING_ARRAY: "a list of strings",
    PropType.LOCATION: "a list of at least two finite numbers",
}


def value_matches_prop_type(value: Any, prop_type: PropType) -> bool:
    """
    Check a stored property value against its declared type.

    None is not handled here; callers decide what absence means.
    """
    if prop_type is PropType.BOOLEAN:
        return isinstance(value, bool)
    if prop_type is PropType.NUMBER:
        return is_finite_number(value)
    if prop_type in (PropType.STRING, PropType.ENUM, PropType.PHOTO):
        return isinstance(value, str)
    if prop_type is PropType.DATE:
        if isinstance(value, date):
            return True
        return isinstance(value, str) and ISO_DATE_PREFIX.match(value) is not None
    if prop_type is PropType.NUMBER_ARRAY:
        return is_sequence(value) and all(is_finite_number(v) for v in value)
    if prop_type is PropType.STRING_ARRAY:
        return is_sequence(value) and all(isinstance(v, str) for v in value)
    if prop_type is PropType.LOCATION:
        return is_sequence(value) and len(value) >= 2 and all(is_finite_number(v) for v in value)
    return False


def validate_properties(schema: EntitySchema, properties: Mapping[str, Any]) -> None:
    """
    Validate a property bag.

    Raises:
        ValidationError: On the first key that is not in the schema, or
            whose value does not have the declared shape
    """
    for key, value in properties.items():
        prop = schema.get(key)
        if prop is None:
            reason = f"Unknown property: {key}"
            get_logger().rejected("PROPERTIES", reason, field=key)
            raise ValidationError(reason, field=key)

        if value is None:
            continue

        if not value_matches_prop_type(value, prop.type):
            reason = (
                f"Property {key} ({prop.type.value}) must be "
                f"{EXPECTED_SHAPES[prop.type]}, got {value!r}"
            )
            get_logger().rejected("PROPERTIES", reason, field=key)
            raise ValidationError(reason, field=key)

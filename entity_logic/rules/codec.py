"""
Condition Codec: storage form of filter conditions, and condition equality.

In memory, date condition values are aware datetime objects. In storage
(saved filters, transport) they are ISO-8601 strings. Every other
condition type has the same representation in both forms.

Serialization is canonical: a datetime and any ISO string denoting the
same instant serialize to the same UTC string, which is what condition
equality compares.

Saved filters are stored as YAML:

    - field: inventory.4
      type: date
      operator: between
      value: ['2024-01-01T00:00:00+00:00', '2024-02-01T00:00:00+00:00']
    - field: inventory.3
      type: string
      operator: matches
      value: main*
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

import yaml

from ..errors import ValidationError
from ..utils.datetime_utils import format_iso_datetime, normalize_datetime
from .nodes import FilterCondition, as_condition
from .types import PropType, is_sequence, values_equal

ConditionLike = FilterCondition | Mapping[str, Any]


def _serialize_date(value: Any) -> Any:
    if isinstance(value, (date, str)):
        instant, err = normalize_datetime(value)
        if instant is not None and not err:
            return format_iso_datetime(instant)
    # Not date-like; left as is for the validator to reject
    return value


def _unserialize_date(value: Any, cond: FilterCondition) -> Any:
    if not isinstance(value, (date, str)):
        return value
    instant, err = normalize_datetime(value, param_name=f"{cond.field} value")
    if err:
        raise ValidationError(err, field=cond.field, operator=cond.operator)
    return instant


def _map_value(value: Any, fn) -> Any:
    if value is None:
        return None
    if is_sequence(value):
        return [fn(v) for v in value]
    return fn(value)


def serialize_filter_condition(condition: ConditionLike) -> FilterCondition:
    """
    Convert a condition to its storage form.

    Date values (scalar or each range element) become canonical UTC
    ISO-8601 strings; all other conditions are returned unchanged.
    """
    cond = as_condition(condition)
    if cond.type is not PropType.DATE:
        return cond
    return replace(cond, value=_map_value(cond.value, _serialize_date))


def unserialize_filter_condition(condition: ConditionLike) -> FilterCondition:
    """
    Convert a condition from its storage form.

    ISO-8601 date strings become aware datetimes (naive input is read
    as UTC); all other conditions are returned unchanged.

    Raises:
        ValidationError: If a date string cannot be parsed
    """
    cond = as_condition(condition)
    if cond.type is not PropType.DATE:
        return cond
    return replace(cond, value=_map_value(cond.value, lambda v: _unserialize_date(v, cond)))


def serialize_filter(conditions: Iterable[ConditionLike]) -> list[FilterCondition]:
    return [serialize_filter_condition(c) for c in conditions]


def unserialize_filter(conditions: Iterable[ConditionLike]) -> list[FilterCondition]:
    return [unserialize_filter_condition(c) for c in conditions]


def is_filter_condition_equal(a: ConditionLike, b: ConditionLike) -> bool:
    """
    Structural equality of two conditions.

    Both sides are serialized first, so a datetime and an ISO string for
    the same instant compare equal.
    """
    left = serialize_filter_condition(a)
    right = serialize_filter_condition(b)
    return (
        left.type == right.type
        and left.field == right.field
        and left.operator == right.operator
        and values_equal(left.value, right.value)
    )


def is_filter_equal(a: Sequence[ConditionLike], b: Sequence[ConditionLike]) -> bool:
    """Two filters are equal iff they have the same conditions in the same order."""
    if len(a) != len(b):
        return False
    return all(is_filter_condition_equal(x, y) for x, y in zip(a, b))


# =============================================================================
# Saved filters (YAML)
# =============================================================================

def dump_filter(conditions: Iterable[ConditionLike]) -> str:
    """Serialize a filter to a YAML document."""
    data = [c.to_dict() for c in serialize_filter(conditions)]
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def load_filter(text: str) -> list[FilterCondition]:
    """
    Load a filter saved with dump_filter.

    Only the document structure is checked here; validate the result
    against a schema before executing it.

    Raises:
        ValidationError: If the document is not a list of conditions
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"Saved filter is not valid YAML: {e}") from e

    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(c, Mapping) for c in data):
        raise ValidationError("Saved filter must be a list of conditions")
    return unserialize_filter(data)

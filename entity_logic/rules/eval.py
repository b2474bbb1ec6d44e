"""
Predicate constructors for filter operators.

Every constructor has the signature build(field, operand) -> Predicate,
where Predicate(entity, prop_value) -> bool.

Strict shape contracts:
- A stored value of the wrong runtime shape never matches (returns False)
- Absent or None values only ever satisfy 'unknown'
- neq / none_of / not_between / not_matches also require a known,
  correctly typed value; they are not the bare negation of their partner
- String and string-array comparisons are case-insensitive, enum
  equality and membership are case-sensitive
- Glob patterns are case-insensitive for both string and enum

Predicates are pure: they never raise, never mutate the entity.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from ..utils.datetime_utils import ensure_aware, to_instant
from .nodes import ListValue, Operand, RangeValue, ScalarValue
from .types import is_number, is_sequence

Predicate = Callable[[Any, Any], bool]


def compile_glob(pattern: str) -> re.Pattern:
    """
    Compile a user-facing wildcard pattern to a case-insensitive regex.

    '*' matches any run of characters; every other character is matched
    literally. The match is unanchored, so 'main' finds 'Main Street'.
    """
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.IGNORECASE)


def _fold(value: str) -> str:
    return value.lower()


# =============================================================================
# Presence (all types)
# =============================================================================

def build_known(field: str, operand: Operand) -> Predicate:
    return lambda entity, value: value is not None


def build_unknown(field: str, operand: Operand) -> Predicate:
    return lambda entity, value: value is None


# =============================================================================
# Boolean
# =============================================================================

def build_true(field: str, operand: Operand) -> Predicate:
    return lambda entity, value: value is True


def build_false(field: str, operand: Operand) -> Predicate:
    return lambda entity, value: value is False


# =============================================================================
# Number
# =============================================================================

def build_number_eq(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value == target


def build_number_neq(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value != target


def build_number_gt(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value > target


def build_number_gte(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value >= target


def build_number_lt(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value < target


def build_number_lte(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: is_number(value) and value <= target


def build_number_between(field: str, operand: RangeValue) -> Predicate:
    low, high = operand.low, operand.high
    return lambda entity, value: is_number(value) and low <= value <= high


def build_number_not_between(field: str, operand: RangeValue) -> Predicate:
    low, high = operand.low, operand.high
    return lambda entity, value: is_number(value) and (value < low or value > high)


def build_number_any_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(operand.values)
    return lambda entity, value: is_number(value) and value in wanted


def build_number_none_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(operand.values)
    return lambda entity, value: is_number(value) and value not in wanted


# =============================================================================
# String (case-insensitive)
# =============================================================================

def build_string_eq(field: str, operand: ScalarValue) -> Predicate:
    target = _fold(operand.value)
    return lambda entity, value: isinstance(value, str) and _fold(value) == target


def build_string_neq(field: str, operand: ScalarValue) -> Predicate:
    target = _fold(operand.value)
    return lambda entity, value: isinstance(value, str) and _fold(value) != target


def build_string_any_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(_fold(v) for v in operand.values)
    return lambda entity, value: isinstance(value, str) and _fold(value) in wanted


def build_string_none_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(_fold(v) for v in operand.values)
    return lambda entity, value: isinstance(value, str) and _fold(value) not in wanted


# Shared by string and enum
def build_matches(field: str, operand: ScalarValue) -> Predicate:
    regex = compile_glob(operand.value)
    return lambda entity, value: isinstance(value, str) and regex.search(value) is not None


def build_not_matches(field: str, operand: ScalarValue) -> Predicate:
    regex = compile_glob(operand.value)
    return lambda entity, value: isinstance(value, str) and regex.search(value) is None


# =============================================================================
# Enum (case-sensitive)
# =============================================================================

def build_enum_eq(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: isinstance(value, str) and value == target


def build_enum_neq(field: str, operand: ScalarValue) -> Predicate:
    target = operand.value
    return lambda entity, value: isinstance(value, str) and value != target


def build_enum_any_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(operand.values)
    return lambda entity, value: isinstance(value, str) and value in wanted


def build_enum_none_of(field: str, operand: ListValue) -> Predicate:
    wanted = frozenset(operand.values)
    return lambda entity, value: isinstance(value, str) and value not in wanted


# =============================================================================
# Date (absolute instants)
# =============================================================================

def build_date_before(field: str, operand: ScalarValue) -> Predicate:
    at = ensure_aware(operand.value)

    def predicate(entity, value) -> bool:
        instant = to_instant(value)
        return instant is not None and instant < at

    return predicate


def build_date_after(field: str, operand: ScalarValue) -> Predicate:
    at = ensure_aware(operand.value)

    def predicate(entity, value) -> bool:
        instant = to_instant(value)
        return instant is not None and instant > at

    return predicate


def build_date_between(field: str, operand: RangeValue) -> Predicate:
    start, end = ensure_aware(operand.low), ensure_aware(operand.high)

    def predicate(entity, value) -> bool:
        instant = to_instant(value)
        return instant is not None and start <= instant <= end

    return predicate


def build_date_not_between(field: str, operand: RangeValue) -> Predicate:
    start, end = ensure_aware(operand.low), ensure_aware(operand.high)

    def predicate(entity, value) -> bool:
        instant = to_instant(value)
        return instant is not None and (instant < start or instant > end)

    return predicate


# =============================================================================
# Arrays (set semantics over the stored sequence)
# =============================================================================

def _number_members(value: Any) -> frozenset | None:
    # One mistyped element makes the whole array mistyped
    if not is_sequence(value) or not all(is_number(v) for v in value):
        return None
    return frozenset(value)


def _string_members(value: Any) -> frozenset | None:
    if not is_sequence(value) or not all(isinstance(v, str) for v in value):
        return None
    return frozenset(_fold(v) for v in value)


def _array_builders(
    members: Callable[[Any], frozenset | None],
    normalize: Callable[[Any], Any],
) -> tuple[Callable, Callable, Callable]:
    """Make any_of / none_of / all_of constructors for one element type."""

    def _wanted(values: Iterable) -> frozenset:
        return frozenset(normalize(v) for v in values)

    def build_any_of(field: str, operand: ListValue) -> Predicate:
        wanted = _wanted(operand.values)

        def predicate(entity, value) -> bool:
            have = members(value)
            return have is not None and not have.isdisjoint(wanted)

        return predicate

    def build_none_of(field: str, operand: ListValue) -> Predicate:
        wanted = _wanted(operand.values)

        def predicate(entity, value) -> bool:
            have = members(value)
            return have is not None and have.isdisjoint(wanted)

        return predicate

    def build_all_of(field: str, operand: ListValue) -> Predicate:
        wanted = _wanted(operand.values)

        def predicate(entity, value) -> bool:
            have = members(value)
            return have is not None and wanted <= have

        return predicate

    return build_any_of, build_none_of, build_all_of


(
    build_number_array_any_of,
    build_number_array_none_of,
    build_number_array_all_of,
) = _array_builders(_number_members, lambda v: v)

(
    build_string_array_any_of,
    build_string_array_none_of,
    build_string_array_all_of,
) = _array_builders(_string_members, _fold)

"""
Rule evaluation type definitions.

Enums and dataclasses for condition evaluation with strict typing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum, auto
from typing import Any


class PropType(str, Enum):
    """
    Closed set of schema property types.

    Member values are the wire strings, so PropType("array:number") and
    plain string comparisons both work.
    """

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ENUM = "enum"
    DATE = "date"
    PHOTO = "photo"
    NUMBER_ARRAY = "array:number"
    STRING_ARRAY = "array:string"
    LOCATION = "location"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> "PropType | None":
        """Return the PropType for a wire string, or None if it is not one."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_array(self) -> bool:
        """True for types whose values are sequences (arrays and location)."""
        return self in (PropType.NUMBER_ARRAY, PropType.STRING_ARRAY, PropType.LOCATION)

    @property
    def element_type(self) -> "PropType":
        """Scalar type of one element (array types), or the type itself."""
        if self is PropType.NUMBER_ARRAY or self is PropType.LOCATION:
            return PropType.NUMBER
        if self is PropType.STRING_ARRAY:
            return PropType.STRING
        return self


class ValueShape(Enum):
    """Shape of the value an operator takes, derived from its params."""

    NONE = auto()    # known, unknown, true, false
    SCALAR = auto()  # eq, gt, matches, before, ...
    RANGE = auto()   # between, not_between
    LIST = auto()    # any_of, none_of, all_of


class ReasonCode(IntEnum):
    """
    Reason codes for per-entity evaluation outcomes.

    Only used for explaining results; predicates themselves return bool.
    """

    OK = 0  # Condition holds
    MISSING_VALUE = auto()  # Property absent or None
    TYPE_MISMATCH = auto()  # Stored value does not have the declared shape
    CONDITION_FAILED = auto()  # Value well-formed, condition simply not met


# =============================================================================
# Runtime value classification
# =============================================================================

def is_number(value: Any) -> bool:
    """int or float, excluding bool and NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_finite_number(value: Any) -> bool:
    """A number that is neither NaN nor infinite."""
    return is_number(value) and math.isfinite(value)


def is_sequence(value: Any) -> bool:
    """list or tuple (strings and mappings are not sequences here)."""
    return isinstance(value, (list, tuple))


def scalars_equal(a: Any, b: Any) -> bool:
    """
    Strict scalar equality.

    Unlike ==, True is not equal to 1 and "1" is not equal to 1; numbers
    compare by value across int/float.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    if is_number(a) and is_number(b):
        return a == b
    return type(a) is type(b) and a == b


def values_equal(a: Any, b: Any) -> bool:
    """
    Structural equality for property and condition values.

    Sequences compare element-wise, order- and length-sensitive; anything
    else compares with scalars_equal.
    """
    if is_sequence(a) and is_sequence(b):
        return len(a) == len(b) and all(scalars_equal(x, y) for x, y in zip(a, b))
    if is_sequence(a) or is_sequence(b):
        return False
    return scalars_equal(a, b)


def matches_scalar_type(value: Any, prop_type: PropType) -> bool:
    """
    Check a condition operand against a scalar param type.

    Used by the condition validator; stricter than the property validator
    for dates, which must already be datetime objects here.
    """
    if prop_type is PropType.NUMBER:
        return is_number(value)
    if prop_type in (PropType.STRING, PropType.ENUM, PropType.PHOTO):
        return isinstance(value, str)
    if prop_type is PropType.BOOLEAN:
        return isinstance(value, bool)
    if prop_type is PropType.DATE:
        return isinstance(value, datetime)
    return False


@dataclass(frozen=True)
class EvalResult:
    """
    Outcome of one condition against one entity.

    Contains:
    - ok: Whether the condition holds
    - reason: Why it evaluated this way
    - field/operator/value_repr: What was evaluated, for logging
    """

    ok: bool
    reason: ReasonCode
    field: str
    operator: str
    value_repr: str | None = None
    message: str | None = None

    @classmethod
    def success(cls, field: str, operator: str, value_repr: str | None) -> "EvalResult":
        """Create a result for a condition that holds."""
        return cls(ok=True, reason=ReasonCode.OK, field=field, operator=operator, value_repr=value_repr)

    @classmethod
    def failure(
        cls,
        reason: ReasonCode,
        field: str,
        operator: str,
        value_repr: str | None = None,
        message: str | None = None,
    ) -> "EvalResult":
        """Create a result for a condition that does not hold."""
        return cls(
            ok=False,
            reason=reason,
            field=field,
            operator=operator,
            value_repr=value_repr,
            message=message,
        )

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "ok": self.ok,
            "reason": self.reason.name,
            "field": self.field,
            "operator": self.operator,
            "value": self.value_repr,
            "message": self.message,
        }

    def summary(self) -> str:
        """One-line summary, e.g. 'inventory.2 gt 3 = FAIL (TYPE_MISMATCH)'."""
        status = "PASS" if self.ok else f"FAIL ({self.reason.name})"
        value = f" {self.value_repr}" if self.value_repr is not None else ""
        return f"{self.field} {self.operator}{value} = {status}"

"""
Condition Validator: check filter conditions against a schema.

Validates that each condition:
- references a property declared in the schema
- declares the same type the schema declares for that property
- names an operator that exists for that type
- carries a value of the shape the operator's params require

and resolves it to its OperatorSpec. compile_condition goes one step
further and turns the raw value into an operand node plus a ready-to-run
predicate, which is what the execution engine consumes.

Functions:
- validate_condition / validate_filter: resolve to OperatorSpec(s)
- compile_condition / compile_filter: resolve to CompiledCondition(s)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from ..errors import ValidationError
from ..utils.logger import get_logger
from .eval import Predicate
from .nodes import (
    NO_VALUE,
    FilterCondition,
    ListValue,
    Operand,
    RangeValue,
    ScalarValue,
    as_condition,
    entity_properties,
)
from .registry import OperatorSpec, get_operator_spec, operators_for
from .types import PropType, ValueShape, is_sequence, matches_scalar_type

if TYPE_CHECKING:
    from ..schema.model import EntitySchema, SchemaProp


@dataclass(frozen=True)
class CompiledCondition:
    """
    A validated condition with its predicate built.

    Attributes:
        condition: The condition as supplied
        spec: Resolved operator
        operand: Typed operand node (NO_VALUE, ScalarValue, RangeValue, ListValue)
        predicate: predicate(entity, prop_value) -> bool
    """
    condition: FilterCondition
    spec: OperatorSpec
    operand: Operand
    predicate: Predicate

    @property
    def field(self) -> str:
        return self.condition.field

    def evaluate(self, entity: Any) -> bool:
        """True if the condition holds for the entity."""
        return self.predicate(entity, entity_properties(entity).get(self.condition.field))


def _reject(reason: str, condition: FilterCondition | None = None) -> ValidationError:
    field = condition.field if condition is not None else None
    operator = condition.operator if condition is not None else None
    get_logger().rejected("CONDITION", reason, field=field, operator=operator)
    return ValidationError(reason, field=field, operator=operator)


def _describe(value: Any) -> str:
    return f"{value!r} ({type(value).__name__})"


# Enum operators whose value is a glob pattern, not an alternative
_PATTERN_OPERATORS = frozenset({"matches", "not_matches"})


def _check_alternatives(values: Iterable[Any], prop: "SchemaProp", where: str, condition: FilterCondition) -> None:
    alternatives = prop.alternatives or ()
    outside = [v for v in values if v not in alternatives]
    if outside:
        raise _reject(
            f"{where} values {outside!r} are not alternatives of {prop.key}. "
            f"Allowed: {', '.join(alternatives)}",
            condition,
        )


def _build_operand(spec: OperatorSpec, prop: "SchemaProp", condition: FilterCondition) -> Operand:
    """
    Check the raw value against the operator's params and wrap it.

    Raises:
        ValidationError: If the value has the wrong shape
    """
    value = condition.value
    where = f"{condition.field}: {spec.prop_type.value}.{spec.name}"
    value_type = spec.value_type

    if spec.shape is ValueShape.NONE:
        if value is not None:
            raise _reject(f"{where} takes no value, got {_describe(value)}", condition)
        return NO_VALUE

    if spec.shape is ValueShape.SCALAR:
        if not matches_scalar_type(value, value_type):
            raise _reject(f"{where} requires a {value_type.value} value, got {_describe(value)}", condition)
        if prop.type is PropType.ENUM and spec.name not in _PATTERN_OPERATORS:
            _check_alternatives([value], prop, where, condition)
        return ScalarValue(value)

    if spec.shape is ValueShape.RANGE:
        if not is_sequence(value) or len(value) != 2:
            raise _reject(f"{where} requires a [low, high] pair, got {_describe(value)}", condition)
        if not all(matches_scalar_type(v, value_type) for v in value):
            raise _reject(f"{where} requires two {value_type.value} values, got {value!r}", condition)
        return RangeValue(value[0], value[1])

    # ValueShape.LIST
    if not is_sequence(value):
        raise _reject(f"{where} requires a list of {value_type.value} values, got {_describe(value)}", condition)
    bad = [v for v in value if not matches_scalar_type(v, value_type)]
    if bad:
        raise _reject(f"{where} requires {value_type.value} values only, got {bad!r}", condition)
    if prop.type is PropType.ENUM:
        _check_alternatives(value, prop, where, condition)
    return ListValue(tuple(value))


def _resolve(
    schema: "EntitySchema",
    condition: FilterCondition | Mapping[str, Any],
) -> tuple[FilterCondition, "SchemaProp", OperatorSpec]:
    cond = as_condition(condition)

    for key in ("field", "operator"):
        raw = getattr(cond, key)
        if not isinstance(raw, str):
            raise _reject(f"Filter condition {key} must be a string, got {_describe(raw)}", cond)

    prop = schema.get(cond.field)
    if prop is None:
        raise _reject(f"Filter condition references non-existent schema property: {cond.field}", cond)

    cond_type = PropType.parse(cond.type)
    if cond_type is None:
        raise _reject(f"Filter condition has unknown type '{cond.type}' for {cond.field}", cond)
    if cond_type is not prop.type:
        raise _reject(
            f"Filter condition type '{cond_type.value}' does not match schema type "
            f"'{prop.type.value}' of {cond.field}",
            cond,
        )

    spec = get_operator_spec(prop.type, cond.operator)
    if spec is None:
        raise _reject(
            f"Invalid operator '{cond.operator}' for type {prop.type.value}. "
            f"Supported: {', '.join(operators_for(prop.type))}",
            cond,
        )
    return cond, prop, spec


def validate_condition(
    schema: "EntitySchema",
    condition: FilterCondition | Mapping[str, Any],
) -> OperatorSpec:
    """
    Validate one condition against the schema.

    Returns:
        The resolved OperatorSpec

    Raises:
        ValidationError: If the condition does not fit the schema
    """
    cond, prop, spec = _resolve(schema, condition)
    _build_operand(spec, prop, cond)
    return spec


def compile_condition(
    schema: "EntitySchema",
    condition: FilterCondition | Mapping[str, Any],
) -> CompiledCondition:
    """
    Validate one condition and build its predicate.

    Raises:
        ValidationError: If the condition does not fit the schema
    """
    cond, prop, spec = _resolve(schema, condition)
    operand = _build_operand(spec, prop, cond)
    return CompiledCondition(
        condition=cond,
        spec=spec,
        operand=operand,
        predicate=spec.build(cond.field, operand),
    )


def validate_filter(
    schema: "EntitySchema",
    conditions: Iterable[FilterCondition | Mapping[str, Any]],
) -> list[OperatorSpec]:
    """
    Validate conditions in order, stopping at the first invalid one.

    Raises:
        ValidationError: Tagged with the index of the failing condition
    """
    specs: list[OperatorSpec] = []
    for i, condition in enumerate(conditions):
        try:
            specs.append(validate_condition(schema, condition))
        except ValidationError as e:
            raise e.at_index(i) from e
    return specs


def compile_filter(
    schema: "EntitySchema",
    conditions: Iterable[FilterCondition | Mapping[str, Any]],
) -> list[CompiledCondition]:
    """
    Compile every condition up front, stopping at the first invalid one.

    Raises:
        ValidationError: Tagged with the index of the failing condition
    """
    compiled: list[CompiledCondition] = []
    for i, condition in enumerate(conditions):
        try:
            compiled.append(compile_condition(schema, condition))
        except ValidationError as e:
            raise e.at_index(i) from e
    return compiled

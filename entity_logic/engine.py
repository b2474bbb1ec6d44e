"""
Execution Engine: apply filters to entities.

EntityLogic binds a validated schema and exposes every operation of the
package. The module-level functions do the work and can be used directly
with an EntitySchema.

Usage:
    logic = EntityLogic(schema_dict)
    hits = logic.execute(entities, [
        {"field": "inventory.2", "type": "number", "operator": "gt", "value": 3},
        {"field": "inventory.3", "type": "string", "operator": "matches", "value": "main*"},
    ])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from .config import Config, get_config
from .errors import ValidationError
from .rules.nodes import FilterCondition, ListValue, RangeValue, ScalarValue, entity_properties
from .rules.registry import OperatorSpec
from .rules.types import EvalResult, ReasonCode
from .rules.validator import (
    CompiledCondition,
    compile_condition,
    compile_filter,
    validate_condition,
    validate_filter,
)
from .schema.model import EntitySchema, validate_schema
from .schema.mutability import validate_properties_modifiable
from .schema.properties import validate_properties, value_matches_prop_type
from .utils.logger import get_logger

ConditionLike = FilterCondition | Mapping[str, Any]


@dataclass
class SeparatedResults:
    """Entities split by a filter, each partition in input order."""
    matched: list = field(default_factory=list)
    unmatched: list = field(default_factory=list)


# =============================================================================
# Operations
# =============================================================================

def execute(
    schema: EntitySchema,
    entities: Iterable[Any],
    conditions: Iterable[ConditionLike],
) -> list:
    """
    Return the entities matching every condition.

    Each condition is validated right before it narrows the list, so an
    invalid condition raises even when earlier ones matched nothing.

    Raises:
        ValidationError: Tagged with the index of the failing condition
    """
    remaining = list(entities)
    total = len(remaining)
    applied = 0
    for i, condition in enumerate(conditions):
        try:
            compiled = compile_condition(schema, condition)
        except ValidationError as e:
            raise e.at_index(i) from e
        remaining = [entity for entity in remaining if compiled.evaluate(entity)]
        applied += 1

    get_logger().debug(
        f"execute: {applied} condition(s), {len(remaining)}/{total} matched"
    )
    return remaining


def matches(schema: EntitySchema, entity: Any, conditions: Iterable[ConditionLike]) -> bool:
    """
    True iff every condition holds for the entity.

    All conditions are validated before any is evaluated.
    """
    compiled = compile_filter(schema, conditions)
    return all(c.evaluate(entity) for c in compiled)


def execute_with_separated_results(
    schema: EntitySchema,
    entities: Iterable[Any],
    conditions: Iterable[ConditionLike],
) -> SeparatedResults:
    """
    Split entities into matched and unmatched in one pass.

    All conditions are validated up front.
    """
    compiled = compile_filter(schema, conditions)
    results = SeparatedResults()
    for entity in entities:
        if all(c.evaluate(entity) for c in compiled):
            results.matched.append(entity)
        else:
            results.unmatched.append(entity)

    get_logger().debug(
        f"execute_with_separated_results: {len(compiled)} condition(s), "
        f"{len(results.matched)} matched, {len(results.unmatched)} unmatched"
    )
    return results


def _operand_repr(compiled: CompiledCondition) -> Optional[str]:
    operand = compiled.operand
    if isinstance(operand, ScalarValue):
        return repr(operand.value)
    if isinstance(operand, RangeValue):
        return f"[{operand.low!r}, {operand.high!r}]"
    if isinstance(operand, ListValue):
        return repr(list(operand.values))
    return None


def explain(schema: EntitySchema, entity: Any, conditions: Iterable[ConditionLike]) -> list[EvalResult]:
    """
    Evaluate each condition against one entity and say why it passed or failed.

    Does not short-circuit: every condition gets a result.
    """
    props = entity_properties(entity)
    results: list[EvalResult] = []
    for compiled in compile_filter(schema, conditions):
        name = compiled.field
        op = compiled.spec.name
        value_repr = _operand_repr(compiled)
        value = props.get(name)

        if compiled.predicate(entity, value):
            results.append(EvalResult.success(name, op, value_repr))
        elif value is None:
            results.append(EvalResult.failure(
                ReasonCode.MISSING_VALUE, name, op, value_repr,
                f"{name} is unknown",
            ))
        elif not value_matches_prop_type(value, compiled.spec.prop_type):
            results.append(EvalResult.failure(
                ReasonCode.TYPE_MISMATCH, name, op, value_repr,
                f"{name} holds {value!r}, not a {compiled.spec.prop_type.value} value",
            ))
        else:
            results.append(EvalResult.failure(ReasonCode.CONDITION_FAILED, name, op, value_repr))
    return results


# =============================================================================
# Facade
# =============================================================================

class EntityLogic:
    """
    Filter engine bound to one schema.

    The schema is validated once, here; an invalid schema raises
    SchemaError and no engine is built. Instances hold no mutable state
    and may be shared between threads.
    """

    def __init__(
        self,
        schema: EntitySchema | Mapping[str, Any],
        config: Optional[Config] = None,
    ):
        self.config = config or get_config()
        namespaces = self.config.filter.key_namespaces

        if isinstance(schema, EntitySchema):
            validate_schema(schema.to_dict(), namespaces)
            self.schema = schema
        else:
            self.schema = EntitySchema.from_dict(schema, namespaces)

        get_logger().info(
            f"EntityLogic ready: {len(self.schema)} properties, "
            f"{len(self.schema.groups)} groups"
        )

    @property
    def props_by_key(self):
        return self.schema.props_by_key

    def execute(self, entities: Iterable[Any], conditions: Iterable[ConditionLike]) -> list:
        return execute(self.schema, entities, conditions)

    def matches(self, entity: Any, conditions: Iterable[ConditionLike]) -> bool:
        return matches(self.schema, entity, conditions)

    def execute_with_separated_results(
        self,
        entities: Iterable[Any],
        conditions: Iterable[ConditionLike],
    ) -> SeparatedResults:
        return execute_with_separated_results(self.schema, entities, conditions)

    def explain(self, entity: Any, conditions: Iterable[ConditionLike]) -> list[EvalResult]:
        return explain(self.schema, entity, conditions)

    def validate_condition(self, condition: ConditionLike) -> OperatorSpec:
        return validate_condition(self.schema, condition)

    def validate_filter(self, conditions: Iterable[ConditionLike]) -> list[OperatorSpec]:
        return validate_filter(self.schema, conditions)

    def validate_properties(self, properties: Mapping[str, Any]) -> None:
        validate_properties(self.schema, properties)

    def validate_properties_modifiable(
        self,
        prev_properties: Mapping[str, Any],
        new_properties: Mapping[str, Any],
        *,
        strict: Optional[bool] = None,
    ) -> None:
        if strict is None:
            strict = self.config.filter.strict_readonly
        validate_properties_modifiable(self.schema, prev_properties, new_properties, strict=strict)

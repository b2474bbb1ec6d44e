"""
Error types raised by entity-logic.

SchemaError is fatal to engine construction. ValidationError reports a
condition or property bag that does not fit the schema. Neither is ever
raised while a predicate evaluates an entity: shape mismatches there
simply fail to match.
"""

from __future__ import annotations


class SchemaError(ValueError):
    """Raised when a schema declaration is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid schema: {'; '.join(self.errors)}")


class ValidationError(ValueError):
    """Raised when a filter condition or property bag violates the schema."""

    def __init__(
        self,
        reason: str,
        field: str | None = None,
        operator: str | None = None,
        index: int | None = None,
    ):
        self.reason = reason
        self.field = field
        self.operator = operator
        self.index = index

        prefix = f"Condition {index}: " if index is not None else ""
        super().__init__(f"{prefix}{reason}")

    def at_index(self, index: int) -> "ValidationError":
        """Return a copy of this error tagged with the condition position in its filter."""
        return ValidationError(self.reason, self.field, self.operator, index)

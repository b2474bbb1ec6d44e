"""
Mutability Guard: reject updates that change read-only properties.

Every schema property not marked modifiable must keep its previous
value. A key missing from either bag counts as None, so dropping a
read-only value is a change too. In strict mode the new bag is a
partial payload instead: it may not name read-only keys at all.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..config import get_config
from ..errors import ValidationError
from ..rules.types import values_equal
from ..utils.logger import get_logger
from .model import EntitySchema


def validate_properties_modifiable(
    schema: EntitySchema,
    prev_properties: Mapping[str, Any],
    new_properties: Mapping[str, Any],
    *,
    strict: Optional[bool] = None,
) -> None:
    """
    Compare two revisions of a property bag against the schema.

    Arrays (including location) must match element by element, in order.
    Scalars must match strictly (True is not 1).

    Args:
        schema: Schema declaring which properties are modifiable
        prev_properties: Stored revision
        new_properties: Incoming revision
        strict: Treat new_properties as a partial update payload and reject
            any read-only key it contains, even with an unchanged value.
            Keys it omits are left alone. Defaults to
            FilterConfig.strict_readonly.

    Raises:
        ValidationError: On the first read-only property that changed
    """
    if strict is None:
        strict = get_config().filter.strict_readonly

    for prop in schema.read_only_props():
        key = prop.key

        if strict:
            # new_properties is a partial payload here; omitted keys are untouched
            if key in new_properties:
                reason = f"Property {key} is read-only and may not be included in an update"
                get_logger().rejected("READONLY", reason, field=key)
                raise ValidationError(reason, field=key)
            continue

        before = prev_properties.get(key)
        after = new_properties.get(key)
        if not values_equal(before, after):
            reason = f"Property {key} is read-only: {before!r} -> {after!r}"
            get_logger().rejected("READONLY", reason, field=key)
            raise ValidationError(reason, field=key)

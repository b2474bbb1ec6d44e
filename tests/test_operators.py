"""
Operator semantics tests.

Validates, per property type:
1. Presence operators (known, unknown)
2. Comparison and range operators (number, date)
3. Equality, glob and membership operators (string, enum)
4. Set operators over arrays (any_of, none_of, all_of)
5. Shape mismatches in stored values never match
"""

from datetime import datetime, timedelta, timezone

import pytest

from entity_logic import OPERATOR_REGISTRY, Entity, PropType
from entity_logic.rules import (
    ALL_OPERATORS,
    ValueShape,
    compile_glob,
    get_operator_spec,
    is_operator_supported,
    operators_for,
)
from tests.fixtures import ALL_IDS, EPOCH, all_but, ids


def cond(field: str, prop_type: str, operator: str, value=None) -> dict:
    c = {"field": field, "type": prop_type, "operator": operator}
    if value is not None:
        c["value"] = value
    return c


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

class TestRegistry:
    """Test the operator table itself."""

    def test_every_type_has_presence_operators(self):
        for prop_type in PropType:
            assert operators_for(prop_type)[:2] == ("known", "unknown")

    @pytest.mark.parametrize("prop_type", [PropType.PHOTO, PropType.LOCATION])
    def test_presence_only_types(self, prop_type: PropType):
        assert operators_for(prop_type) == ("known", "unknown")

    @pytest.mark.parametrize("prop_type,operator,shape", [
        ("boolean", "true", ValueShape.NONE),
        ("number", "gt", ValueShape.SCALAR),
        ("number", "between", ValueShape.RANGE),
        ("number", "any_of", ValueShape.LIST),
        ("enum", "any_of", ValueShape.LIST),
        ("date", "not_between", ValueShape.RANGE),
        ("array:string", "all_of", ValueShape.LIST),
    ])
    def test_shape_derived_from_params(self, prop_type: str, operator: str, shape: ValueShape):
        assert get_operator_spec(prop_type, operator).shape is shape

    def test_all_operators(self):
        assert ALL_OPERATORS == {
            "known", "unknown", "true", "false",
            "eq", "neq", "gt", "gte", "lt", "lte",
            "between", "not_between", "any_of", "none_of", "all_of",
            "matches", "not_matches", "before", "after",
        }

    @pytest.mark.parametrize("prop_type,operator,expected", [
        ("number", "gt", True),
        (PropType.ENUM, "matches", True),
        ("array:number", "all_of", True),
        ("number", "all_of", False),
        ("location", "eq", False),
        ("float", "known", False),
    ])
    def test_is_operator_supported(self, prop_type, operator: str, expected: bool):
        assert is_operator_supported(prop_type, operator) is expected

    def test_unknown_pairs(self):
        assert get_operator_spec("location", "eq") is None
        assert get_operator_spec("boolean", "eq") is None
        assert get_operator_spec("nope", "known") is None

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            OPERATOR_REGISTRY[PropType.NUMBER]["gt"] = None
        with pytest.raises(TypeError):
            OPERATOR_REGISTRY[PropType.PHOTO] = {}


class TestGlob:
    """Test wildcard pattern compilation."""

    @pytest.mark.parametrize("pattern,text,expected", [
        ("str*", "string", True),
        ("*", "", True),
        ("main", "Main Street", True),    # Unanchored, case-insensitive
        ("s*g", "string", True),
        ("str.ng", "string", False),      # Dot is literal
        ("a+b", "a+b", True),             # Plus is literal
        ("(x)", "x", False),
    ])
    def test_compile_glob(self, pattern: str, text: str, expected: bool):
        assert (compile_glob(pattern).search(text) is not None) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Operators per type
# ─────────────────────────────────────────────────────────────────────────────

class TestOperatorsPerType:
    """Execute one condition over the shared entity list."""

    @pytest.mark.parametrize("condition,expected", [
        # boolean
        (cond("inventory.1", "boolean", "known"), ["boolean_false", "boolean_true"]),
        (cond("inventory.1", "boolean", "unknown"), all_but("boolean_false", "boolean_true")),
        (cond("inventory.1", "boolean", "true"), ["boolean_true"]),
        (cond("inventory.1", "boolean", "false"), ["boolean_false"]),

        # number
        (cond("inventory.2", "number", "known"), ["number_1", "number_0"]),
        (cond("inventory.2", "number", "unknown"), all_but("number_1", "number_0")),
        (cond("inventory.2", "number", "eq", 1), ["number_1"]),
        (cond("inventory.2", "number", "eq", 1.0), ["number_1"]),
        (cond("inventory.2", "number", "neq", 1), ["number_0"]),
        (cond("inventory.2", "number", "gt", 0), ["number_1"]),
        (cond("inventory.2", "number", "gte", 0), ["number_1", "number_0"]),
        (cond("inventory.2", "number", "lt", 1), ["number_0"]),
        (cond("inventory.2", "number", "lte", 1), ["number_1", "number_0"]),
        (cond("inventory.2", "number", "between", [0, 0]), ["number_0"]),
        (cond("inventory.2", "number", "between", [0, 1]), ["number_1", "number_0"]),
        (cond("inventory.2", "number", "between", [1, 0]), []),
        (cond("inventory.2", "number", "not_between", [1, 2]), ["number_0"]),
        (cond("inventory.2", "number", "any_of", [0]), ["number_0"]),
        (cond("inventory.2", "number", "any_of", []), []),
        (cond("inventory.2", "number", "none_of", [0]), ["number_1"]),
        (cond("inventory.2", "number", "none_of", []), ["number_1", "number_0"]),

        # string (case-insensitive)
        (cond("inventory.3", "string", "known"), ["string_len", "string_nolen"]),
        (cond("inventory.3", "string", "eq", "STRING"), ["string_len"]),
        (cond("inventory.3", "string", "eq", ""), ["string_nolen"]),
        (cond("inventory.3", "string", "neq", "string"), ["string_nolen"]),
        (cond("inventory.3", "string", "matches", "str*"), ["string_len"]),
        (cond("inventory.3", "string", "matches", "*"), ["string_len", "string_nolen"]),
        (cond("inventory.3", "string", "matches", "RIN"), ["string_len"]),
        (cond("inventory.3", "string", "matches", "str.ng"), []),
        (cond("inventory.3", "string", "not_matches", "str*"), ["string_nolen"]),
        (cond("inventory.3", "string", "any_of", ["STRING", "other"]), ["string_len"]),
        (cond("inventory.3", "string", "none_of", ["string"]), ["string_nolen"]),
        (cond("meta.id", "string", "known"), ALL_IDS),

        # enum (case-sensitive equality, case-insensitive glob)
        (cond("inventory.6", "enum", "known"), ["enum"]),
        (cond("inventory.6", "enum", "eq", "alternative1"), ["enum"]),
        (cond("inventory.6", "enum", "eq", "alternative2"), []),
        (cond("inventory.6", "enum", "neq", "alternative2"), ["enum"]),
        (cond("inventory.6", "enum", "matches", "ALTERNATIVE*"), ["enum"]),
        (cond("inventory.6", "enum", "not_matches", "*2"), ["enum"]),
        (cond("inventory.6", "enum", "not_matches", "*1"), []),
        (cond("inventory.6", "enum", "any_of", ["alternative1"]), ["enum"]),
        (cond("inventory.6", "enum", "none_of", ["alternative2"]), ["enum"]),
        (cond("inventory.6", "enum", "none_of", ["alternative1"]), []),

        # photo
        (cond("inventory.7", "photo", "known"), ["photo"]),
        (cond("inventory.7", "photo", "unknown"), all_but("photo")),

        # array:number
        (cond("inventory.8", "array:number", "known"), ["array_even", "array_odd"]),
        (cond("inventory.8", "array:number", "any_of", [2, 3]), ["array_even", "array_odd"]),
        (cond("inventory.8", "array:number", "any_of", [2]), ["array_even"]),
        (cond("inventory.8", "array:number", "none_of", [2]), ["array_odd"]),
        (cond("inventory.8", "array:number", "all_of", [0, 4]), ["array_even"]),
        (cond("inventory.8", "array:number", "all_of", [0, 1]), []),
        (cond("inventory.8", "array:number", "all_of", []), ["array_even", "array_odd"]),

        # array:string (case-insensitive)
        (cond("inventory.9", "array:string", "any_of", ["STRING1"]), ["array_string_first"]),
        (cond("inventory.9", "array:string", "none_of", ["string1"]), ["array_string_second"]),
        (cond("inventory.9", "array:string", "all_of", ["string1", "String3"]), ["array_string_first"]),
        (cond("inventory.9", "array:string", "any_of", ["string1", "string4"]),
         ["array_string_first", "array_string_second"]),

        # location
        (cond("meta.location", "location", "known"), ["location"]),
        (cond("meta.location", "location", "unknown"), all_but("location")),
    ])
    def test_operator(self, logic, entities, condition: dict, expected: list):
        assert ids(logic.execute(entities, [condition])) == expected

    @pytest.mark.parametrize("operator,value", [
        ("eq", "strasse"),
        ("any_of", ["strasse"]),
        ("matches", "strasse"),
    ])
    def test_equality_and_glob_agree_on_case(self, logic, operator: str, value):
        stored = [Entity({"inventory.3": "Straße"}, id="eszett"), Entity({"inventory.3": "STRASSE"}, id="upper")]
        assert ids(logic.execute(stored, [cond("inventory.3", "string", operator, value)])) == ["upper"]


class TestDateOperators:
    """Date operators compare absolute instants."""

    def test_known(self, logic, entities):
        result = logic.execute(entities, [cond("inventory.4", "date", "known")])
        assert ids(result) == ["date_epoch", "date_5min"]

    def test_unused_date_field_is_unknown_everywhere(self, logic, entities):
        result = logic.execute(entities, [cond("inventory.5", "date", "unknown")])
        assert ids(result) == ALL_IDS

    def test_before_and_after(self, logic, entities, now):
        assert ids(logic.execute(entities, [cond("inventory.4", "date", "before", now)])) == [
            "date_epoch", "date_5min",
        ]
        assert ids(logic.execute(entities, [cond("inventory.4", "date", "before", EPOCH)])) == []
        assert ids(logic.execute(entities, [cond("inventory.4", "date", "after", EPOCH)])) == ["date_5min"]
        assert ids(logic.execute(entities, [cond("inventory.4", "date", "after", now)])) == []

    def test_between_is_closed(self, logic, entities, now):
        result = logic.execute(entities, [cond("inventory.4", "date", "between", [EPOCH, now])])
        assert ids(result) == ["date_epoch", "date_5min"]

        result = logic.execute(entities, [cond("inventory.4", "date", "between", [EPOCH, EPOCH])])
        assert ids(result) == ["date_epoch"]

    def test_not_between(self, logic, entities, now):
        window = [EPOCH + timedelta(seconds=1), now]
        result = logic.execute(entities, [cond("inventory.4", "date", "not_between", window)])
        assert ids(result) == ["date_epoch"]

    def test_offsets_denote_the_same_instant(self, logic, entities):
        plus_two = datetime(1970, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        result = logic.execute(entities, [cond("inventory.4", "date", "between", [plus_two, plus_two])])
        assert ids(result) == ["date_epoch"]

    def test_naive_datetime_is_utc(self, logic, entities):
        result = logic.execute(entities, [cond("inventory.4", "date", "before", datetime(1970, 1, 1, 0, 0, 1))])
        assert ids(result) == ["date_epoch"]

    def test_stored_iso_strings(self, logic):
        stored = [
            Entity({"inventory.4": "1970-01-01T00:00:00Z"}, id="zulu"),
            Entity({"inventory.4": "1970-01-01T01:00:00+01:00"}, id="offset"),
            Entity({"inventory.4": "2024-06-01"}, id="date_only"),
            Entity({"inventory.4": "yesterday"}, id="garbage"),
        ]
        result = logic.execute(stored, [cond("inventory.4", "date", "between", [EPOCH, EPOCH])])
        assert ids(result) == ["zulu", "offset"]

        result = logic.execute(stored, [cond("inventory.4", "date", "after", EPOCH)])
        assert ids(result) == ["date_only"]


# ─────────────────────────────────────────────────────────────────────────────
# Strict shapes
# ─────────────────────────────────────────────────────────────────────────────

class TestShapeMismatch:
    """A stored value of the wrong shape is known but matches nothing else."""

    @pytest.fixture
    def mistyped(self):
        return [
            Entity({"inventory.2": "5"}, id="string_number"),
            Entity({"inventory.2": True}, id="bool_number"),
            Entity({"inventory.3": 5}, id="number_string"),
            Entity({"inventory.8": "1,2"}, id="string_array"),
            Entity({"inventory.8": ["a", "b"]}, id="strings_in_number_array"),
            Entity({"inventory.8": [1, "2"]}, id="mixed_number_array"),
            Entity({"inventory.9": ["x", 5]}, id="mixed_string_array"),
            Entity({"inventory.1": 1}, id="int_boolean"),
        ]

    @pytest.mark.parametrize("condition", [
        cond("inventory.2", "number", "gt", 0),
        cond("inventory.2", "number", "neq", 999),
        cond("inventory.2", "number", "not_between", [100, 200]),
        cond("inventory.2", "number", "none_of", [999]),
        cond("inventory.3", "string", "neq", "x"),
        cond("inventory.3", "string", "not_matches", "x"),
        cond("inventory.8", "array:number", "none_of", [999]),
        cond("inventory.8", "array:number", "any_of", [1]),
        cond("inventory.8", "array:number", "all_of", []),
        cond("inventory.9", "array:string", "all_of", ["x"]),
        cond("inventory.9", "array:string", "none_of", ["zzz"]),
        cond("inventory.1", "boolean", "true"),
        cond("inventory.1", "boolean", "false"),
    ])
    def test_negative_operators_do_not_match(self, logic, mistyped, condition: dict):
        assert logic.execute(mistyped, [condition]) == []

    def test_mistyped_values_are_known(self, logic, mistyped):
        result = logic.execute(mistyped, [cond("inventory.2", "number", "known")])
        assert ids(result) == ["string_number", "bool_number"]

    def test_absent_only_matches_unknown(self, logic):
        blank = [Entity({}, id="empty"), Entity({"inventory.2": None}, id="none")]
        assert ids(logic.execute(blank, [cond("inventory.2", "number", "unknown")])) == ["empty", "none"]
        assert logic.execute(blank, [cond("inventory.2", "number", "neq", 1)]) == []
        assert logic.execute(blank, [cond("inventory.2", "number", "none_of", [1])]) == []

"""Filter and value expression translation."""

import pytest

from mapboxgl2vectortiles.src.expressions import (
    create_field_equality_expression,
    parse_expression,
    parse_key,
    parse_value,
    process_label_field,
    quoted_column_ref,
    quoted_value,
)


class TestQuoting:
    """Tests for identifier and literal quoting."""

    def test_column_ref(self):
        assert quoted_column_ref("name") == '"name"'
        assert quoted_column_ref('a"b') == '"a""b"'

    @pytest.mark.parametrize("value, expected", [
        ("river", "'river'"),
        ("it's", "'it''s'"),
        (2.5, "2.5"),
        (3, "3"),
        (True, "TRUE"),
        (False, "FALSE"),
        (None, "NULL"),
    ])
    def test_quoted_value(self, value, expected):
        assert quoted_value(value) == expected

    def test_field_equality(self):
        assert create_field_equality_expression("class", "a") == "\"class\" = 'a'"
        assert create_field_equality_expression("class", None) == '"class" IS NULL'


class TestFilters:
    """Tests for filter expressions."""

    def test_equality_uses_is(self, context):
        assert parse_expression(["==", ["get", "class"], "river"], context) == "class IS 'river'"

    def test_inequality_uses_is_not(self, context):
        assert parse_expression(["!=", "class", "river"], context) == "\"class\" IS NOT 'river'"

    def test_comparison(self, context):
        assert parse_expression([">=", "rank", 3], context) == '"rank" >= 3'

    def test_geometry_type(self, context):
        assert parse_expression(["==", "$type", "Polygon"], context) == "_geom_type IS 'Polygon'"

    def test_all(self, context):
        expression = ["all", ["==", ["get", "a"], 1], ["==", ["get", "b"], 2]]
        assert parse_expression(expression, context) == "(a IS 1) AND (b IS 2)"

    def test_any(self, context):
        expression = ["any", ["has", "a"], ["has", "b"]]
        assert parse_expression(expression, context) == '("a" IS NOT NULL) OR ("b" IS NOT NULL)'

    def test_none(self, context):
        expression = ["none", ["has", "a"], ["has", "b"]]
        assert parse_expression(expression, context) == 'NOT ("a" IS NOT NULL) AND NOT ("b" IS NOT NULL)'

    def test_not_has(self, context):
        assert parse_expression(["!", ["has", "level"]], context) == '"level" IS NULL'
        assert parse_expression(["!has", "level"], context) == '"level" IS NULL'

    def test_in(self, context):
        assert parse_expression(["in", "class", "a", "b"], context) == "\"class\" IN ('a', 'b')"

    def test_not_in_is_null_safe(self, context):
        expected = "(\"class\" IS NULL OR \"class\" NOT IN ('a', 'b'))"
        assert parse_expression(["!in", "class", "a", "b"], context) == expected
        assert parse_expression(["!", ["in", "class", "a", "b"]], context) == expected

    def test_negated_comparison(self, context):
        assert parse_expression(["!", ["==", "a", 1]], context) == 'NOT ("a" IS 1)'

    def test_get(self, context):
        assert parse_expression(["get", "name"], context) == '"name"'

    @pytest.mark.parametrize("operator", ["has", "!has", "in", "!in", "get"])
    def test_missing_operand(self, context, operator):
        assert parse_expression([operator], context) == ""
        assert context.warnings() == [f"Skipping non-supported expression: {operator}"]

    def test_to_string(self, context):
        assert parse_expression(["to-string", ["get", "name"]], context) == 'to_string("name")'

    def test_unsupported_operator(self, context):
        assert parse_expression(["coalesce", ["get", "a"], "b"], context) == ""
        assert context.warnings() == ["Skipping non-supported expression: coalesce"]

    def test_unsupported_part_drops_conjunction(self, context):
        assert parse_expression(["all", ["foo"], ["has", "a"]], context) == ""
        assert context.warnings() == ["Skipping non-supported expression: foo", "Skipping unsupported expression"]


class TestMatch:
    """Tests for match expressions."""

    def test_boolean_list(self, context):
        expression = ["match", ["get", "class"], ["a", "b"], True, False]
        assert parse_expression(expression, context) == "\"class\" IN ('a', 'b')"

    def test_boolean_single_label(self, context):
        expression = ["match", ["get", "class"], ["a"], True, False]
        assert parse_expression(expression, context) == "\"class\" = 'a'"

    def test_boolean_scalar_label(self, context):
        expression = ["match", ["get", "class"], "a", True, False]
        assert parse_expression(expression, context) == "\"class\" = 'a'"

    def test_case(self, context):
        expression = ["match", ["get", "class"], "a", "#f00", ["b", "c"], "#0f0", "#00f"]
        assert parse_expression(expression, context) == (
            "CASE WHEN (\"class\" = 'a') THEN '#f00' "
            "WHEN \"class\" IN ('b', 'c') THEN '#0f0' "
            "ELSE '#00f' END"
        )


class TestKeysAndValues:
    """Tests for operand resolution."""

    def test_key_from_list(self):
        assert parse_key(["get", "name"]) == "name"
        assert parse_key(["zoom"]) == "zoom"

    def test_key_from_string(self):
        assert parse_key("name") == '"name"'

    def test_value_number(self, context):
        assert parse_value(2, context) == "2"

    def test_value_unsupported(self, context):
        assert parse_value(None, context) == ""
        assert context.warnings() == ["Skipping unsupported expression part"]


class TestLabelFields:
    """Tests for {field} text templates."""

    def test_single_field(self):
        assert process_label_field("{name}") == ("name", False)

    def test_plain_text(self):
        assert process_label_field("Harbour") == ("Harbour", False)

    def test_multiple_fields(self):
        assert process_label_field("{name} ({ref})") == ("concat(\"name\",' (',\"ref\",')')", True)

    def test_literal_prefix(self):
        assert process_label_field("Exit {ref}") == ("concat('Exit ',\"ref\")", True)

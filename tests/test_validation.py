"""Unit tests for JSON Schema backed message rules.

Tests cover:
- One rule per validation keyword, in schema order
- Generated messages and message overrides
- Predicate behaviour per keyword (type, length, pattern, format, enum, ranges)
- Schema errors for malformed fragments
- Using generated rules inside a FormEngine
"""

import jsonschema
import pytest

from formstate.config import FieldConfig, FormConfig
from formstate.engine import FormEngine
from formstate.validation import schema_rules


class TestRuleGeneration:
    """Test translation of schema fragments into rules."""

    def test_one_rule_per_keyword_in_order(self):
        rules = schema_rules({"type": "string", "minLength": 2, "maxLength": 5})
        assert [rule.message for rule in rules] == [
            "Value must be of type string",
            "Value must be at least 2 characters",
            "Value must be at most 5 characters",
        ]

    def test_annotation_keywords_are_skipped(self):
        """Should not create rules for title, description or default."""
        rules = schema_rules({"title": "Name", "description": "Your name", "default": "", "minLength": 1})
        assert len(rules) == 1

    def test_label_is_used(self):
        rules = schema_rules({"minimum": 18}, label="Age")
        assert rules[0].message == "Age must be at least 18"

    def test_message_override(self):
        rules = schema_rules({"pattern": "^[0-9]+$"}, messages={"pattern": "Digits only"})
        assert rules[0].message == "Digits only"

    def test_kind_is_applied(self):
        rules = schema_rules({"maxLength": 3}, kind="warning")
        assert rules[0].kind == "warning"

    def test_generic_message_for_other_keywords(self):
        rules = schema_rules({"minItems": 2})
        assert rules[0].message == "Value violates minItems constraint: 2"
        assert rules[0].test([1]) is True
        assert rules[0].test([1, 2]) is False

    def test_type_list_message(self):
        rules = schema_rules({"type": ["string", "null"]})
        assert rules[0].message == "Value must be of type string, null"

    def test_invalid_schema_raises(self):
        """Should reject malformed fragments up front."""
        with pytest.raises(jsonschema.SchemaError):
            schema_rules({"minLength": "three"})

    def test_empty_schema_gives_no_rules(self):
        assert schema_rules({}) == ()


class TestRulePredicates:
    """Test that predicates hold exactly when a value violates the keyword."""

    def test_type(self):
        rule, = schema_rules({"type": "integer"})
        assert rule.test("5") is True
        assert rule.test(5) is False

    def test_lengths(self):
        too_short, too_long = schema_rules({"minLength": 2, "maxLength": 4})
        assert too_short.test("a") is True
        assert too_short.test("ab") is False
        assert too_long.test("abcde") is True
        assert too_long.test("abcd") is False

    def test_pattern(self):
        rule, = schema_rules({"pattern": "^[A-Z]"})
        assert rule.test("lower") is True
        assert rule.test("Upper") is False

    def test_format_email(self):
        rule, = schema_rules({"format": "email"}, label="Email")
        assert rule.message == "Email must be a valid email"
        assert rule.test("not-an-email") is True
        assert rule.test("ada@example.com") is False

    def test_enum(self):
        rule, = schema_rules({"enum": ["red", "green"]})
        assert rule.message == "Value must be one of: red, green"
        assert rule.test("blue") is True
        assert rule.test("red") is False

    def test_const(self):
        rule, = schema_rules({"const": "yes"})
        assert rule.message == "Value must be 'yes'"
        assert rule.test("no") is True

    def test_numeric_ranges(self):
        minimum, exclusive_max = schema_rules({"minimum": 0, "exclusiveMaximum": 10})
        assert minimum.test(-1) is True
        assert minimum.test(0) is False
        assert exclusive_max.test(10) is True
        assert exclusive_max.test(9.5) is False


class TestSchemaRulesInEngine:
    """Test generated rules driving engine diagnostics."""

    def test_last_failing_keyword_wins(self):
        """Should show the message of the last violated keyword."""
        engine = FormEngine(FormConfig(fields={
            "code": FieldConfig(
                initial_value="",
                constraints=str.strip,
                messages=schema_rules({"minLength": 3, "pattern": "^[a-z]+$"}, label="Code"),
            ),
        }))

        engine.apply_edit("code", "A")
        assert engine.bind("code")["error"] == "Code must match pattern: ^[a-z]+$"

        engine.apply_edit("code", "ab")
        assert engine.bind("code")["error"] == "Code must be at least 3 characters"

        engine.apply_edit("code", " abc ")
        assert engine.bind("code")["error"] == ""

    def test_mixed_with_handwritten_rules(self):
        from formstate.config import MessageRule

        rules = schema_rules({"maxLength": 5}) + (
            MessageRule(test=lambda v: v == "admin", message="Reserved name"),
        )
        engine = FormEngine(FormConfig(fields={"user": FieldConfig(initial_value="", messages=rules)}))
        engine.apply_edit("user", "admin")
        assert engine.bind("user")["error"] == "Reserved name"

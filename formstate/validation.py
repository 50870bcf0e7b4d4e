"""JSON Schema backed message rules.

Fields are often validated with the same handful of checks: a type, a
length range, a pattern, an enumeration. Rather than hand-writing a
predicate for each, ``schema_rules`` turns a field-level JSON Schema
fragment into MessageRule objects, one per keyword, each backed by a
jsonschema Draft7Validator that only knows that keyword.

Because each keyword becomes its own rule, the usual per-field precedence
applies: when several keywords fail, the last one declared in the fragment
provides the message.

Usage:
    >>> rules = schema_rules({"type": "string", "minLength": 3}, label="Name")
    >>> [rule.message for rule in rules]
    ['Name must be of type string', 'Name must be at least 3 characters']
    >>> rules[1].test("ab")
    True
"""

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from jsonschema import Draft7Validator, FormatChecker

from formstate.config import MessageRule
from formstate.types import FieldPredicate, Value

# Keywords that carry no validation and never produce a rule
ANNOTATION_KEYWORDS = frozenset({
    "$schema",
    "$id",
    "$comment",
    "title",
    "description",
    "default",
    "examples",
    "readOnly",
    "writeOnly",
})


def _join(values: Any) -> str:
    return ", ".join(str(v) for v in values)


# keyword -> (label, keyword value) -> message
MESSAGE_TEMPLATES: Dict[str, Callable[[str, Any], str]] = {
    "type": lambda label, expected: (
        f"{label} must be of type {_join(expected) if isinstance(expected, list) else expected}"
    ),
    "minLength": lambda label, n: f"{label} must be at least {n} characters",
    "maxLength": lambda label, n: f"{label} must be at most {n} characters",
    "pattern": lambda label, pattern: f"{label} must match pattern: {pattern}",
    "format": lambda label, fmt: f"{label} must be a valid {fmt}",
    "enum": lambda label, options: f"{label} must be one of: {_join(options)}",
    "const": lambda label, value: f"{label} must be {value!r}",
    "minimum": lambda label, n: f"{label} must be at least {n}",
    "maximum": lambda label, n: f"{label} must be at most {n}",
    "exclusiveMinimum": lambda label, n: f"{label} must be greater than {n}",
    "exclusiveMaximum": lambda label, n: f"{label} must be less than {n}",
    "multipleOf": lambda label, n: f"{label} must be a multiple of {n}",
}


def _generic_message(label: str, keyword: str, value: Any) -> str:
    return f"{label} violates {keyword} constraint: {value}"


def _violates(validator: Draft7Validator) -> FieldPredicate:
    """Build a predicate that holds when a value fails ``validator``."""
    def test(value: Value) -> bool:
        return not validator.is_valid(value)
    return test


def schema_rules(
    field_schema: Mapping[str, Any],
    *,
    label: Optional[str] = None,
    messages: Optional[Mapping[str, str]] = None,
    kind: str = "error",
) -> Tuple[MessageRule, ...]:
    """Translate a field-level JSON Schema fragment into message rules.

    Args:
        field_schema: Schema for a single field value, e.g.
            ``{"type": "string", "maxLength": 10}``
        label: Name used in generated messages (defaults to "Value")
        messages: Optional keyword -> message overrides
        kind: Tag for every generated rule, e.g. "error" or "warning"

    Returns:
        One MessageRule per validation keyword, in the fragment's order

    Raises:
        jsonschema.SchemaError: If ``field_schema`` is not a valid schema

    Examples:
        >>> rules = schema_rules({"enum": ["red", "green"]}, messages={"enum": "Pick a colour"})
        >>> rules[0].message
        'Pick a colour'
        >>> rules[0].test("blue"), rules[0].test("red")
        (True, False)
    """
    Draft7Validator.check_schema(dict(field_schema))
    label = label or "Value"
    overrides = dict(messages or {})
    format_checker = FormatChecker()

    rules = []
    for keyword, keyword_value in field_schema.items():
        if keyword in ANNOTATION_KEYWORDS:
            continue

        validator = Draft7Validator({keyword: keyword_value}, format_checker=format_checker)

        if keyword in overrides:
            message = overrides[keyword]
        elif keyword in MESSAGE_TEMPLATES:
            message = MESSAGE_TEMPLATES[keyword](label, keyword_value)
        else:
            message = _generic_message(label, keyword, keyword_value)

        rules.append(MessageRule(test=_violates(validator), message=message, kind=kind))

    return tuple(rules)


__all__ = [
    "ANNOTATION_KEYWORDS",
    "MESSAGE_TEMPLATES",
    "schema_rules",
]

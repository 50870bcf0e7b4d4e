"""Configuration model for the formstate engine.

A form is described once, up front, by a FormConfig: the declared fields
(each with an initial value, a constraint chain, message rules and
presentation props) plus optional whole-form constraints and message rules.
The configuration is immutable and only ever read by the engine.

Rule collections are stored uniformly as ordered tuples. Constructors and
``from_dict`` accept a single item, a list/tuple, or None and normalize, so
evaluation code never has to special-case the singular form. Message rules
may be given as rule objects or as ``{"test", "message", "type"?}`` mappings.

Usage:
    >>> config = FormConfig.from_dict({
    ...     "fields": {
    ...         "name": {
    ...             "initialValue": "",
    ...             "constraints": str.strip,
    ...             "messages": {"test": lambda v: not v, "message": "Name is required"},
    ...             "props": {"label": "Name"},
    ...         },
    ...     },
    ... })
    >>> config.field_ids
    ('name',)
    >>> len(config.fields["name"].messages)
    1
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from formstate.types import (
    Constraint,
    FieldId,
    FieldPredicate,
    FormPredicate,
    GlobalConstraint,
    Value,
)


def _as_tuple(items: Any) -> Tuple[Any, ...]:
    """Normalize None, a single item or a sequence of items to a tuple."""
    if items is None:
        return ()
    if isinstance(items, (list, tuple)):
        return tuple(items)
    return (items,)


def _lookup(data: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    """Read a key that may be spelled in camelCase or snake_case."""
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _as_rules(items: Any, rule_class: type) -> Tuple[Any, ...]:
    """Normalize rules, building ``rule_class`` instances from mappings."""
    return tuple(
        rule_class.from_dict(rule) if isinstance(rule, Mapping) else rule
        for rule in _as_tuple(items)
    )


@dataclass(frozen=True)
class MessageRule:
    """Per-field message rule.

    The predicate receives the field's settled value. When it returns a
    truthy result, ``message`` becomes the field's diagnostic.

    Attributes:
        test: Predicate over a single field value
        message: Diagnostic text to show when the predicate holds
        kind: Free-form tag such as "error" or "warning", passed through

    Examples:
        >>> rule = MessageRule(test=lambda v: "a" in v, message="Contains 'a'")
        >>> rule.test("maria")
        True
        >>> rule.kind
        'error'
    """
    test: FieldPredicate
    message: str
    kind: str = "error"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MessageRule":
        """Create MessageRule from a ``{"test", "message", "type"?}`` mapping."""
        return cls(
            test=data["test"],
            message=data["message"],
            kind=_lookup(data, "type", "kind", "error"),
        )


@dataclass(frozen=True)
class GlobalMessageRule:
    """Whole-form message rule.

    The predicate receives the entire settled value mapping. When it holds,
    ``message`` (a mapping from field id to text) is merged over the
    whole-form diagnostics, so one rule can annotate several fields.

    Attributes:
        test: Predicate over the whole value mapping
        message: Field id -> diagnostic text
        kind: Free-form tag such as "error" or "warning", passed through
    """
    test: FormPredicate
    message: Mapping[FieldId, str]
    kind: str = "error"

    def __post_init__(self):
        object.__setattr__(self, "message", MappingProxyType(dict(self.message)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GlobalMessageRule":
        """Create GlobalMessageRule from a ``{"test", "message", "type"?}`` mapping."""
        return cls(
            test=data["test"],
            message=data["message"],
            kind=_lookup(data, "type", "kind", "error"),
        )


@dataclass(frozen=True)
class FieldConfig:
    """Static description of a single field.

    Attributes:
        initial_value: Starting value; None is stored as an empty string
        constraints: Ordered transformations applied to every raw edit
        messages: Ordered message rules evaluated against the settled value
        props: Presentation metadata handed through to the renderer
    """
    initial_value: Value = None
    constraints: Tuple[Constraint, ...] = ()
    messages: Tuple[MessageRule, ...] = ()
    props: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "constraints", _as_tuple(self.constraints))
        object.__setattr__(self, "messages", _as_rules(self.messages, MessageRule))
        object.__setattr__(self, "props", MappingProxyType(dict(self.props or {})))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldConfig":
        """Create FieldConfig from an authoring mapping.

        Accepts ``initialValue``/``initial_value``, ``constraints``,
        ``messages`` and ``props``. Message rules may be given as mappings
        or as MessageRule instances.
        """
        return cls(
            initial_value=_lookup(data, "initialValue", "initial_value"),
            constraints=data.get("constraints"),
            messages=data.get("messages"),
            props=data.get("props"),
        )


@dataclass(frozen=True)
class FormConfig:
    """Complete, immutable description of a form.

    Field declaration order is preserved and used wherever the engine
    iterates over fields.

    Attributes:
        fields: Field id -> FieldConfig
        global_constraints: Ordered whole-form transformations
        global_messages: Ordered whole-form message rules

    Examples:
        >>> config = FormConfig(fields={"city": FieldConfig(initial_value="Lima")})
        >>> config.field_ids
        ('city',)
        >>> config.global_constraints
        ()
    """
    fields: Mapping[FieldId, FieldConfig]
    global_constraints: Tuple[GlobalConstraint, ...] = ()
    global_messages: Tuple[GlobalMessageRule, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "global_constraints", _as_tuple(self.global_constraints))
        object.__setattr__(self, "global_messages", _as_rules(self.global_messages, GlobalMessageRule))

    @property
    def field_ids(self) -> Tuple[FieldId, ...]:
        """Declared field ids, in declaration order."""
        return tuple(self.fields)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormConfig":
        """Create FormConfig from an authoring mapping.

        Args:
            data: Mapping with ``fields`` and optional
                ``globalConstraints``/``global_constraints`` and
                ``globalMessages``/``global_messages``

        Returns:
            New FormConfig instance
        """
        fields: Dict[FieldId, FieldConfig] = {}
        for field_id, field_data in data["fields"].items():
            if isinstance(field_data, FieldConfig):
                fields[field_id] = field_data
            else:
                fields[field_id] = FieldConfig.from_dict(field_data)

        return cls(
            fields=fields,
            global_constraints=_lookup(data, "globalConstraints", "global_constraints"),
            global_messages=_lookup(data, "globalMessages", "global_messages"),
        )


def coerce_config(config: Any) -> FormConfig:
    """Return ``config`` as a FormConfig, loading it from a mapping if needed."""
    if isinstance(config, FormConfig):
        return config
    return FormConfig.from_dict(config)


__all__ = [
    "MessageRule",
    "GlobalMessageRule",
    "FieldConfig",
    "FormConfig",
    "coerce_config",
]

"""Edit pipeline for the formstate engine.

Settling an edit runs four passes over the previous snapshot, in this order:

1. the edited field's constraints, folded left to right over the raw value
2. the whole-form constraints, folded left to right over the full mapping
3. the whole-form message rules, each tested against the same settled values
4. every field's message rules, tested against that field's settled value

Message passes only run after both transform passes, so a per-field rule
sees its field's value as rewritten by the whole-form constraints.

Every function here is pure: it reads the configuration and the previous
snapshot and returns new mappings. Exceptions raised by constraints or
predicates are not caught.
"""

from typing import Any, Dict

from formstate.config import FieldConfig, FormConfig
from formstate.snapshot import FormSnapshot
from formstate.types import FieldId, Messages, Value, Values


def apply_field_constraints(field_config: FieldConfig, raw_value: Value) -> Value:
    """Fold a field's constraint chain over a raw value.

    Examples:
        >>> fc = FieldConfig(constraints=[str.strip, str.upper])
        >>> apply_field_constraints(fc, "  ada ")
        'ADA'
        >>> apply_field_constraints(FieldConfig(), "raw")
        'raw'
    """
    value = raw_value
    for constraint in field_config.constraints:
        value = constraint(value)
    return value


def apply_global_constraints(config: FormConfig, values: Values) -> Dict[FieldId, Value]:
    """Fold the whole-form constraints over a value mapping.

    Each constraint receives a fresh dict and may rewrite any field. The
    result is projected back onto the declared field ids: unknown keys are
    dropped and a missing declared key raises KeyError.
    """
    current: Values = dict(values)
    for constraint in config.global_constraints:
        current = constraint(dict(current))
    return {field_id: current[field_id] for field_id in config.fields}


def compute_global_messages(config: FormConfig, values: Values) -> Dict[FieldId, str]:
    """Evaluate the whole-form message rules.

    Every declared field starts with an empty message. Each rule whose
    predicate holds for ``values`` merges its payload over the running
    result, so later rules win on shared keys.
    """
    messages: Dict[FieldId, str] = {field_id: "" for field_id in config.fields}
    for rule in config.global_messages:
        if rule.test(values):
            for field_id, message in rule.message.items():
                if field_id in messages:
                    messages[field_id] = message
    return messages


def compute_field_messages(config: FormConfig, values: Values) -> Dict[FieldId, str]:
    """Evaluate every field's message rules against its settled value.

    All rules of a field are tested against the same value; the last one
    that holds provides the message. Fields with no holding rule get "".
    """
    messages: Dict[FieldId, str] = {}
    for field_id, field_config in config.fields.items():
        message = ""
        value = values[field_id]
        for rule in field_config.messages:
            if rule.test(value):
                message = rule.message
        messages[field_id] = message
    return messages


def settle(
    config: FormConfig,
    previous: FormSnapshot,
    field_id: FieldId,
    raw_value: Any,
) -> FormSnapshot:
    """Run the full edit pipeline and return the next snapshot.

    Args:
        config: The form configuration
        previous: The currently committed snapshot
        field_id: Declared id of the edited field
        raw_value: Unconstrained value produced by the input

    Returns:
        A new FormSnapshot; ``previous`` is left untouched

    Examples:
        >>> config = FormConfig(
        ...     fields={"a": FieldConfig(constraints=str.lower), "b": FieldConfig(initial_value="x")},
        ...     global_constraints=lambda v: {**v, "b": v["a"] * 2},
        ... )
        >>> snap = settle(config, FormSnapshot.initial(config), "a", "Hi")
        >>> dict(snap.values)
        {'a': 'hi', 'b': 'hihi'}
    """
    transformed = apply_field_constraints(config.fields[field_id], raw_value)
    middle_values = {**previous.values, field_id: transformed}
    new_values = apply_global_constraints(config, middle_values)

    global_messages: Messages = compute_global_messages(config, new_values)
    field_messages = compute_field_messages(config, new_values)

    return FormSnapshot(
        values=new_values,
        field_messages=field_messages,
        global_messages={**previous.global_messages, **global_messages},
    )


__all__ = [
    "apply_field_constraints",
    "apply_global_constraints",
    "compute_global_messages",
    "compute_field_messages",
    "settle",
]

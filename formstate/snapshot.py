"""Immutable engine state.

A FormSnapshot holds the three parallel mappings the engine maintains:
settled values, per-field messages and whole-form messages. Every edit
builds a new snapshot; the engine swaps a single reference to commit it, so
readers only ever see a fully settled state.

An empty string means "no message" in both message mappings.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping

from formstate.config import FormConfig
from formstate.types import FieldId, Messages, Values


@dataclass(frozen=True)
class FormSnapshot:
    """Settled state of a form at one point in time.

    All three mappings are read-only and share the key set of the
    configuration's fields.

    Attributes:
        values: Field id -> settled value
        field_messages: Field id -> per-field diagnostic ("" when none)
        global_messages: Field id -> whole-form diagnostic ("" when none)

    Examples:
        >>> from formstate.config import FieldConfig
        >>> config = FormConfig(fields={"name": FieldConfig(initial_value="Ana"),
        ...                             "nick": FieldConfig()})
        >>> snap = FormSnapshot.initial(config)
        >>> dict(snap.values)
        {'name': 'Ana', 'nick': ''}
        >>> snap.error_for("name")
        ''
    """
    values: Values
    field_messages: Messages
    global_messages: Messages

    def __post_init__(self):
        for name in ("values", "field_messages", "global_messages"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @classmethod
    def initial(cls, config: FormConfig) -> "FormSnapshot":
        """Build the starting snapshot for a configuration.

        Values come from each field's initial value (None becomes ""),
        and every message starts empty. No rules are evaluated.
        """
        values: Dict[FieldId, Any] = {}
        for field_id, field_config in config.fields.items():
            initial = field_config.initial_value
            values[field_id] = "" if initial is None else initial
        empty = {field_id: "" for field_id in config.fields}
        return cls(values=values, field_messages=empty, global_messages=empty)

    def error_for(self, field_id: FieldId) -> str:
        """Resolve the diagnostic shown for a field.

        The per-field message wins when non-empty; otherwise the whole-form
        message for the field is used.
        """
        return self.field_messages.get(field_id) or self.global_messages.get(field_id) or ""

    @property
    def errors(self) -> Mapping[FieldId, str]:
        """Resolved diagnostics for every field, in declaration order."""
        return MappingProxyType({field_id: self.error_for(field_id) for field_id in self.values})

    @property
    def is_valid(self) -> bool:
        """True when no field has a resolved diagnostic."""
        return not any(self.error_for(field_id) for field_id in self.values)

    def changed_fields(self, previous: "FormSnapshot") -> tuple:
        """Field ids whose value differs from ``previous``."""
        return tuple(
            field_id
            for field_id, value in self.values.items()
            if previous.values.get(field_id) != value
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "values": dict(self.values),
            "fieldMessages": dict(self.field_messages),
            "globalMessages": dict(self.global_messages),
        }


__all__ = [
    "FormSnapshot",
]

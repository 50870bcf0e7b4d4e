"""Core type definitions for the formstate engine.

This module defines the fundamental types used throughout formstate:
- FieldId, Value, Values, Messages: aliases for field keys and mappings
- Constraint, GlobalConstraint: value transformation callables
- FieldPredicate, FormPredicate: message rule predicates
- EngineState: lifecycle states of a FormEngine
- EventType: notifications emitted when an edit settles or the form resets

These types form the contract between a form configuration and the engine
that evaluates it.
"""

from enum import Enum
from typing import Any, Callable, Mapping

from typing_extensions import TypeAlias

FieldId: TypeAlias = str
Value: TypeAlias = Any
Values: TypeAlias = Mapping[FieldId, Value]
Messages: TypeAlias = Mapping[FieldId, str]

Constraint: TypeAlias = Callable[[Value], Value]
GlobalConstraint: TypeAlias = Callable[[Values], Values]

FieldPredicate: TypeAlias = Callable[[Value], bool]
FormPredicate: TypeAlias = Callable[[Values], bool]


class EngineState(str, Enum):
    """Engine lifecycle states.

    An engine starts ``initialized``, passes through ``settling`` while an
    edit is being evaluated, and rests in ``settled`` afterwards. There is no
    terminal state.
    """
    INITIALIZED = "initialized"
    SETTLING = "settling"
    SETTLED = "settled"


class EventType(str, Enum):
    """Notification types emitted by a FormEngine."""
    FIELD_SETTLED = "field.settled"
    FORM_RESET = "form.reset"


__all__ = [
    "FieldId",
    "Value",
    "Values",
    "Messages",
    "Constraint",
    "GlobalConstraint",
    "FieldPredicate",
    "FormPredicate",
    "EngineState",
    "EventType",
]

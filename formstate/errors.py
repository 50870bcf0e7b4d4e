"""Exception types for the formstate engine.

Configuration mistakes (a rule referencing an undeclared field, a malformed
chain) are not detected up front: they surface as whatever error the failing
lookup or call raises. Likewise an exception raised by a constraint or a
predicate propagates unchanged out of ``FormEngine.apply_edit``.

The classes below cover the failures the engine raises itself.
"""

from typing import Optional

from formstate.types import EngineState, FieldId


class FormStateError(Exception):
    """Base class for errors raised by the formstate engine."""


class UnknownFieldError(FormStateError, KeyError):
    """Raised when binding a field id that the configuration does not declare.

    Attributes:
        field_id: The id that was looked up

    Examples:
        >>> err = UnknownFieldError("email")
        >>> err.field_id
        'email'
        >>> isinstance(err, KeyError)
        True
    """

    def __init__(self, field_id: FieldId):
        self.field_id = field_id
        super().__init__(f"Field '{field_id}' is not declared in the form configuration")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class InvalidStateTransitionError(FormStateError):
    """Raised when the engine lifecycle is driven through an invalid transition.

    Attributes:
        current_state: The state before the attempted transition
        target_state: The state that was attempted
    """

    def __init__(self, current_state: EngineState, target_state: EngineState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


class ReentrantEditError(FormStateError):
    """Raised when an edit is applied while another edit is still settling.

    Constraints and predicates must not edit the engine that is evaluating
    them.

    Attributes:
        field_id: The field the nested edit targeted
        settling_field_id: The field whose edit was in progress, if known
    """

    def __init__(self, field_id: FieldId, settling_field_id: Optional[FieldId] = None):
        self.field_id = field_id
        self.settling_field_id = settling_field_id
        if settling_field_id is not None:
            message = (
                f"Cannot edit field '{field_id}' while the edit of "
                f"'{settling_field_id}' is still settling"
            )
        else:
            message = f"Cannot edit field '{field_id}' while another edit is still settling"
        super().__init__(message)


__all__ = [
    "FormStateError",
    "UnknownFieldError",
    "InvalidStateTransitionError",
    "ReentrantEditError",
]

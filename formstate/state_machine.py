"""Engine lifecycle state machine.

A FormEngine moves through three states:

    initialized --edit--> settling --commit--> settled --edit--> settling ...

A failed edit returns to whichever state the engine was in before it
started, and ``reset`` brings a settled engine back to ``initialized``.

The machine also tracks which field is settling, which is how nested edits
triggered from inside a constraint or predicate are detected and rejected.

Usage:
    >>> from formstate.types import EngineState
    >>> lifecycle = EngineLifecycle()
    >>> lifecycle.begin_edit("name")
    >>> lifecycle.state
    <EngineState.SETTLING: 'settling'>
    >>> lifecycle.commit()
    >>> lifecycle.state
    <EngineState.SETTLED: 'settled'>
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from formstate.errors import InvalidStateTransitionError, ReentrantEditError
from formstate.types import EngineState, FieldId


# Maps each state to the set of states it can transition to
VALID_TRANSITIONS: Dict[EngineState, Set[EngineState]] = {
    EngineState.INITIALIZED: {
        EngineState.SETTLING,
    },
    EngineState.SETTLING: {
        EngineState.SETTLED,  # commit, or a failed later edit
        EngineState.INITIALIZED,  # first edit failed
    },
    EngineState.SETTLED: {
        EngineState.SETTLING,
        EngineState.INITIALIZED,  # reset
    },
}


@dataclass
class EngineLifecycle:
    """Lifecycle tracker for a single FormEngine.

    Attributes:
        state: Current lifecycle state
        settling_field: Field whose edit is in progress, if any
        edit_count: Number of edits committed since the last reset

    Examples:
        >>> lifecycle = EngineLifecycle()
        >>> lifecycle.can_transition_to(EngineState.SETTLED)
        False
        >>> lifecycle.is_settling()
        False
    """

    state: EngineState = EngineState.INITIALIZED
    settling_field: Optional[FieldId] = None
    edit_count: int = 0
    _resume_state: EngineState = field(default=EngineState.INITIALIZED, init=False, repr=False)

    def can_transition_to(self, target_state: EngineState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: EngineState) -> None:
        """Move to ``target_state``.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.state]))}"
                ),
            )
        self.state = target_state

    def is_settling(self) -> bool:
        return self.state == EngineState.SETTLING

    def begin_edit(self, field_id: FieldId) -> None:
        """Enter ``settling`` for an edit of ``field_id``.

        Raises:
            ReentrantEditError: If another edit is still settling
        """
        if self.is_settling():
            raise ReentrantEditError(field_id, self.settling_field)
        self._resume_state = self.state
        self.transition_to(EngineState.SETTLING)
        self.settling_field = field_id

    def commit(self) -> None:
        """Finish the current edit successfully."""
        self.transition_to(EngineState.SETTLED)
        self.settling_field = None
        self.edit_count += 1

    def abort(self) -> None:
        """Abandon the current edit and return to the state it started from."""
        self.transition_to(self._resume_state)
        self.settling_field = None

    def reset(self) -> None:
        """Return to ``initialized`` and clear the edit counter.

        Raises:
            InvalidStateTransitionError: If an edit is still settling
        """
        if self.is_settling():
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=EngineState.INITIALIZED,
                message="Cannot reset while an edit is still settling",
            )
        if self.state != EngineState.INITIALIZED:
            self.transition_to(EngineState.INITIALIZED)
        self.edit_count = 0

    def to_dict(self) -> Dict[str, object]:
        """Serialize the lifecycle to a dictionary.

        Examples:
            >>> EngineLifecycle().to_dict()
            {'state': 'initialized', 'editCount': 0}
        """
        return {
            "state": self.state.value,
            "editCount": self.edit_count,
        }


__all__ = [
    "EngineLifecycle",
    "VALID_TRANSITIONS",
]

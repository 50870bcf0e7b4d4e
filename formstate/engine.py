"""FormEngine: the live state of a configured form.

The engine owns one FormSnapshot at a time. Each edit runs the pipeline in
``formstate.pipeline`` against the current snapshot and, once every pass has
completed, swaps in the result. A rule that raises leaves the previous
snapshot in place and the exception reaches the caller.

Usage:
    >>> from formstate.config import FieldConfig, FormConfig, MessageRule
    >>> config = FormConfig(fields={
    ...     "name": FieldConfig(
    ...         initial_value="",
    ...         constraints=str.strip,
    ...         messages=MessageRule(test=lambda v: not v, message="Required"),
    ...         props={"label": "Name"},
    ...     ),
    ... })
    >>> engine = FormEngine(config)
    >>> engine.apply_edit("name", "  Ada ")
    >>> engine.values["name"]
    'Ada'
    >>> bound = engine.bind("name")
    >>> bound["label"], bound["value"], bound["error"]
    ('Name', 'Ada', '')
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from formstate.config import FormConfig, coerce_config
from formstate.errors import UnknownFieldError
from formstate.events import EventEmitter, EventListener, FormEvent
from formstate.pipeline import settle
from formstate.snapshot import FormSnapshot
from formstate.state_machine import EngineLifecycle
from formstate.types import EngineState, EventType, FieldId, Messages, Value, Values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditEvent:
    """A raw edit as produced by an input surface.

    Any object exposing ``field_id`` and ``value`` attributes is accepted by
    ``FormEngine.on_change``; this class is the canonical one.
    """
    field_id: Optional[FieldId]
    value: Value


class FormEngine:
    """Live, configuration-driven form state.

    Attributes:
        config: The immutable form configuration

    Examples:
        >>> engine = FormEngine({"fields": {"age": {"initialValue": 0}}})
        >>> engine.state
        <EngineState.INITIALIZED: 'initialized'>
        >>> engine.apply_edit("", 42)  # no field id: ignored
        >>> engine.values["age"]
        0
    """

    def __init__(self, config: Union[FormConfig, Mapping[str, Any]]):
        """Initialize the engine.

        Args:
            config: A FormConfig, or an authoring mapping accepted by
                ``FormConfig.from_dict``
        """
        self.config = coerce_config(config)
        self._snapshot = FormSnapshot.initial(self.config)
        self._lifecycle = EngineLifecycle()
        self._emitter = EventEmitter()

    # -- edits ---------------------------------------------------------------

    def apply_edit(self, field_id: Optional[FieldId], raw_value: Value) -> None:
        """Apply a raw edit to a field and settle the whole form.

        Edits whose ``field_id`` is not a string, is empty or is undeclared
        are ignored.

        Args:
            field_id: The edited field
            raw_value: The unconstrained value from the input

        Raises:
            ReentrantEditError: If called while another edit is settling
            Exception: Anything raised by a constraint or predicate, in
                which case the previous state is kept
        """
        if not isinstance(field_id, str) or field_id not in self.config.fields:
            logger.debug("Ignoring edit of undeclared field %r", field_id)
            return

        self._lifecycle.begin_edit(field_id)
        previous = self._snapshot
        try:
            snapshot = settle(self.config, previous, field_id, raw_value)
        except Exception:
            self._lifecycle.abort()
            raise

        self._snapshot = snapshot
        self._lifecycle.commit()

        changed = snapshot.changed_fields(previous)
        logger.debug("Settled edit of %r (changed: %s)", field_id, ", ".join(changed) or "none")

        self._emitter.emit(FormEvent.create(
            EventType.FIELD_SETTLED,
            field_id=field_id,
            raw_value=raw_value,
            values=snapshot.values,
            changed_fields=changed,
            errors=snapshot.errors,
        ))

    def on_change(self, event: Any) -> None:
        """Change handler handed to bound inputs.

        Args:
            event: An EditEvent, or any object with ``field_id`` and
                ``value`` attributes
        """
        self.apply_edit(getattr(event, "field_id", None), getattr(event, "value", None))

    def reset(self) -> None:
        """Restore the initial snapshot.

        Raises:
            InvalidStateTransitionError: If an edit is still settling
        """
        self._lifecycle.reset()
        self._snapshot = FormSnapshot.initial(self.config)
        logger.debug("Form reset to initial values")
        self._emitter.emit(FormEvent.create(
            EventType.FORM_RESET,
            values=self._snapshot.values,
            errors=self._snapshot.errors,
        ))

    # -- projection ----------------------------------------------------------

    def bind(self, field_id: FieldId) -> Dict[str, Any]:
        """Project the current state of one field for an input renderer.

        The result holds the field's presentation props plus ``id``,
        ``value``, ``on_change`` and ``error``. ``error`` is the per-field
        message when there is one, otherwise the whole-form message for the
        field, otherwise "".

        Raises:
            UnknownFieldError: If ``field_id`` is not declared
        """
        field_config = self.config.fields.get(field_id)
        if field_config is None:
            raise UnknownFieldError(field_id)

        return {
            **field_config.props,
            "id": field_id,
            "value": self._snapshot.values[field_id],
            "on_change": self.on_change,
            "error": self._snapshot.error_for(field_id),
        }

    @property
    def snapshot(self) -> FormSnapshot:
        """The currently committed snapshot."""
        return self._snapshot

    @property
    def values(self) -> Values:
        return self._snapshot.values

    @property
    def messages(self) -> Messages:
        """Per-field messages ("" when a field has none)."""
        return self._snapshot.field_messages

    @property
    def global_messages(self) -> Messages:
        """Whole-form messages ("" when a field has none)."""
        return self._snapshot.global_messages

    @property
    def errors(self) -> Messages:
        """Resolved diagnostics for every field, with per-field precedence."""
        return self._snapshot.errors

    @property
    def is_valid(self) -> bool:
        return self._snapshot.is_valid

    @property
    def state(self) -> EngineState:
        return self._lifecycle.state

    @property
    def edit_count(self) -> int:
        """Edits committed since construction or the last reset."""
        return self._lifecycle.edit_count

    # -- notifications -------------------------------------------------------

    def subscribe(self, listener: EventListener, event_type: Optional[EventType] = None) -> None:
        """Register a listener for one event type, or for all when None."""
        if event_type is None:
            self._emitter.on_any(listener)
        else:
            self._emitter.on(event_type, listener)

    def unsubscribe(self, listener: EventListener, event_type: Optional[EventType] = None) -> None:
        """Remove a listener registered with ``subscribe``."""
        if event_type is None:
            self._emitter.off_any(listener)
        else:
            self._emitter.off(event_type, listener)


__all__ = [
    "EditEvent",
    "FormEngine",
]

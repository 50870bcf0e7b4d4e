"""Event system for the formstate engine.

Every committed edit and every reset emits a FormEvent to the listeners
registered on the engine. Listeners are notified synchronously, after the
new snapshot is in place, so they always observe settled state; a typical
listener re-renders the bound inputs or enables a submit button.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from formstate.types import EventType, FieldId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single engine notification.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f9a...")
        type: Event type from EventType enum
        ts: UTC timestamp when the event was emitted
        field_id: The edited field, None for resets
        raw_value: The unconstrained value of the edit, None for resets
        values: Settled values after the event
        changed_fields: Fields whose value changed, in declaration order
        errors: Resolved diagnostics per field after the event

    Examples:
        >>> event = FormEvent.create(
        ...     EventType.FIELD_SETTLED,
        ...     field_id="name",
        ...     raw_value="Maria",
        ...     values={"name": "Mara"},
        ...     changed_fields=("name",),
        ...     errors={"name": ""},
        ... )
        >>> event.type.value
        'field.settled'
    """
    event_id: str
    type: EventType
    ts: datetime
    field_id: Optional[FieldId] = None
    raw_value: Any = None
    values: Mapping[FieldId, Any] = field(default_factory=dict)
    changed_fields: Tuple[FieldId, ...] = ()
    errors: Mapping[FieldId, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate and normalize fields."""
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))
        object.__setattr__(self, "values", dict(self.values))
        object.__setattr__(self, "errors", dict(self.errors))
        object.__setattr__(self, "changed_fields", tuple(self.changed_fields))

    @classmethod
    def create(cls, type: EventType, **kwargs: Any) -> "FormEvent":
        """Create an event with a fresh id and the current UTC time."""
        return cls(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=type,
            ts=datetime.now(timezone.utc),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "ts": self.ts.isoformat(),
            "values": dict(self.values),
            "changedFields": list(self.changed_fields),
            "errors": dict(self.errors),
        }
        if self.field_id is not None:
            result["fieldId"] = self.field_id
            result["rawValue"] = self.raw_value
        return result


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously. They must not edit the engine that
notified them while it is settling.
"""


class EventEmitter:
    """Event emitter for engine notifications.

    Features:
    - Type-specific subscriptions (listen to specific event types)
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch (listeners called in registration order)
    - Error isolation (a failing listener is logged and skipped)

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.FORM_RESET, seen.append)
        >>> emitter.emit(FormEvent.create(EventType.FORM_RESET))
        >>> len(seen)
        1
    """

    def __init__(self):
        """Initialize event emitter with empty listener registries."""
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from the wildcard subscription. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners.

        Type-specific listeners run first, then wildcard listeners. An
        exception raised by a listener is logged and does not reach the
        caller or the remaining listeners.
        """
        for listener in list(self._listeners.get(event.type, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed handling %s", listener, event.type.value)

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count registered listeners.

        Args:
            event_type: If provided, count listeners for this type only.
                        If None, count all listeners (including wildcard).
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(ls) for ls in self._listeners.values())


__all__ = [
    "FormEvent",
    "EventListener",
    "EventEmitter",
]

"""Event bus for internal application communication.

Provides a publish/subscribe mechanism for decoupled component communication.
The sampling loop publishes binding lifecycle events; the controller
publishes status updates that views subscribe to.

Usage:
    from app.events import EventBus, EventType

    bus = EventBus(async_mode=False)

    # Subscribe to events
    bus.subscribe(EventType.INTERFACE_LOST, lambda e: print(f"Lost: {e.data}"))

    # Publish events
    bus.publish(EventType.INTERFACE_LOST, {"interface": "eth0"})
"""
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from config import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """Types of events that can be published/subscribed."""

    # Sampling loop lifecycle
    LOOP_STARTED = auto()
    LOOP_STOPPED = auto()

    # Interface binding
    INTERFACE_BOUND = auto()
    INTERFACE_LOST = auto()
    SELECTION_FAILED = auto()
    SAMPLE_FAILED = auto()

    # Status for the presentation layer
    STATUS_UPDATED = auto()

    # App lifecycle events
    APP_STARTING = auto()
    APP_STOPPING = auto()


@dataclass
class Event:
    """Represents an event with type and data.

    Attributes:
        event_type: The type of event.
        data: Optional dictionary with event-specific data.
        timestamp: When the event was created.
        source: Optional identifier of the event source.
    """
    event_type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None

    def __str__(self) -> str:
        return f"Event({self.event_type.name}, data={self.data})"


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Publish/subscribe bus shared by the sampling loop and the views.

    With ``async_mode`` a daemon worker drains a queue, so publishers never
    run handlers themselves. Without it (the app's default) handlers run on
    the publishing thread, which keeps status updates in tick order.
    Handler errors are logged and never reach the publisher.

    Example:
        >>> bus = EventBus(async_mode=False)
        >>> bus.subscribe(EventType.STATUS_UPDATED, lambda e: print(e.data))
        >>> bus.publish(EventType.STATUS_UPDATED, {"healthy": True})
    """

    _STOP = object()

    def __init__(self, async_mode: bool = True):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._lock = threading.Lock()
        self._async_mode = async_mode
        self._queue: "queue.Queue" = queue.Queue()
        self._worker: Optional[threading.Thread] = None

        if async_mode:
            self._worker = threading.Thread(
                target=self._drain, daemon=True, name="EventBus-Worker"
            )
            self._worker.start()
            logger.debug("EventBus worker thread started")

    @property
    def async_mode(self) -> bool:
        return self._async_mode

    def _drain(self) -> None:
        while True:
            event = self._queue.get()
            if event is self._STOP:
                return
            self._deliver(event)

    def _deliver(self, event: Event) -> None:
        with self._lock:
            handlers = tuple(self._handlers.get(event.event_type, ()))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event.event_type.name}: {e}",
                    exc_info=True
                )

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed to {event_type.name}")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        with self._lock:
            handlers = self._handlers.get(event_type)
            if not handlers or handler not in handlers:
                return False
            handlers.remove(handler)
        logger.debug(f"Unsubscribed from {event_type.name}")
        return True

    def publish(self, event_type: EventType, data: Optional[Dict[str, Any]] = None,
                source: Optional[str] = None) -> None:
        """Publish an event, queued in async mode and delivered inline otherwise."""
        event = Event(event_type=event_type, data=data or {}, source=source)
        if self._worker is not None:
            self._queue.put(event)
        else:
            self._deliver(event)

    def get_subscriber_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))

    def clear_subscribers(self, event_type: Optional[EventType] = None) -> None:
        """Drop the handlers of one event type, or of every type."""
        with self._lock:
            if event_type is None:
                self._handlers.clear()
            else:
                self._handlers.pop(event_type, None)

    def shutdown(self) -> None:
        """Stop the worker after queued events are delivered.

        Later publishes are delivered on the publishing thread.
        """
        worker, self._worker = self._worker, None
        if worker is not None:
            self._queue.put(self._STOP)
            worker.join(timeout=1.0)
        logger.debug("EventBus shut down")

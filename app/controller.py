"""Application controller for Live Network.

Owns the sampling loop, acts as its status sink, and republishes each
status on the event bus for the views. Uses dependency injection for
testability.

Usage:
    from app.controller import AppController
    from app.dependencies import create_dependencies

    deps = create_dependencies()
    controller = AppController(deps)
    controller.start()
"""
import threading
from typing import Callable, Optional

from config import INTERVALS, get_logger
from app.dependencies import AppDependencies
from app.events import EventBus, EventType
from app.timer import TickTimer
from monitor.interfaces import InterfaceSelection
from monitor.sampling import FormattedStatus, LoopEvent, LoopState, SamplingLoop

logger = get_logger(__name__)

LOOP_EVENT_TYPES = {
    LoopEvent.LOOP_STARTED: EventType.LOOP_STARTED,
    LoopEvent.LOOP_STOPPED: EventType.LOOP_STOPPED,
    LoopEvent.INTERFACE_BOUND: EventType.INTERFACE_BOUND,
    LoopEvent.INTERFACE_LOST: EventType.INTERFACE_LOST,
    LoopEvent.SELECTION_FAILED: EventType.SELECTION_FAILED,
    LoopEvent.SAMPLE_FAILED: EventType.SAMPLE_FAILED,
}


class AppController:
    """Central controller between the sampling core and the UI.

    Attributes:
        deps: The dependency container with all components.
        event_bus: Event bus used for status and lifecycle events.
        loop: The sampling loop this controller drives.
    """

    def __init__(
        self,
        deps: AppDependencies,
        event_bus: Optional[EventBus] = None,
        interval: float = INTERVALS.TICK_SECONDS,
        timer_factory: Callable = TickTimer,
    ):
        """Initialize the controller with dependencies.

        Args:
            deps: AppDependencies container with all required components.
            event_bus: Optional event bus (uses the container's if not provided).
            interval: Sampling interval in seconds.
            timer_factory: Timer used by the sampling loop (TickTimer by default).
        """
        self.deps = deps
        self.event_bus = event_bus or deps.event_bus or EventBus(async_mode=False)
        self._status: Optional[FormattedStatus] = None
        self._status_lock = threading.Lock()
        self._running = False

        self.loop = SamplingLoop(
            selector=deps.selector,
            open_counter=deps.open_counter,
            sink=self.handle_status,
            interval=interval,
            timer_factory=timer_factory,
            on_event=self._forward_loop_event,
        )

        logger.info("AppController initialized")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def status(self) -> Optional[FormattedStatus]:
        """The latest status, or None before the first emission."""
        with self._status_lock:
            return self._status

    @property
    def state(self) -> LoopState:
        return self.loop.state

    @property
    def current_selection(self) -> Optional[InterfaceSelection]:
        binding = self.loop.binding
        return binding.selection if binding else None

    def start(self, require_initial_binding: bool = True) -> None:
        """Start sampling.

        Raises:
            InitializationError: If the first binding attempt fails and
                ``require_initial_binding`` is set.
        """
        if self._running:
            return
        logger.info("Starting AppController...")
        self.event_bus.publish(EventType.APP_STARTING)
        self.loop.start(require_initial_binding=require_initial_binding)
        self._running = True
        logger.info("AppController started")

    def stop(self) -> None:
        """Stop sampling and release counters. Idempotent."""
        if not self._running:
            self.loop.stop()
            return
        logger.info("Stopping AppController...")
        self._running = False
        self.loop.stop()
        self.event_bus.publish(EventType.APP_STOPPING)
        logger.info("AppController stopped")

    def handle_status(self, status: FormattedStatus) -> None:
        """Status sink: remember the status and notify subscribers."""
        with self._status_lock:
            self._status = status
        self.event_bus.publish(EventType.STATUS_UPDATED, {
            "status": status,
            "healthy": status.healthy,
        }, source="controller")

    def _forward_loop_event(self, event: LoopEvent, data: dict) -> None:
        self.event_bus.publish(LOOP_EVENT_TYPES[event], data, source="sampling")

    def describe_binding(self) -> str:
        """One-line description of the monitored interface for the UI."""
        selection = self.current_selection
        if selection is None:
            failure = self.loop.last_failure
            return f"Not monitoring ({failure.kind.value})" if failure else "Not monitoring"
        return (
            f"{selection.interface.name} "
            f"({selection.interface.kind.value}, {selection.match_kind.value} match)"
        )

"""Throughput sampling loop.

``SamplingLoop`` ties interface selection, counter sampling and rate
formatting together on a fixed timer. It owns at most one
``ActiveBinding`` and moves between two states:

    UNBOUND --select+open ok--> BOUND
    BOUND --interface lost / counter read error--> UNBOUND

Every tick pushes a ``FormattedStatus`` to the status sink, except the tick
that performs an UNBOUND -> BOUND transition (its warm-up value is not a
real sample).

Example:
    >>> loop = SamplingLoop(selector, open_counter, sink=print, timer_factory=TickTimer)
    >>> loop.start()
    >>> # ... later
    >>> loop.stop()
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from config import (
    INTERVALS,
    UI,
    ConfigurationError,
    CounterSourceError,
    Failure,
    FailureKind,
    InitializationError,
    get_logger,
)
from monitor.counters import CounterSource, RateSample
from monitor.interfaces import InterfaceSelection, InterfaceSelector
from monitor.utils import format_rate, truncate_tooltip

logger = get_logger(__name__)


class LoopState(Enum):
    """Whether the loop currently holds an active binding."""

    UNBOUND = "unbound"
    BOUND = "bound"


class LoopEvent(Enum):
    """Lifecycle notifications passed to the loop's ``on_event`` callback."""

    LOOP_STARTED = "loop_started"
    LOOP_STOPPED = "loop_stopped"
    INTERFACE_BOUND = "interface_bound"
    INTERFACE_LOST = "interface_lost"
    SELECTION_FAILED = "selection_failed"
    SAMPLE_FAILED = "sample_failed"


@dataclass(frozen=True)
class FormattedStatus:
    """The status handed to the presentation layer once per tick."""

    down_text: str
    up_text: str
    tooltip_text: str
    healthy: bool

    @classmethod
    def from_sample(cls, sample: RateSample) -> "FormattedStatus":
        down_text = format_rate(sample.down_bytes_per_sec)
        up_text = format_rate(sample.up_bytes_per_sec)
        tooltip = f"{UI.DOWNLOAD_ARROW} {down_text}\n{UI.UPLOAD_ARROW} {up_text}"
        return cls(
            down_text=down_text,
            up_text=up_text,
            tooltip_text=truncate_tooltip(tooltip),
            healthy=True,
        )

    @classmethod
    def unavailable(cls) -> "FormattedStatus":
        return cls(
            down_text=UI.UNAVAILABLE_TEXT,
            up_text=UI.UNAVAILABLE_TEXT,
            tooltip_text=truncate_tooltip(UI.UNAVAILABLE_TOOLTIP),
            healthy=False,
        )


@dataclass
class ActiveBinding:
    """A selected interface paired with its open counter source."""

    selection: InterfaceSelection
    source: CounterSource

    def close(self) -> None:
        self.source.close()


StatusSink = Callable[[FormattedStatus], None]
CounterOpener = Callable[[str], CounterSource]
EventCallback = Callable[[LoopEvent, dict], None]


class SamplingLoop:
    """Timer-driven sampler with self-healing interface binding.

    Attributes:
        selector: Chooses the interface and counter instance.
        interval: Seconds between ticks.
    """

    def __init__(
        self,
        selector: InterfaceSelector,
        open_counter: CounterOpener,
        sink: StatusSink,
        timer_factory: Callable,
        interval: float = INTERVALS.TICK_SECONDS,
        on_event: Optional[EventCallback] = None,
    ):
        """Initialize the loop in the UNBOUND state.

        Args:
            selector: InterfaceSelector used for binding and liveness.
            open_counter: Opens a CounterSource for an instance name.
            sink: Receives a FormattedStatus per tick.
            timer_factory: ``factory(callback, interval)`` returning an
                object with ``start()``/``stop()``.
            interval: Tick interval in seconds.
            on_event: Optional ``callback(LoopEvent, data)`` for lifecycle
                notifications.
        """
        if interval <= 0:
            raise ConfigurationError("Tick interval must be positive", {"interval": interval})

        self.selector = selector
        self.interval = interval
        self._open_counter = open_counter
        self._sink = sink
        self._timer_factory = timer_factory
        self._on_event = on_event
        self._timer = None
        self._binding: Optional[ActiveBinding] = None
        self._last_failure: Optional[Failure] = None
        self._tick_lock = threading.Lock()
        self._lifecycle_lock = threading.Lock()

    # === State ===

    @property
    def state(self) -> LoopState:
        return LoopState.BOUND if self._binding is not None else LoopState.UNBOUND

    @property
    def binding(self) -> Optional[ActiveBinding]:
        return self._binding

    @property
    def last_failure(self) -> Optional[Failure]:
        """The most recent failure, cleared when a binding is established."""
        return self._last_failure

    @property
    def running(self) -> bool:
        return self._timer is not None

    # === Lifecycle ===

    def start(self, require_initial_binding: bool = False) -> None:
        """Begin ticking.

        Args:
            require_initial_binding: Run the first tick synchronously and
                raise if it does not produce a binding.

        Raises:
            InitializationError: If ``require_initial_binding`` is set and
                the first binding attempt fails.
        """
        with self._lifecycle_lock:
            if self._timer is not None:
                return

            if require_initial_binding:
                self.tick()
                if self._binding is None:
                    failure = self._last_failure or Failure(
                        FailureKind.NO_ACTIVE_INTERFACE, "No binding after first tick"
                    )
                    logger.critical(f"Initial binding failed: {failure}")
                    raise InitializationError(failure)

            self._timer = self._timer_factory(self._on_timer, self.interval)
            self._timer.start()

        logger.info(f"Sampling loop started (interval={self.interval}s)")
        self._publish(LoopEvent.LOOP_STARTED, {"interval": self.interval})

    def stop(self) -> None:
        """Stop ticking and release counters. Idempotent."""
        with self._lifecycle_lock:
            timer, self._timer = self._timer, None
            if timer is not None:
                timer.stop()

            # Wait for an in-flight tick before releasing its binding
            with self._tick_lock:
                had_binding = self._binding is not None
                self._release_binding()

        if timer is not None or had_binding:
            logger.info("Sampling loop stopped")
            self._publish(LoopEvent.LOOP_STOPPED)

    def _on_timer(self, _timer=None) -> None:
        self.tick()

    # === Tick ===

    def tick(self) -> Optional[FormattedStatus]:
        """Run one sampling step.

        Returns:
            The status emitted to the sink, or None if nothing was emitted
            (binding established this tick, or tick skipped).
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.debug("Previous tick still running, skipping")
            return None
        try:
            if self._binding is None:
                status = self._tick_unbound()
            else:
                status = self._tick_bound()
        finally:
            self._tick_lock.release()

        if status is not None:
            self._emit(status)
        return status

    def _tick_unbound(self) -> Optional[FormattedStatus]:
        if self._try_bind():
            return None
        return FormattedStatus.unavailable()

    def _tick_bound(self) -> Optional[FormattedStatus]:
        if not self.selector.is_interface_available():
            self._fail(Failure(
                FailureKind.NO_ACTIVE_INTERFACE,
                "Active interface went down",
                {"interface": self._binding.selection.interface.name},
            ))
            self._release_binding(lost=True)
            return FormattedStatus.unavailable()

        try:
            sample = self._binding.source.sample()
        except CounterSourceError as e:
            logger.debug("Counter read failed", exc_info=True)
            self._fail(Failure(FailureKind.COUNTER_READ_FAILURE, e.message, dict(e.details)))
            self._publish(LoopEvent.SAMPLE_FAILED, {"error": e.message})
            self._release_binding(lost=True)

            # One immediate re-selection before the next scheduled tick
            if self._try_bind():
                return None
            return FormattedStatus.unavailable()

        return FormattedStatus.from_sample(sample)

    # === Binding ===

    def _try_bind(self) -> bool:
        result = self.selector.select()
        if not result.ok:
            self._fail(result.failure)
            self._publish(LoopEvent.SELECTION_FAILED, {"kind": result.failure.kind.value})
            return False

        selection = result.selection
        try:
            source = self._open_counter(selection.instance_name)
        except CounterSourceError as e:
            self._fail(Failure(
                FailureKind.COUNTER_READ_FAILURE,
                e.message,
                {"instance": selection.instance_name, **e.details},
            ))
            return False

        self._binding = ActiveBinding(selection=selection, source=source)
        self._last_failure = None
        logger.info(
            f"Bound to {selection.interface.name} via '{selection.instance_name}' "
            f"[{selection.match_kind.value}]"
        )
        self._publish(LoopEvent.INTERFACE_BOUND, {
            "interface": selection.interface.name,
            "instance": selection.instance_name,
            "match_kind": selection.match_kind.value,
        })
        return True

    def _release_binding(self, lost: bool = False) -> None:
        binding, self._binding = self._binding, None
        if binding is None:
            return
        binding.close()
        if lost:
            self._publish(LoopEvent.INTERFACE_LOST, {
                "interface": binding.selection.interface.name,
                "reason": self._last_failure.kind.value if self._last_failure else None,
            })

    def _fail(self, failure: Failure) -> None:
        # Log only on change to avoid one line per second while degraded
        if failure != self._last_failure:
            logger.warning(f"Sampling degraded: {failure}")
        self._last_failure = failure

    # === Output ===

    def _emit(self, status: FormattedStatus) -> None:
        self._sink(status)

    def _publish(self, event: LoopEvent, data: Optional[dict] = None) -> None:
        if self._on_event is not None:
            self._on_event(event, data or {})

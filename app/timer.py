"""Tick timers for the sampling loop.

``TickTimer`` calls its callback from a background thread at a fixed
interval. ``MenuAwareTimer`` does the same but hands each tick to the
macOS main thread with performSelectorOnMainThread, so the menu bar keeps
updating while the menu is open.

Usage:
    from app.timer import TickTimer

    def on_tick(timer):
        print("Tick!")

    timer = TickTimer(on_tick, interval=1.0)
    timer.start()
"""

import threading
from typing import Callable, Optional

from config import INTERVALS, get_logger, log_exception

logger = get_logger(__name__)


class TickTimer:
    """Fixed-interval timer running callbacks on a daemon thread.

    Callbacks run one at a time; a slow callback delays the next tick
    instead of overlapping it.

    Attributes:
        interval: Time between timer ticks in seconds.
    """

    _join_on_stop = True

    def __init__(self, callback: Callable, interval: float):
        """Initialize the timer.

        Args:
            callback: Function to call on each tick. Receives the timer as argument.
            interval: Time between ticks in seconds.
        """
        self._callback = callback
        self._interval = interval
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        """Get the current interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Update interval."""
        with self._lock:
            self._interval = value

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def _dispatch(self) -> None:
        """Run one tick; subclasses may hand it to another thread."""
        self._run_callback()

    def _run_callback(self) -> None:
        if self._stop_event.is_set():
            return
        try:
            self._callback(self)
        except Exception as e:
            log_exception(logger, "Timer callback failed", e)

    def _timer_loop(self) -> None:
        """Background thread that fires ticks until stopped."""
        while not self._stop_event.wait(self._interval):
            self._dispatch()

    def start(self) -> None:
        """Start the timer in a background thread."""
        if self.running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._timer_loop, daemon=True, name=type(self).__name__
        )
        self._thread.start()
        logger.debug(f"{type(self).__name__} started with interval {self._interval}s")

    def stop(self) -> None:
        """Stop the timer and wait for an in-flight tick to finish."""
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if (self._join_on_stop and thread is not None
                and thread is not threading.current_thread()):
            thread.join(timeout=INTERVALS.TIMER_JOIN_TIMEOUT_SECONDS)
        logger.debug(f"{type(self).__name__} stopped")


# Global callback helper for MenuAwareTimer - defined once at module level
_TimerCallbackHelper = None
_TimerCallbackHelperLock = threading.Lock()


def _get_timer_callback_helper():
    """Get or create the global callback helper class (thread-safe)."""
    global _TimerCallbackHelper

    # Fast path - already created
    if _TimerCallbackHelper is not None:
        return _TimerCallbackHelper

    with _TimerCallbackHelperLock:
        # Double-check after acquiring lock
        if _TimerCallbackHelper is not None:
            return _TimerCallbackHelper

        from Foundation import NSObject

        class _MenuAwareTimerHelper(NSObject):
            """Helper object to dispatch timer callbacks to main thread."""

            timer_ref = None

            def doCallback_(self, _):
                if self.timer_ref is not None:
                    self.timer_ref._run_callback()

        _TimerCallbackHelper = _MenuAwareTimerHelper

    return _TimerCallbackHelper


class MenuAwareTimer(TickTimer):
    """Timer that keeps firing while the macOS menu is open.

    Ticks are dispatched to the main thread and waited for, so UI updates
    stay on the main thread and ticks still never overlap.
    """

    # The timer thread may be blocked on the main thread, which is the
    # thread calling stop()
    _join_on_stop = False

    def __init__(self, callback: Callable, interval: float):
        super().__init__(callback, interval)
        self._helper = None

    def _dispatch(self) -> None:
        if self._helper is None:
            helper = _get_timer_callback_helper().alloc().init()
            helper.timer_ref = self
            self._helper = helper
        self._helper.performSelectorOnMainThread_withObject_waitUntilDone_(
            "doCallback:", None, True
        )

    def stop(self) -> None:
        super().stop()
        if self._helper is not None:
            self._helper.timer_ref = None
            self._helper = None

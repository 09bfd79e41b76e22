"""Live per-interface byte-rate counters.

A ``CounterProvider`` exposes the cumulative byte counts of each counter
instance (one per interface). ``RateCounter`` turns one cumulative count
into a windowed rate the way an OS rate counter does: each read reports the
rate since the previous read. ``CounterSource`` pairs a received and a sent
rate counter for one instance.

Example:
    >>> provider = PsutilCounterProvider()
    >>> with CounterSource.open(provider, "eth0") as source:
    ...     sample = source.sample()
    ...     print(sample.down_bytes_per_sec, sample.up_bytes_per_sec)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import psutil

from config import (
    INTERVALS,
    NETWORK,
    CounterClosedError,
    CounterReadError,
    CounterSourceError,
    LogContext,
    get_logger,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateSample:
    """Throughput over one sampling window.

    Attributes:
        down_bytes_per_sec: Receive rate, never negative.
        up_bytes_per_sec: Send rate, never negative.
    """

    down_bytes_per_sec: float
    up_bytes_per_sec: float


class PsutilCounterProvider:
    """Counter provider backed by ``psutil.net_io_counters(pernic=True)``.

    Instance names are the per-NIC keys psutil reports, so on every
    platform they use the same naming as ``psutil.net_if_stats()``.
    """

    category = NETWORK.COUNTER_CATEGORY

    def _per_nic(self) -> dict:
        try:
            return psutil.net_io_counters(pernic=True) or {}
        except (OSError, RuntimeError) as e:
            raise CounterSourceError(
                "Counter category unavailable",
                {"category": self.category, "error": str(e)},
            ) from e

    def instance_names(self) -> List[str]:
        """List counter instance names.

        Raises:
            CounterSourceError: If the counter subsystem cannot be queried.
        """
        return list(self._per_nic().keys())

    def read(self, instance_name: str) -> Tuple[int, int]:
        """Read cumulative ``(bytes_recv, bytes_sent)`` for an instance.

        Raises:
            CounterReadError: If the instance is gone or the read fails.
        """
        try:
            counters = self._per_nic()
        except CounterSourceError as e:
            raise CounterReadError(e.message, {"instance": instance_name, **e.details}) from e

        if instance_name not in counters:
            raise CounterReadError(
                "Counter instance no longer exists", {"instance": instance_name}
            )

        nic = counters[instance_name]
        return nic.bytes_recv, nic.bytes_sent


class RateCounter:
    """Windowed rate over one cumulative counter.

    ``next_value()`` returns bytes/sec since the previous call. The very
    first call has no previous window and returns 0.0, so callers should
    discard it.
    """

    def __init__(self, read: Callable[[], int], name: str,
                 clock: Callable[[], float] = time.monotonic):
        self._read = read
        self._clock = clock
        self.name = name
        self._last_value: Optional[int] = None
        self._last_time: float = 0.0
        self._last_rate: float = 0.0

    def next_value(self) -> float:
        value = self._read()
        now = self._clock()

        if self._last_value is None:
            rate = 0.0
        else:
            elapsed = now - self._last_time
            if elapsed < INTERVALS.MIN_RATE_WINDOW_SECONDS:
                return self._last_rate
            # Counter wrap or reset shows up as a negative delta
            rate = max(0.0, (value - self._last_value) / elapsed)

        self._last_value = value
        self._last_time = now
        self._last_rate = rate
        return rate


class CounterSource:
    """Received/sent byte-rate counters bound to one instance name.

    Use ``CounterSource.open()`` rather than the constructor: it performs
    the warm-up read so the first real sample reflects actual traffic.

    Attributes:
        instance_name: Counter instance this source reads.
    """

    def __init__(self, provider, instance_name: str,
                 clock: Callable[[], float] = time.monotonic):
        self.instance_name = instance_name
        self._provider = provider
        self._closed = False
        self._snapshot: Optional[Tuple[int, int]] = None
        self._down = RateCounter(lambda: self._snapshot[0], NETWORK.BYTES_RECEIVED_COUNTER, clock)
        self._up = RateCounter(lambda: self._snapshot[1], NETWORK.BYTES_SENT_COUNTER, clock)

    @classmethod
    def open(
        cls,
        provider,
        instance_name: str,
        warmup_seconds: float = INTERVALS.COUNTER_WARMUP_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> "CounterSource":
        """Open counters for an instance and discard the warm-up read.

        Blocks for ``warmup_seconds``.

        Raises:
            CounterReadError: If the instance cannot be read.
        """
        source = cls(provider, instance_name, clock=clock)
        with LogContext(logger, f"Counter warm-up for '{instance_name}'"):
            try:
                source._read_rates()
                sleep(warmup_seconds)
                source._read_rates()
            except CounterSourceError:
                source.close()
                raise
        logger.debug(f"Opened counters for '{instance_name}'")
        return source

    @property
    def closed(self) -> bool:
        return self._closed

    def _read_rates(self) -> Tuple[float, float]:
        self._snapshot = self._provider.read(self.instance_name)
        return self._down.next_value(), self._up.next_value()

    def sample(self) -> RateSample:
        """Return the rates since the previous read.

        Raises:
            CounterClosedError: If the source was closed.
            CounterReadError: If the counters can no longer be read.
        """
        if self._closed:
            raise CounterClosedError(
                "Counter source is closed", {"instance": self.instance_name}
            )
        down, up = self._read_rates()
        return RateSample(down_bytes_per_sec=max(0.0, down), up_bytes_per_sec=max(0.0, up))

    def close(self) -> None:
        """Release the counters. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._snapshot = None
        logger.debug(f"Closed counters for '{self.instance_name}'")

    def __enter__(self) -> "CounterSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"CounterSource({self.instance_name!r}, {state})"

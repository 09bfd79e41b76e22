"""Fake implementations for testing Live Network.

Provides stand-ins for the OS seams (interface enumeration, live
counters), the timer and the status sink, so the sampling core can be
driven tick by tick without system access or real sleeps.

Usage:
    from tests.mocks import FakeCounterProvider, FakeInterfaceEnumerator, ethernet

    enumerator = FakeInterfaceEnumerator([ethernet("eth0")])
    provider = FakeCounterProvider({"eth0": (0, 0)})
"""

from typing import Dict, List, Optional, Tuple

from config import CounterReadError, CounterSourceError, InterfaceEnumerationError
from monitor.counters import RateSample
from monitor.interfaces import InterfaceKind, NetworkInterfaceDescriptor

# === Descriptor helpers ===


def ethernet(name: str = "eth0", description: Optional[str] = None,
             is_up: bool = True) -> NetworkInterfaceDescriptor:
    return NetworkInterfaceDescriptor(name, description or name, is_up, InterfaceKind.ETHERNET)


def wireless(name: str = "wlan0", description: Optional[str] = None,
             is_up: bool = True) -> NetworkInterfaceDescriptor:
    return NetworkInterfaceDescriptor(name, description or name, is_up, InterfaceKind.WIRELESS)


def other(name: str = "lo", description: Optional[str] = None,
          is_up: bool = True) -> NetworkInterfaceDescriptor:
    return NetworkInterfaceDescriptor(name, description or name, is_up, InterfaceKind.OTHER)


# === Clock ===


class FakeClock:
    """Monotonic clock that only moves when told to; sleep() advances it."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


# === OS seams ===


class FakeInterfaceEnumerator:
    """Interface enumerator returning a configurable list."""

    def __init__(self, interfaces: Optional[List[NetworkInterfaceDescriptor]] = None):
        self.interfaces = list(interfaces or [])
        self.fail = False
        self.calls = 0

    def set_interfaces(self, interfaces: List[NetworkInterfaceDescriptor]) -> None:
        self.interfaces = list(interfaces)

    def enumerate(self) -> List[NetworkInterfaceDescriptor]:
        self.calls += 1
        if self.fail:
            raise InterfaceEnumerationError("Enumeration failed")
        return list(self.interfaces)


class FakeCounterProvider:
    """Counter provider with controllable cumulative byte counts."""

    def __init__(self, instances: Optional[Dict[str, Tuple[int, int]]] = None):
        self._counts: Dict[str, List[int]] = {
            name: list(counts) for name, counts in (instances or {}).items()
        }
        self.category_unavailable = False
        self.read_error = False
        self.reads = 0

    def add_bytes(self, instance: str, recv: int = 0, sent: int = 0) -> None:
        self._counts[instance][0] += recv
        self._counts[instance][1] += sent

    def set_bytes(self, instance: str, recv: int, sent: int) -> None:
        self._counts[instance] = [recv, sent]

    def remove_instance(self, instance: str) -> None:
        self._counts.pop(instance, None)

    def instance_names(self) -> List[str]:
        if self.category_unavailable:
            raise CounterSourceError("Counter category unavailable", {"category": "Network Interface"})
        return list(self._counts.keys())

    def read(self, instance_name: str) -> Tuple[int, int]:
        self.reads += 1
        if self.read_error:
            raise CounterReadError("Counter registry reset", {"instance": instance_name})
        if instance_name not in self._counts:
            raise CounterReadError("Counter instance no longer exists", {"instance": instance_name})
        recv, sent = self._counts[instance_name]
        return recv, sent


# === Counter sources ===


class FakeCounterSource:
    """Counter source returning fixed rates, or failing on demand."""

    def __init__(self, instance_name: str, opener: "CountingCounterOpener"):
        self.instance_name = instance_name
        self._opener = opener
        self.closed = False
        self.close_calls = 0

    def sample(self) -> RateSample:
        if self._opener.fail_reads:
            raise CounterReadError("Counter read failed", {"instance": self.instance_name})
        down, up = self._opener.rates
        return RateSample(down_bytes_per_sec=down, up_bytes_per_sec=up)

    def close(self) -> None:
        self.close_calls += 1
        if not self.closed:
            self.closed = True
            self._opener.closed += 1


class CountingCounterOpener:
    """``open_counter`` replacement that counts opens and closes."""

    def __init__(self, rates: Tuple[float, float] = (0.0, 0.0)):
        self.rates = rates
        self.fail_opens = False
        self.fail_reads = False
        self.opened = 0
        self.closed = 0
        self.sources: List[FakeCounterSource] = []

    def __call__(self, instance_name: str) -> FakeCounterSource:
        if self.fail_opens:
            raise CounterReadError("Could not open counters", {"instance": instance_name})
        source = FakeCounterSource(instance_name, self)
        self.opened += 1
        self.sources.append(source)
        return source

    @property
    def open_count(self) -> int:
        return self.opened - self.closed


# === Timer and sink ===


class ManualTimer:
    """Timer that ticks only when ``fire()`` is called."""

    instances: List["ManualTimer"] = []

    def __init__(self, callback, interval: float):
        self.callback = callback
        self.interval = interval
        self.started = False
        self.stop_calls = 0
        ManualTimer.instances.append(self)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.started = False
        self.stop_calls += 1

    def fire(self) -> None:
        if self.started:
            self.callback(self)


class RecordingSink:
    """Status sink that records every status it receives."""

    def __init__(self):
        self.statuses = []

    def __call__(self, status) -> None:
        self.statuses.append(status)

    @property
    def last(self):
        return self.statuses[-1] if self.statuses else None

"""Pytest configuration and shared fixtures.

This module provides:
- Fakes for the OS seams wired into a selector and sampling loop
- Pytest markers for test categorization (unit, integration, macos_only)
"""
from pathlib import Path
from typing import Generator, List, Tuple
from unittest.mock import MagicMock, patch

import pytest

from app.events import EventBus
from monitor.interfaces import InterfaceSelector
from monitor.sampling import LoopEvent, SamplingLoop
from tests.mocks import (
    CountingCounterOpener,
    FakeClock,
    FakeCounterProvider,
    FakeInterfaceEnumerator,
    ManualTimer,
    RecordingSink,
    ethernet,
)


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: mark test as a unit test (fast, isolated)")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "macos_only: mark test as requiring macOS")


# =============================================================================
# Fake OS Fixtures
# =============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def enumerator() -> FakeInterfaceEnumerator:
    """One operationally-up Ethernet interface named eth0."""
    return FakeInterfaceEnumerator([ethernet("eth0")])


@pytest.fixture
def provider() -> FakeCounterProvider:
    """One counter instance, eth0, at zero bytes."""
    return FakeCounterProvider({"eth0": (0, 0)})


@pytest.fixture
def selector(enumerator, provider) -> InterfaceSelector:
    return InterfaceSelector(enumerator, provider)


@pytest.fixture
def opener() -> CountingCounterOpener:
    return CountingCounterOpener(rates=(2048.0, 512.0))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sync_event_bus() -> EventBus:
    return EventBus(async_mode=False)


@pytest.fixture
def loop_events() -> List[Tuple[LoopEvent, dict]]:
    """(event, data) pairs reported by the loop fixture."""
    return []


@pytest.fixture
def loop(selector, opener, sink, loop_events) -> Generator[SamplingLoop, None, None]:
    """A sampling loop driven by a ManualTimer."""
    loop = SamplingLoop(
        selector=selector,
        open_counter=opener,
        sink=sink,
        timer_factory=ManualTimer,
        on_event=lambda event, data: loop_events.append((event, data)),
    )
    yield loop
    loop.stop()


# =============================================================================
# psutil Fixtures
# =============================================================================


@pytest.fixture
def mock_net_if_stats() -> Generator[MagicMock, None, None]:
    """Mock psutil.net_if_stats with loopback, a docker bridge, eth0 and wlan0."""
    with patch("psutil.net_if_stats") as mock_stats:
        mock_stats.return_value = {
            "lo": MagicMock(isup=True, flags="up,loopback,running"),
            "docker0": MagicMock(isup=True, flags="up,broadcast,multicast"),
            "eth0": MagicMock(isup=False, flags="broadcast,multicast"),
            "wlan0": MagicMock(isup=True, flags="up,broadcast,running,multicast"),
        }
        yield mock_stats


@pytest.fixture
def mock_net_io_counters() -> Generator[MagicMock, None, None]:
    """Mock psutil.net_io_counters(pernic=True) with two NICs."""
    with patch("psutil.net_io_counters") as mock_io:
        mock_io.return_value = {
            "eth0": MagicMock(bytes_recv=5000000, bytes_sent=1000000),
            "wlan0": MagicMock(bytes_recv=200, bytes_sent=100),
        }
        yield mock_io


@pytest.fixture
def empty_sysfs(tmp_path: Path) -> Path:
    """A sysfs net directory with no interfaces, so name prefixes decide."""
    sysfs = tmp_path / "sys-class-net"
    sysfs.mkdir()
    return sysfs

"""Dependency injection container for Live Network.

Provides a centralized way to create the sampling components, making them
easy to replace with fakes in tests.

Usage:
    from app.dependencies import create_dependencies

    deps = create_dependencies()
    result = deps.selector.select()
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from config import INTERVALS, get_logger

logger = get_logger(__name__)


@dataclass
class AppDependencies:
    """Container for the sampling dependencies.

    Each field represents a component that can be injected.
    """

    # OS seams
    enumerator: "PsutilInterfaceEnumerator"
    counter_provider: "PsutilCounterProvider"

    # Core components
    selector: "InterfaceSelector"
    open_counter: Callable[[str], "CounterSource"]

    # Event bus (optional, can be shared)
    event_bus: Optional["EventBus"] = None

    def __post_init__(self):
        logger.debug("AppDependencies container created")


def create_dependencies(
    event_bus: Optional["EventBus"] = None,
    warmup_seconds: float = INTERVALS.COUNTER_WARMUP_SECONDS,
) -> AppDependencies:
    """Create the psutil-backed dependencies.

    Args:
        event_bus: Provide an existing event bus, or a synchronous one is created.
        warmup_seconds: Counter warm-up delay used when opening counters.

    Returns:
        AppDependencies container with all components.
    """
    # Import here to avoid circular imports
    from app.events import EventBus
    from monitor.counters import CounterSource, PsutilCounterProvider
    from monitor.interfaces import InterfaceSelector, PsutilInterfaceEnumerator

    logger.info("Creating application dependencies...")

    enumerator = PsutilInterfaceEnumerator()
    counter_provider = PsutilCounterProvider()
    selector = InterfaceSelector(enumerator, counter_provider)
    open_counter = partial(CounterSource.open, counter_provider, warmup_seconds=warmup_seconds)

    if event_bus is None:
        event_bus = EventBus(async_mode=False)

    return AppDependencies(
        enumerator=enumerator,
        counter_provider=counter_provider,
        selector=selector,
        open_counter=open_counter,
        event_bus=event_bus,
    )

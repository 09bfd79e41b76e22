"""Tests for the app module (events, dependencies, controller)."""
import time
from functools import partial

import pytest

from app.controller import AppController
from app.dependencies import AppDependencies, create_dependencies
from app.events import Event, EventBus, EventType
from app.timer import TickTimer
from config import FailureKind, InitializationError
from monitor.counters import CounterSource, PsutilCounterProvider
from monitor.interfaces import InterfaceSelector, PsutilInterfaceEnumerator
from monitor.sampling import FormattedStatus, LoopState
from tests.mocks import (
    CountingCounterOpener,
    FakeCounterProvider,
    FakeInterfaceEnumerator,
    ManualTimer,
    ethernet,
)


class TestEventBus:
    """Tests for EventBus."""

    def test_subscribe_and_publish(self):
        """Events should be delivered to subscribers."""
        bus = EventBus(async_mode=False)
        received = []

        def handler(event):
            received.append(event)

        bus.subscribe(EventType.STATUS_UPDATED, handler)
        bus.publish(EventType.STATUS_UPDATED, {"healthy": True})

        assert len(received) == 1
        assert received[0].data["healthy"] is True

    def test_multiple_subscribers(self):
        """Multiple subscribers should all receive events."""
        bus = EventBus(async_mode=False)
        count = [0]

        def handler1(event):
            count[0] += 1

        def handler2(event):
            count[0] += 10

        bus.subscribe(EventType.INTERFACE_BOUND, handler1)
        bus.subscribe(EventType.INTERFACE_BOUND, handler2)
        bus.publish(EventType.INTERFACE_BOUND)

        assert count[0] == 11

    def test_unsubscribe(self):
        """Unsubscribed handlers should not receive events."""
        bus = EventBus(async_mode=False)
        received = []

        def handler(event):
            received.append(event)

        bus.subscribe(EventType.INTERFACE_LOST, handler)
        bus.publish(EventType.INTERFACE_LOST)
        assert len(received) == 1

        assert bus.unsubscribe(EventType.INTERFACE_LOST, handler) is True
        bus.publish(EventType.INTERFACE_LOST)
        assert len(received) == 1  # No new events

    def test_unsubscribe_unknown_handler(self):
        bus = EventBus(async_mode=False)
        assert bus.unsubscribe(EventType.INTERFACE_LOST, lambda e: None) is False

    def test_different_event_types(self):
        """Handlers should only receive their subscribed event type."""
        bus = EventBus(async_mode=False)
        received = []

        bus.subscribe(EventType.LOOP_STARTED, lambda e: received.append(e.event_type))
        bus.publish(EventType.LOOP_STARTED)
        bus.publish(EventType.LOOP_STOPPED)

        assert received == [EventType.LOOP_STARTED]

    def test_handler_error_does_not_stop_others(self):
        """A failing handler is logged; the rest still run."""
        bus = EventBus(async_mode=False)
        received = []

        def bad_handler(event):
            raise ValueError("boom")

        bus.subscribe(EventType.SAMPLE_FAILED, bad_handler)
        bus.subscribe(EventType.SAMPLE_FAILED, received.append)
        bus.publish(EventType.SAMPLE_FAILED)

        assert len(received) == 1

    def test_event_fields(self):
        bus = EventBus(async_mode=False)
        received = []
        bus.subscribe(EventType.SELECTION_FAILED, received.append)

        bus.publish(EventType.SELECTION_FAILED, {"kind": "no_active_interface"}, source="sampling")

        event = received[0]
        assert isinstance(event, Event)
        assert event.source == "sampling"
        assert str(event) == "Event(SELECTION_FAILED, data={'kind': 'no_active_interface'})"

    def test_subscriber_count_and_clear(self):
        bus = EventBus(async_mode=False)
        bus.subscribe(EventType.LOOP_STARTED, lambda e: None)
        bus.subscribe(EventType.LOOP_STARTED, lambda e: None)
        bus.subscribe(EventType.LOOP_STOPPED, lambda e: None)

        assert bus.get_subscriber_count(EventType.LOOP_STARTED) == 2

        bus.clear_subscribers(EventType.LOOP_STARTED)
        assert bus.get_subscriber_count(EventType.LOOP_STARTED) == 0
        assert bus.get_subscriber_count(EventType.LOOP_STOPPED) == 1

        bus.clear_subscribers()
        assert bus.get_subscriber_count(EventType.LOOP_STOPPED) == 0

    def test_async_mode(self):
        """Async events are delivered by the worker thread."""
        bus = EventBus(async_mode=True)
        received = []
        bus.subscribe(EventType.STATUS_UPDATED, received.append)

        try:
            bus.publish(EventType.STATUS_UPDATED)
            deadline = time.time() + 2.0
            while not received and time.time() < deadline:
                time.sleep(0.01)
        finally:
            bus.shutdown()

        assert len(received) == 1
        assert bus.async_mode is True

    def test_publish_after_shutdown_is_synchronous(self):
        bus = EventBus(async_mode=True)
        bus.shutdown()
        received = []
        bus.subscribe(EventType.APP_STOPPING, received.append)

        bus.publish(EventType.APP_STOPPING)

        assert len(received) == 1


class TestAppDependencies:
    """Tests for the dependency container."""

    def test_create_dependencies_wires_psutil_components(self):
        deps = create_dependencies()

        assert isinstance(deps.enumerator, PsutilInterfaceEnumerator)
        assert isinstance(deps.counter_provider, PsutilCounterProvider)
        assert isinstance(deps.selector, InterfaceSelector)
        assert deps.selector.enumerator is deps.enumerator
        assert deps.selector.counters is deps.counter_provider
        assert isinstance(deps.event_bus, EventBus)
        assert deps.event_bus.async_mode is False

    def test_create_dependencies_uses_given_bus(self):
        bus = EventBus(async_mode=False)
        assert create_dependencies(event_bus=bus).event_bus is bus

    def test_open_counter_is_bound_to_provider(self):
        deps = create_dependencies(warmup_seconds=0.5)

        assert isinstance(deps.open_counter, partial)
        assert deps.open_counter.func == CounterSource.open
        assert deps.open_counter.args == (deps.counter_provider,)
        assert deps.open_counter.keywords == {"warmup_seconds": 0.5}


@pytest.fixture
def fake_deps(sync_event_bus):
    enumerator = FakeInterfaceEnumerator([ethernet("eth0")])
    provider = FakeCounterProvider({"eth0": (0, 0)})
    return AppDependencies(
        enumerator=enumerator,
        counter_provider=provider,
        selector=InterfaceSelector(enumerator, provider),
        open_counter=CountingCounterOpener(rates=(1536.0, 0.0)),
        event_bus=sync_event_bus,
    )


@pytest.fixture
def controller(fake_deps):
    controller = AppController(fake_deps, timer_factory=ManualTimer)
    yield controller
    controller.stop()


class TestAppController:
    """Tests for AppController."""

    def test_uses_container_event_bus(self, controller, fake_deps):
        assert controller.event_bus is fake_deps.event_bus

    def test_initial_state(self, controller):
        assert not controller.running
        assert controller.status is None
        assert controller.state == LoopState.UNBOUND
        assert controller.current_selection is None

    def test_start_binds_immediately(self, controller):
        controller.start()

        assert controller.running
        assert controller.state == LoopState.BOUND
        assert controller.current_selection.interface.name == "eth0"

    def test_start_failure_raises_and_stays_stopped(self, controller, fake_deps):
        fake_deps.enumerator.set_interfaces([])

        with pytest.raises(InitializationError) as exc_info:
            controller.start()

        assert exc_info.value.failure.kind == FailureKind.NO_ACTIVE_INTERFACE
        assert not controller.running

    def test_start_without_required_binding(self, controller, fake_deps):
        fake_deps.enumerator.set_interfaces([])

        controller.start(require_initial_binding=False)

        assert controller.running
        assert controller.state == LoopState.UNBOUND

    def test_status_updates_are_published(self, controller, fake_deps):
        received = []
        fake_deps.event_bus.subscribe(EventType.STATUS_UPDATED, received.append)

        controller.start()
        ManualTimer.instances[-1].fire()

        assert controller.status == FormattedStatus(
            down_text="1.5 KB/s",
            up_text="0.0 B/s",
            tooltip_text="↓ 1.5 KB/s\n↑ 0.0 B/s",
            healthy=True,
        )
        assert len(received) == 1
        assert received[0].data == {"status": controller.status, "healthy": True}
        assert received[0].source == "controller"

    def test_lifecycle_events(self, controller, fake_deps):
        received = []
        fake_deps.event_bus.subscribe(EventType.APP_STARTING, received.append)
        fake_deps.event_bus.subscribe(EventType.APP_STOPPING, received.append)

        controller.start()
        controller.stop()
        controller.stop()

        assert [e.event_type for e in received] == [EventType.APP_STARTING, EventType.APP_STOPPING]

    def test_loop_events_are_published_from_sampling(self, controller, fake_deps):
        received = []
        for event_type in EventType:
            fake_deps.event_bus.subscribe(event_type, received.append)

        controller.start()
        fake_deps.enumerator.set_interfaces([])
        ManualTimer.instances[-1].fire()
        controller.stop()

        loop_events = [e for e in received if e.source == "sampling"]
        assert [e.event_type for e in loop_events] == [
            EventType.INTERFACE_BOUND,
            EventType.LOOP_STARTED,
            EventType.INTERFACE_LOST,
            EventType.LOOP_STOPPED,
        ]
        assert loop_events[0].data == {"interface": "eth0", "instance": "eth0", "match_kind": "exact"}
        assert loop_events[2].data["reason"] == "no_active_interface"

    def test_default_timer_is_tick_timer(self, fake_deps):
        assert AppController(fake_deps).loop._timer_factory is TickTimer

    def test_stop_releases_counters(self, controller, fake_deps):
        controller.start()
        controller.stop()

        assert fake_deps.open_counter.open_count == 0
        assert controller.state == LoopState.UNBOUND

    def test_describe_binding(self, controller, fake_deps):
        assert controller.describe_binding() == "Not monitoring"

        controller.start()
        assert controller.describe_binding() == "eth0 (ethernet, exact match)"

        fake_deps.enumerator.set_interfaces([])
        ManualTimer.instances[-1].fire()
        assert controller.describe_binding() == "Not monitoring (no_active_interface)"

"""Status views: render a FormattedStatus for the user.

``MenuBarStatusView`` drives a rumps-style menu bar app (anything with a
``title`` and ``icon``, plus menu items with a ``title``). It does not
import rumps, so it can be exercised with plain mocks.
``ConsoleStatusView`` writes one line per status to a text stream.

Usage:
    view = MenuBarStatusView(app, icons, download_item, upload_item)
    view.attach(event_bus)
"""
import sys
from datetime import datetime
from typing import Callable, Optional, TextIO

from config import UI, get_logger
from app.events import Event, EventBus, EventType
from monitor.sampling import FormattedStatus

logger = get_logger(__name__)


def rate_label(arrow: str, text: str) -> str:
    return f"{arrow} {text}"


class MenuBarStatusView:
    """Applies statuses to the menu bar title, icon and menu items."""

    def __init__(self, app, icons, download_item, upload_item,
                 tooltip_item=None, interface_item=None,
                 describe_binding: Optional[Callable[[], str]] = None):
        self._app = app
        self._icons = icons
        self._download_item = download_item
        self._upload_item = upload_item
        self._tooltip_item = tooltip_item
        self._interface_item = interface_item
        self._describe_binding = describe_binding
        self.show_initial()

    def show_initial(self) -> None:
        self._download_item.title = rate_label(UI.DOWNLOAD_ARROW, UI.INITIAL_RATE_TEXT)
        self._upload_item.title = rate_label(UI.UPLOAD_ARROW, UI.INITIAL_RATE_TEXT)
        self._app.title = (
            f"{self._download_item.title} {self._upload_item.title}"
        )

    def apply(self, status: FormattedStatus) -> None:
        down = rate_label(UI.DOWNLOAD_ARROW, status.down_text)
        up = rate_label(UI.UPLOAD_ARROW, status.up_text)

        self._app.title = f"{down} {up}"
        self._app.icon = self._icons.icon_for_health(status.healthy)
        self._download_item.title = down
        self._upload_item.title = up

        if self._tooltip_item is not None:
            # Menu items are single-line; the tooltip uses a newline separator
            self._tooltip_item.title = status.tooltip_text.replace("\n", "  ")
        if self._interface_item is not None and self._describe_binding is not None:
            self._interface_item.title = self._describe_binding()

    def _on_status(self, event: Event) -> None:
        self.apply(event.data["status"])

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe(EventType.STATUS_UPDATED, self._on_status)

    def detach(self, event_bus: EventBus) -> None:
        event_bus.unsubscribe(EventType.STATUS_UPDATED, self._on_status)


class ConsoleStatusView:
    """Writes statuses to a stream, one line per tick."""

    def __init__(self, stream: Optional[TextIO] = None, timestamps: bool = True,
                 clock: Callable[[], datetime] = datetime.now):
        self._stream = stream or sys.stdout
        self._timestamps = timestamps
        self._clock = clock
        self._last_healthy: Optional[bool] = None

    def format_line(self, status: FormattedStatus) -> str:
        line = (
            f"{rate_label(UI.DOWNLOAD_ARROW, status.down_text):<16}"
            f"{rate_label(UI.UPLOAD_ARROW, status.up_text)}"
        )
        if self._timestamps:
            line = f"{self._clock():%H:%M:%S}  {line}"
        return line

    def apply(self, status: FormattedStatus) -> None:
        if self._last_healthy is not None and status.healthy != self._last_healthy:
            logger.info("Throughput available again" if status.healthy
                        else "Throughput unavailable")
        self._last_healthy = status.healthy
        self._stream.write(self.format_line(status) + "\n")
        self._stream.flush()

    def _on_status(self, event: Event) -> None:
        self.apply(event.data["status"])

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe(EventType.STATUS_UPDATED, self._on_status)

    def detach(self, event_bus: EventBus) -> None:
        event_bus.unsubscribe(EventType.STATUS_UPDATED, self._on_status)

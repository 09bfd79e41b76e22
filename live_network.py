#!/usr/bin/env python3
"""
Live Network - network throughput monitor.
Shows the current download/upload rate of the active network interface in
the macOS menu bar, or as a console ticker everywhere else.
"""
import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from app.controller import AppController
from app.dependencies import create_dependencies
from app.events import EventBus
from app.timer import MenuAwareTimer, TickTimer
from app.views.icons import IconGenerator
from app.views.status_view import ConsoleStatusView, MenuBarStatusView
from config import (
    INTERVALS,
    STORAGE,
    UI,
    ConfigurationError,
    InitializationError,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="live-network",
        description="Show live download/upload throughput of the active network interface.",
    )
    parser.add_argument(
        "--console", action="store_true",
        help="print throughput to stdout instead of showing a menu bar item",
    )
    parser.add_argument(
        "--interval", type=float, default=INTERVALS.TICK_SECONDS,
        help="sampling interval in seconds (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument(
        "--no-log-file", action="store_true",
        help=f"do not write ~/{STORAGE.DATA_DIR_NAME}/{STORAGE.LOG_FILE}",
    )
    args = parser.parse_args(argv)
    if args.interval <= 0:
        parser.error("--interval must be positive")
    return args


def run_console(controller: AppController, stream=None) -> int:
    """Print statuses until SIGINT/SIGTERM. Returns the exit code."""
    view = ConsoleStatusView(stream=stream)
    view.attach(controller.event_bus)

    stopped = threading.Event()

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, stopping...")
        stopped.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        controller.start(require_initial_binding=True)
    except InitializationError as e:
        logger.critical(str(e))
        view.detach(controller.event_bus)
        print(f"{UI.APP_NAME}: {e.message}", file=sys.stderr)
        return 1

    try:
        while not stopped.wait(0.5):
            pass
    finally:
        controller.stop()
        view.detach(controller.event_bus)
    return 0


def run_menu_bar(controller: AppController) -> int:
    """Run the macOS menu bar app. Returns the exit code."""
    import rumps

    icons = IconGenerator()

    class LiveNetworkApp(rumps.App):
        """Menu bar item showing ↓/↑ rates with a health dot."""

        def __init__(self):
            super().__init__(
                name=UI.APP_NAME,
                title="--",
                icon=icons.resolve_app_icon(),
                quit_button=None,
            )
            self.download_item = rumps.MenuItem("")
            self.upload_item = rumps.MenuItem("")
            self.tooltip_item = rumps.MenuItem("")
            self.interface_item = rumps.MenuItem("Detecting interface...")
            self.menu = [
                self.download_item,
                self.upload_item,
                None,
                self.interface_item,
                self.tooltip_item,
                None,
                rumps.MenuItem("Quit", callback=self.quit_app),
            ]
            self.view = MenuBarStatusView(
                self, icons, self.download_item, self.upload_item,
                tooltip_item=self.tooltip_item,
                interface_item=self.interface_item,
                describe_binding=controller.describe_binding,
            )
            self.view.attach(controller.event_bus)

        def quit_app(self, _):
            logger.info("Application shutting down...")
            controller.stop()
            icons.cleanup()
            logger.info("Shutdown complete")
            rumps.quit_application()

    try:
        controller.start(require_initial_binding=True)
    except InitializationError as e:
        logger.critical(str(e))
        rumps.alert(title=UI.APP_NAME, message=e.message, ok="OK")
        return 1

    app = LiveNetworkApp()

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, quitting...")
        controller.stop()
        rumps.quit_application()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        app.run()
    finally:
        controller.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    args = parse_args(argv)

    data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    setup_logging(data_dir=data_dir, debug=args.debug, console_output=True,
                  log_to_file=not args.no_log_file)
    logger.info(f"{UI.APP_NAME} starting...")

    menu_bar = sys.platform == "darwin" and not args.console
    event_bus = EventBus(async_mode=False)
    deps = create_dependencies(event_bus=event_bus)

    try:
        controller = AppController(
            deps,
            event_bus,
            interval=args.interval,
            timer_factory=MenuAwareTimer if menu_bar else TickTimer,
        )
    except ConfigurationError as e:
        print(f"{UI.APP_NAME}: {e}", file=sys.stderr)
        return 2

    try:
        if menu_bar:
            return run_menu_bar(controller)
        return run_console(controller)
    except Exception as e:
        logger.critical(f"Application crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    sys.exit(main())

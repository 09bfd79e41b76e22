"""View components for Live Network UI.

Contains:
- icons: Status dot and application icon generation
- status_view: Menu bar and console renderers for throughput status
"""
from app.views.icons import IconGenerator
from app.views.status_view import ConsoleStatusView, MenuBarStatusView

__all__ = [
    "ConsoleStatusView",
    "IconGenerator",
    "MenuBarStatusView",
]

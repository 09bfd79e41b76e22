"""Application module for Live Network.

Contains the main application components:
- EventBus: Internal event communication
- AppController: Sampling loop ownership and status fan-out
- TickTimer / MenuAwareTimer: Timers driving the sampling loop
- Views: UI components (icons, status renderers)
"""

from app.controller import AppController
from app.dependencies import AppDependencies, create_dependencies
from app.events import Event, EventBus, EventType
from app.timer import MenuAwareTimer, TickTimer

__all__ = [
    "AppController",
    "AppDependencies",
    "Event",
    "EventBus",
    "EventType",
    "MenuAwareTimer",
    "TickTimer",
    "create_dependencies",
]

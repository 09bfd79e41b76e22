"""Custom exception hierarchy and failure taxonomy for Live Network.

Expected, frequently occurring conditions (no interface up, no counter
instance) are reported as ``Failure`` values. Exceptions are reserved for
unexpected OS-level errors, which callers classify into a ``FailureKind``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Why the sampling loop has no active binding."""

    NO_ACTIVE_INTERFACE = "no_active_interface"
    COUNTER_CATEGORY_UNAVAILABLE = "counter_category_unavailable"
    NO_MATCHING_COUNTER_INSTANCE = "no_matching_counter_instance"
    COUNTER_READ_FAILURE = "counter_read_failure"


@dataclass(frozen=True)
class Failure:
    """A classified, recoverable failure.

    Attributes:
        kind: The failure category.
        message: Human-readable description for logs.
        details: Optional context (interface name, instance name, ...).
    """

    kind: FailureKind
    message: str
    details: dict = field(default_factory=dict, compare=False)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class LiveNetworkError(Exception):
    """Base exception for all Live Network errors.

    All custom exceptions in this application should inherit from this class.
    This allows catching all application-specific errors with a single except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class InterfaceEnumerationError(LiveNetworkError):
    """The host refused to list its network interfaces."""

    pass


class CounterSourceError(LiveNetworkError):
    """Live counter subsystem errors.

    Raised when there are issues with:
    - Listing counter instances
    - Opening counters for an instance
    - Reading counters that were open

    Examples:
        >>> raise CounterSourceError("Counter category unavailable", {"category": "Network Interface"})
    """

    pass


class CounterReadError(CounterSourceError):
    """A counter read failed, usually because the instance disappeared."""

    pass


class CounterClosedError(CounterSourceError):
    """A sample was requested from a counter source that was already closed."""

    pass


class InitializationError(LiveNetworkError):
    """The very first binding attempt failed.

    Only raised before sampling starts; later failures are self-healing.

    Attributes:
        failure: The classified failure that prevented initialization.
    """

    def __init__(self, failure: Failure):
        super().__init__(
            f"Failed to initialize network monitoring: {failure.message}",
            {"kind": failure.kind.value, **failure.details},
        )
        self.failure = failure


class ConfigurationError(LiveNetworkError):
    """Invalid runtime configuration.

    Examples:
        >>> raise ConfigurationError("Invalid tick interval", {"value": -1})
    """

    pass

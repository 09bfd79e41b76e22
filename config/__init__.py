"""Configuration module for Live Network.

Provides centralized configuration, logging, exceptions, and the failure taxonomy.
"""
from config.constants import (
    COLORS,
    INTERVALS,
    NETWORK,
    STORAGE,
    UI,
    Colors,
    Intervals,
    NetworkConfig,
    StorageConfig,
    UIConfig,
)
from config.exceptions import (
    ConfigurationError,
    CounterClosedError,
    CounterReadError,
    CounterSourceError,
    Failure,
    FailureKind,
    InitializationError,
    InterfaceEnumerationError,
    LiveNetworkError,
)
from config.logging_config import LogContext, get_logger, log_exception, setup_logging

__all__ = [
    # Constants
    "INTERVALS",
    "NETWORK",
    "UI",
    "STORAGE",
    "COLORS",
    "Intervals",
    "NetworkConfig",
    "UIConfig",
    "StorageConfig",
    "Colors",
    # Failures and exceptions
    "Failure",
    "FailureKind",
    "LiveNetworkError",
    "InterfaceEnumerationError",
    "CounterSourceError",
    "CounterReadError",
    "CounterClosedError",
    "InitializationError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_exception",
    "LogContext",
]

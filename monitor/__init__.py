"""Network throughput sampling components.

Modules:
    interfaces: Interface enumeration and counter-instance selection
    counters: Live per-interface byte-rate counters
    sampling: The self-healing sampling loop
    utils: Rate formatting helpers

Example:
    >>> from monitor import InterfaceSelector, PsutilCounterProvider, PsutilInterfaceEnumerator
    >>> selector = InterfaceSelector(PsutilInterfaceEnumerator(), PsutilCounterProvider())
    >>> result = selector.select()
"""
from .counters import CounterSource, PsutilCounterProvider, RateCounter, RateSample
from .interfaces import (
    InterfaceKind,
    InterfaceSelection,
    InterfaceSelector,
    MatchKind,
    NetworkInterfaceDescriptor,
    PsutilInterfaceEnumerator,
    SelectionResult,
    classify_interface,
    is_virtual_name,
    match_instance,
)
from .sampling import ActiveBinding, FormattedStatus, LoopEvent, LoopState, SamplingLoop, StatusSink
from .utils import format_rate, truncate_tooltip

__all__ = [
    # Counters
    "CounterSource",
    "PsutilCounterProvider",
    "RateCounter",
    "RateSample",
    # Interface selection
    "InterfaceKind",
    "InterfaceSelection",
    "InterfaceSelector",
    "MatchKind",
    "NetworkInterfaceDescriptor",
    "PsutilInterfaceEnumerator",
    "SelectionResult",
    "classify_interface",
    "is_virtual_name",
    "match_instance",
    # Sampling
    "ActiveBinding",
    "FormattedStatus",
    "LoopEvent",
    "LoopState",
    "SamplingLoop",
    "StatusSink",
    # Utilities
    "format_rate",
    "truncate_tooltip",
]

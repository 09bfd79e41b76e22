"""Network interface enumeration and selection.

Enumerates host interfaces with psutil, picks the first operationally-up
Ethernet or wireless interface, and resolves it to an instance name of the
live counter subsystem.

Expected conditions (nothing up, no counter instances) are returned as
``Failure`` values inside a ``SelectionResult`` rather than raised.

Example:
    >>> selector = InterfaceSelector(PsutilInterfaceEnumerator(), PsutilCounterProvider())
    >>> result = selector.select()
    >>> if result.ok:
    ...     print(result.selection.instance_name, result.selection.match_kind)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

import psutil

from config import (
    NETWORK,
    CounterSourceError,
    Failure,
    FailureKind,
    InterfaceEnumerationError,
    get_logger,
)

logger = get_logger(__name__)


class InterfaceKind(Enum):
    """Physical medium of a network interface."""

    ETHERNET = "ethernet"
    WIRELESS = "wireless"
    OTHER = "other"


class MatchKind(Enum):
    """How the selected interface was paired with a counter instance.

    FALLBACK means no instance matched and the first instance was taken;
    the monitored interface may not be the selected one.
    """

    EXACT = "exact"
    SUBSTRING = "substring"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class NetworkInterfaceDescriptor:
    """A host interface as seen during one selection cycle.

    Attributes:
        name: OS interface name (e.g. "eth0", "Wi-Fi").
        description: Human label used for counter matching; equals name
            when the OS exposes no separate description.
        is_up: Operational status.
        kind: Ethernet, wireless or other.
    """

    name: str
    description: str
    is_up: bool
    kind: InterfaceKind

    @property
    def qualifies(self) -> bool:
        """True if the interface is up and of an accepted kind."""
        return self.is_up and self.kind.value in NETWORK.ACCEPTED_KINDS


@dataclass(frozen=True)
class InterfaceSelection:
    """The selected interface and the counter instance it resolved to."""

    interface: NetworkInterfaceDescriptor
    instance_name: str
    match_kind: MatchKind


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of one selection attempt: a selection or a failure."""

    selection: Optional[InterfaceSelection] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.selection is not None

    @classmethod
    def failed(cls, kind: FailureKind, message: str, **details) -> "SelectionResult":
        return cls(failure=Failure(kind, message, details))


def is_virtual_name(name: str) -> bool:
    """True for loopback names and well-known virtual/tunnel device prefixes."""
    lowered = name.lower()
    return lowered in NETWORK.LOOPBACK_NAMES or lowered.startswith(NETWORK.VIRTUAL_PREFIXES)


def classify_interface(name: str, flags: str = "", sysfs_dir: Optional[Path] = None) -> InterfaceKind:
    """Classify an interface as Ethernet, wireless or other.

    Loopback flags win. On Linux, sysfs is authoritative: a ``wireless``
    directory means wireless, and ``type`` 1 (ARPHRD_ETHER) means Ethernet
    unless the name is a known virtual device. Elsewhere the name prefix
    decides.

    Args:
        name: Interface name.
        flags: Comma-separated psutil flags string, if available.
        sysfs_dir: Override for ``/sys/class/net`` (testing).
    """
    if "loopback" in flags.split(",") or is_virtual_name(name):
        return InterfaceKind.OTHER

    lowered = name.lower()

    sysfs = (sysfs_dir or Path(NETWORK.SYSFS_NET_DIR)) / name
    if sysfs.is_dir():
        if (sysfs / "wireless").exists() or (sysfs / "phy80211").exists():
            return InterfaceKind.WIRELESS
        try:
            arp_type = int((sysfs / "type").read_text().strip())
        except (OSError, ValueError):
            arp_type = None
        if arp_type == NETWORK.ARPHRD_ETHER:
            return InterfaceKind.ETHERNET
        if arp_type is not None:
            return InterfaceKind.OTHER

    if lowered.startswith(NETWORK.WIRELESS_PREFIXES):
        return InterfaceKind.WIRELESS
    if lowered.startswith(NETWORK.ETHERNET_PREFIXES):
        return InterfaceKind.ETHERNET
    return InterfaceKind.OTHER


class PsutilInterfaceEnumerator:
    """Enumerates host interfaces using ``psutil.net_if_stats()``."""

    def enumerate(self) -> List[NetworkInterfaceDescriptor]:
        """Return all host interfaces in OS order.

        Raises:
            InterfaceEnumerationError: If psutil cannot list interfaces.
        """
        try:
            stats = psutil.net_if_stats()
        except (OSError, RuntimeError) as e:
            raise InterfaceEnumerationError(
                "Could not enumerate network interfaces", {"error": str(e)}
            ) from e

        descriptors = []
        for name, stat in stats.items():
            flags = getattr(stat, "flags", "") or ""
            descriptors.append(NetworkInterfaceDescriptor(
                name=name,
                description=name,
                is_up=bool(stat.isup),
                kind=classify_interface(name, flags),
            ))
        return descriptors


def match_instance(description: str, instance_names: List[str]) -> Optional[tuple]:
    """Find the counter instance for an interface description.

    Comparison is case-insensitive. An equal name anywhere in the list is
    EXACT and beats any substring match. Otherwise the first instance that
    contains, or is contained in, the description is SUBSTRING. Loopback and
    virtual instances ("lo" inside "wlo1") never match by substring.

    Returns:
        ``(instance_name, MatchKind)`` or None when nothing matches.
    """
    wanted = description.casefold()
    if not wanted:
        return None

    for instance in instance_names:
        if instance and instance.casefold() == wanted:
            return instance, MatchKind.EXACT

    for instance in instance_names:
        candidate = instance.casefold()
        if not candidate or is_virtual_name(instance):
            continue
        if wanted in candidate or candidate in wanted:
            return instance, MatchKind.SUBSTRING
    return None


class InterfaceSelector:
    """Selects the active interface and resolves its counter instance.

    Attributes:
        enumerator: Source of interface descriptors.
        counters: Counter provider exposing ``instance_names()``.
    """

    def __init__(self, enumerator, counters):
        self.enumerator = enumerator
        self.counters = counters

    def _qualifying_interfaces(self) -> List[NetworkInterfaceDescriptor]:
        return [iface for iface in self.enumerator.enumerate() if iface.qualifies]

    def is_interface_available(self) -> bool:
        """Liveness test: is any qualifying interface operationally up?"""
        try:
            return bool(self._qualifying_interfaces())
        except InterfaceEnumerationError as e:
            logger.debug(f"Interface liveness check failed: {e}")
            return False

    def select(self) -> SelectionResult:
        """Run the selection policy once.

        Returns:
            SelectionResult with the selection, or a failure of kind
            NO_ACTIVE_INTERFACE, COUNTER_CATEGORY_UNAVAILABLE or
            NO_MATCHING_COUNTER_INSTANCE.
        """
        try:
            candidates = self._qualifying_interfaces()
        except InterfaceEnumerationError as e:
            return SelectionResult.failed(
                FailureKind.NO_ACTIVE_INTERFACE, e.message, **e.details
            )

        if not candidates:
            return SelectionResult.failed(
                FailureKind.NO_ACTIVE_INTERFACE,
                "No active Ethernet or wireless interface found",
            )

        selected = candidates[0]

        try:
            instance_names = list(self.counters.instance_names())
        except CounterSourceError as e:
            return SelectionResult.failed(
                FailureKind.COUNTER_CATEGORY_UNAVAILABLE,
                e.message,
                interface=selected.name,
                **e.details,
            )

        matched = match_instance(selected.description, instance_names)
        if matched:
            instance_name, match_kind = matched
        elif instance_names:
            instance_name, match_kind = instance_names[0], MatchKind.FALLBACK
            logger.warning(
                f"No counter instance matches '{selected.description}', "
                f"falling back to '{instance_name}'"
            )
        else:
            return SelectionResult.failed(
                FailureKind.NO_MATCHING_COUNTER_INSTANCE,
                "No network counter instances available",
                interface=selected.name,
            )

        selection = InterfaceSelection(
            interface=selected,
            instance_name=instance_name,
            match_kind=match_kind,
        )
        logger.info(
            f"Selected interface {selected.name} ({selected.kind.value}) -> "
            f"counter '{instance_name}' [{match_kind.value}]"
        )
        return SelectionResult(selection=selection)

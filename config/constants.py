"""Centralized constants and configuration for Live Network.

This module contains all magic numbers, strings, and configuration values
used by the sampling core and the presentation layer. Centralizing them
makes the code easier to maintain and configure.

Usage:
    from config.constants import INTERVALS, NETWORK, UI

    tick = INTERVALS.TICK_SECONDS
    units = NETWORK.RATE_UNITS
"""
from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class Intervals:
    """Time intervals for sampling operations (in seconds)."""
    # Main sampling loop
    TICK_SECONDS: float = 1.0

    # A freshly opened rate counter has no window to average over
    COUNTER_WARMUP_SECONDS: float = 1.0

    # Reads closer together than this reuse the previous rate
    MIN_RATE_WINDOW_SECONDS: float = 0.05

    # How long stop() waits for the timer thread
    TIMER_JOIN_TIMEOUT_SECONDS: float = 2.0


@dataclass(frozen=True)
class NetworkConfig:
    """Network interface and counter configuration."""
    # Live counter category exposing per-interface byte rates
    COUNTER_CATEGORY: str = "Network Interface"
    BYTES_RECEIVED_COUNTER: str = "Bytes Received/sec"
    BYTES_SENT_COUNTER: str = "Bytes Sent/sec"

    # Rate formatting
    RATE_UNITS: Tuple[str, ...] = ("B/s", "KB/s", "MB/s", "GB/s")
    UNIT_BASE: float = 1024.0

    # Interface kinds eligible for selection
    ACCEPTED_KINDS: FrozenSet[str] = frozenset({"ethernet", "wireless"})

    # Name prefixes used when the OS does not report the interface type
    WIRELESS_PREFIXES: Tuple[str, ...] = (
        "wlan", "wlp", "wlx", "wl", "wifi", "wi-fi", "ath", "ra", "wireless",
    )
    ETHERNET_PREFIXES: Tuple[str, ...] = (
        "eth", "enp", "eno", "ens", "enx", "em", "en", "ethernet", "local area connection",
    )
    VIRTUAL_PREFIXES: Tuple[str, ...] = (
        "docker", "veth", "br-", "virbr", "vmnet", "vboxnet", "tun", "tap",
        "utun", "ppp", "ipsec", "gif", "stf", "awdl", "llw", "bridge", "anpi",
        "zt", "wg", "tailscale", "isatap", "teredo",
    )

    LOOPBACK_NAMES: Tuple[str, ...] = ("lo", "lo0")

    # Linux ARPHRD_ETHER, as reported by /sys/class/net/<iface>/type
    SYSFS_NET_DIR: str = "/sys/class/net"
    ARPHRD_ETHER: int = 1


@dataclass(frozen=True)
class UIConfig:
    """UI-related configuration."""
    APP_NAME: str = "Live Network"

    # Icon sizes
    STATUS_ICON_SIZE: int = 18
    APP_ICON_SIZE: int = 64

    # Status text
    DOWNLOAD_ARROW: str = "↓"
    UPLOAD_ARROW: str = "↑"
    UNAVAILABLE_TEXT: str = "unavailable"
    UNAVAILABLE_TOOLTIP: str = "Network interface unavailable"
    INITIAL_RATE_TEXT: str = "0 B/s"

    # Tray tooltips are limited to 63 characters
    TOOLTIP_MAX_LENGTH: int = 63
    TOOLTIP_TRUNCATE_AT: int = 60


@dataclass(frozen=True)
class StorageConfig:
    """File locations (logs and generated icons only)."""
    DATA_DIR_NAME: str = ".live-network"
    LOG_FILE: str = "live_network.log"

    # Log rotation
    LOG_MAX_BYTES: int = 1_000_000  # 1MB
    LOG_BACKUP_COUNT: int = 3

    # Temp directories
    ICON_TEMP_DIR: str = "livenet-icons"

    # Bundled application icon, relative to the project root
    APP_ICON_FILE: str = "assets/app.png"


@dataclass(frozen=True)
class Colors:
    """Color definitions for UI elements (RGBA tuples for PIL)."""
    GREEN_RGBA: Tuple[int, int, int, int] = (52, 199, 89, 255)    # healthy
    GRAY_RGBA: Tuple[int, int, int, int] = (142, 142, 147, 255)   # degraded
    RED_RGBA: Tuple[int, int, int, int] = (255, 59, 48, 255)      # fatal

    # App icon tile
    BACKGROUND_RGBA: Tuple[int, int, int, int] = (32, 32, 32, 242)


# Global instances - import these
INTERVALS = Intervals()
NETWORK = NetworkConfig()
UI = UIConfig()
STORAGE = StorageConfig()
COLORS = Colors()

"""mcastguard package for holding multicast reception open during LAN discovery.

This package provides a guard over the OS-level multicast reception permit,
the socket-based permit it acquires, and a named request/response channel
through which a host application drives the guard.
"""

from mcastguard.channel.platform_channel import PlatformChannel
from mcastguard.config.guard_config import MulticastGuardConfig
from mcastguard.errors import (
    MulticastGuardError,
    PermitUnavailableError,
    ReleaseFailedError,
    UnsupportedOperationError,
)
from mcastguard.guard.multicast_guard import GuardResult, MulticastGuard

__all__ = [
    "GuardResult",
    "MulticastGuard",
    "MulticastGuardConfig",
    "MulticastGuardError",
    "PermitUnavailableError",
    "PlatformChannel",
    "ReleaseFailedError",
    "UnsupportedOperationError",
]

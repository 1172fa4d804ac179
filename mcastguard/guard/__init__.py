"""The multicast guard and its state and result types."""

from mcastguard.guard.guard_state import GuardState, Held, Released
from mcastguard.guard.multicast_guard import GuardResult, MulticastGuard

__all__ = [
    "GuardResult",
    "GuardState",
    "Held",
    "MulticastGuard",
    "Released",
]

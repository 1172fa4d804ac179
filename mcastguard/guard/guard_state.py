"""
Defines the two states of a `MulticastGuard`.

A guard is either `Released`, holding nothing, or `Held`, holding exactly
one active permit. Modelling the state as a union of these two types means a
guard can never claim to be held without a permit, or hold a permit while
claiming to be released.
"""

from dataclasses import dataclass
from typing import Union

from mcastguard.permit.multicast_permit import MulticastPermit


@dataclass(frozen=True)
class Released:
    """No permit is held."""


@dataclass(frozen=True)
class Held:
    """Exactly one active permit is held."""

    permit: MulticastPermit


GuardState = Union[Released, Held]

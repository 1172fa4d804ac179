"""Provides MulticastGuard, the single-holder owner of a multicast permit."""

import logging
import threading
from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Type

from mcastguard.errors import (
    MulticastGuardError,
    PermitUnavailableError,
    ReleaseFailedError,
)
from mcastguard.guard.guard_state import GuardState, Held, Released
from mcastguard.permit.multicast_permit import MulticastPermit
from mcastguard.permit.permit_provider import PermitProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard operation.

    Attributes:
        success: Whether the guard is now in the requested state.
        changed: True only if this call transitioned the guard, i.e. it
            newly acquired or actually released a permit. Redundant calls
            succeed with `changed=False`.
        error: The failure, if `success` is False. A failed release also
            reports its error even though the guard ends up released.
    """

    success: bool
    changed: bool = False
    error: Optional[MulticastGuardError] = None

    @classmethod
    def ok(cls, changed: bool) -> "GuardResult":
        return cls(success=True, changed=changed)

    @classmethod
    def failed(
        cls, error: MulticastGuardError, changed: bool = False
    ) -> "GuardResult":
        return cls(success=False, changed=changed, error=error)


class MulticastGuard:
    """
    Owns at most one multicast reception permit and exposes an idempotent
    acquire/release contract over it.

    The OS capability underneath is global to the process, but the guard
    presents a single-holder view: redundant `acquire()` calls reuse the held
    permit and redundant `release()` calls do nothing. Neither operation
    raises for OS-level failures; failures are reported in the returned
    `GuardResult` and never leave the guard needing caller intervention.

    All operations are mutually exclusive, so concurrent callers cannot
    create two permits or release one twice.

    The guard is meant to be constructed once by its owner and passed to
    whatever needs it. Call `close()` (or use it as a context manager) when
    the owning session ends.
    """

    def __init__(self, provider: PermitProvider) -> None:
        """
        Initializes the guard in the released state.

        Args:
            provider: Creates permits scoped to the current network interface.
        """
        if provider is None:
            raise ValueError("provider cannot be None for MulticastGuard.")

        self.__provider = provider
        self.__state: GuardState = Released()
        self.__lock = threading.Lock()

    @property
    def state(self) -> GuardState:
        with self.__lock:
            return self.__state

    @property
    def is_held(self) -> bool:
        return isinstance(self.state, Held)

    @property
    def permit(self) -> Optional[MulticastPermit]:
        """The currently held permit, or None when released."""
        state = self.state
        return state.permit if isinstance(state, Held) else None

    def acquire(self) -> GuardResult:
        """
        Ensures a multicast reception permit is held.

        Returns:
            A successful result if a permit is now held (newly or already),
            otherwise a failed result carrying `PermitUnavailableError`.
        """
        with self.__lock:
            if isinstance(self.__state, Held):
                logger.debug("Multicast permit already held, not reacquiring.")
                return GuardResult.ok(changed=False)

            try:
                permit = self.__provider.create_permit()
                permit.acquire()
            except PermitUnavailableError as e:
                logger.warning("Failed to acquire multicast permit: %s", e)
                return GuardResult.failed(e)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Failed to acquire multicast permit: %s", e, exc_info=True
                )
                error = PermitUnavailableError(str(e) or type(e).__name__)
                error.__cause__ = e
                return GuardResult.failed(error)

            self.__state = Held(permit)
            logger.info("Acquired multicast permit '%s'.", permit.tag)
            return GuardResult.ok(changed=True)

    def release(self) -> GuardResult:
        """
        Ensures no multicast reception permit is held.

        The guard is released after this call in every case. If the OS-level
        release failed, the result is unsuccessful and carries
        `ReleaseFailedError`.
        """
        with self.__lock:
            state = self.__state
            if not isinstance(state, Held):
                logger.debug("No multicast permit held, nothing to release.")
                return GuardResult.ok(changed=False)

            self.__state = Released()
            try:
                state.permit.release()
            except ReleaseFailedError as e:
                logger.warning(
                    "Failed to release multicast permit '%s': %s",
                    state.permit.tag,
                    e,
                )
                return GuardResult.failed(e, changed=True)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Failed to release multicast permit '%s': %s",
                    state.permit.tag,
                    e,
                    exc_info=True,
                )
                error = ReleaseFailedError(str(e) or type(e).__name__)
                error.__cause__ = e
                return GuardResult.failed(error, changed=True)

            logger.info("Released multicast permit '%s'.", state.permit.tag)
            return GuardResult.ok(changed=True)

    def close(self) -> GuardResult:
        """Releases any held permit. Safe to call any number of times."""
        return self.release()

    def __enter__(self) -> "MulticastGuard":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MulticastGuard(state={self.state!r})"

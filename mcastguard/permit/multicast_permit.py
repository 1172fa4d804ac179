"""MulticastPermit ABC, the OS grant that keeps multicast reception enabled."""

from abc import ABC, abstractmethod


class MulticastPermit(ABC):
    """An OS-level grant that stops multicast traffic from being filtered.

    Permits are not reference counted: calling `acquire()` on a held permit
    is a no-op, and a single `release()` fully releases it.
    """

    @property
    @abstractmethod
    def tag(self) -> str:
        """Diagnostic name of this permit."""

    @property
    @abstractmethod
    def is_held(self) -> bool:
        """Whether the permit is currently active."""

    @abstractmethod
    def acquire(self) -> None:
        """Activates the permit.

        Raises:
            PermitUnavailableError: If the OS refuses or cannot grant it.
        """
        raise NotImplementedError(
            "MulticastPermit.acquire must be implemented by subclasses."
        )

    @abstractmethod
    def release(self) -> None:
        """Returns the permit to the OS.

        After this call `is_held` is False even if the OS call failed.

        Raises:
            ReleaseFailedError: If the OS-level release call failed.
        """
        raise NotImplementedError(
            "MulticastPermit.release must be implemented by subclasses."
        )

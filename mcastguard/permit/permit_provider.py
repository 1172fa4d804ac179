"""PermitProvider ABC, the factory through which a guard obtains permits."""

from abc import ABC, abstractmethod

from mcastguard.permit.multicast_permit import MulticastPermit


# pylint: disable=R0903 # Abstract factory interface
class PermitProvider(ABC):
    """Creates multicast permits scoped to the current network interface."""

    @abstractmethod
    def create_permit(self) -> MulticastPermit:
        """Creates a new, not yet acquired, permit.

        Raises:
            PermitUnavailableError: If no permit can be scoped to a network
                interface (e.g. there is no active interface).
        """
        raise NotImplementedError(
            "PermitProvider.create_permit must be implemented by subclasses."
        )

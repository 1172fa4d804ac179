"""Creates socket-backed permits on the interface chosen by the config."""

import logging
from typing import Optional

import psutil  # type: ignore[import-untyped]

from mcastguard.config.guard_config import MulticastGuardConfig
from mcastguard.errors import PermitUnavailableError
from mcastguard.permit.permit_provider import PermitProvider
from mcastguard.permit.socket_multicast_permit import SocketMulticastPermit
from mcastguard.util import ip as ip_util

logger = logging.getLogger(__name__)


class SocketPermitProvider(PermitProvider):
    """Builds `SocketMulticastPermit`s for the current network interface.

    The interface address is resolved every time a permit is created, so a
    guard re-acquiring after a network change picks up the new interface.
    Resolution order: `config.interface_address`, then
    `config.interface_name`, then the first up interface with an IPv4
    address.
    """

    def __init__(self, config: Optional[MulticastGuardConfig] = None) -> None:
        self.__config = config if config is not None else MulticastGuardConfig()

    @property
    def config(self) -> MulticastGuardConfig:
        return self.__config

    def create_permit(self) -> SocketMulticastPermit:
        interface_address = self.__resolve_interface_address()
        if interface_address is None:
            if self.__config.interface_name is not None:
                raise PermitUnavailableError(
                    f"Network interface '{self.__config.interface_name}' is "
                    "not up or has no IPv4 address."
                )
            raise PermitUnavailableError("No active network interface.")

        logger.debug(
            "Creating permit '%s' for %s on %s.",
            self.__config.permit_tag,
            self.__config.group_address,
            interface_address,
        )
        return SocketMulticastPermit(
            tag=self.__config.permit_tag,
            group_address=self.__config.group_address,
            interface_address=interface_address,
        )

    def __resolve_interface_address(self) -> Optional[str]:
        if self.__config.interface_address is not None:
            return self.__config.interface_address

        try:
            return ip_util.select_interface_address(
                interface_name=self.__config.interface_name,
                include_loopback=self.__config.include_loopback,
            )
        except (OSError, psutil.Error) as e:
            raise PermitUnavailableError(
                f"Could not enumerate network interfaces: {e}"
            ) from e

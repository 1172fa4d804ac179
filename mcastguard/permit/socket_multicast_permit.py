"""Multicast permit backed by an IPv4 group membership on a UDP socket."""

import logging
import socket
from typing import Optional

from mcastguard.errors import PermitUnavailableError, ReleaseFailedError
from mcastguard.permit.multicast_permit import MulticastPermit

logger = logging.getLogger(__name__)


class SocketMulticastPermit(MulticastPermit):
    """Holds a multicast group membership open on one interface.

    While a socket is a member of the group on an interface, the kernel
    programs the interface to accept that group's traffic instead of
    filtering it. The socket is bound to an ephemeral port, so no well-known
    port is consumed.
    """

    def __init__(
        self, tag: str, group_address: str, interface_address: str
    ) -> None:
        """Initializes the permit without acquiring it.

        Args:
            tag: Diagnostic name of the permit.
            group_address: IPv4 multicast group to join.
            interface_address: IPv4 address of the interface to join on.
        """
        self.__tag = tag
        self.__group_address = group_address
        self.__interface_address = interface_address
        self.__socket: Optional[socket.socket] = None

    @property
    def tag(self) -> str:
        return self.__tag

    @property
    def group_address(self) -> str:
        return self.__group_address

    @property
    def interface_address(self) -> str:
        return self.__interface_address

    @property
    def is_held(self) -> bool:
        return self.__socket is not None

    def acquire(self) -> None:
        if self.__socket is not None:
            return

        try:
            membership = self.__membership_request()
            sock = socket.socket(
                socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
            )
        except OSError as e:
            raise PermitUnavailableError(
                f"Could not open socket for permit '{self.__tag}': {e}"
            ) from e

        try:
            # Some stacks (Windows) refuse a join on an unbound socket.
            sock.bind(("", 0))
        except OSError as e:
            sock.close()
            raise PermitUnavailableError(
                f"Could not bind socket for permit '{self.__tag}': {e}"
            ) from e

        try:
            sock.setsockopt(
                socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership
            )
        except OSError as e:
            sock.close()
            raise PermitUnavailableError(
                f"Could not join {self.__group_address} on "
                f"{self.__interface_address}: {e}"
            ) from e

        self.__socket = sock
        logger.info(
            "Permit '%s' joined %s on %s.",
            self.__tag,
            self.__group_address,
            self.__interface_address,
        )

    def release(self) -> None:
        sock = self.__socket
        if sock is None:
            return

        # Cleared first so a failed drop still leaves the permit released.
        self.__socket = None
        try:
            sock.setsockopt(
                socket.IPPROTO_IP,
                socket.IP_DROP_MEMBERSHIP,
                self.__membership_request(),
            )
        except OSError as e:
            raise ReleaseFailedError(
                f"Could not leave {self.__group_address} on "
                f"{self.__interface_address}: {e}"
            ) from e
        finally:
            sock.close()

        logger.info(
            "Permit '%s' left %s on %s.",
            self.__tag,
            self.__group_address,
            self.__interface_address,
        )

    def __membership_request(self) -> bytes:
        # struct ip_mreq: group address followed by interface address.
        return socket.inet_aton(self.__group_address) + socket.inet_aton(
            self.__interface_address
        )

    def __repr__(self) -> str:
        return (
            f"SocketMulticastPermit(tag={self.__tag!r}, "
            f"group={self.__group_address!r}, "
            f"interface={self.__interface_address!r}, "
            f"held={self.is_held})"
        )

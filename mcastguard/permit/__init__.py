"""Multicast reception permits and the providers that create them."""

from mcastguard.permit.multicast_permit import MulticastPermit
from mcastguard.permit.permit_provider import PermitProvider
from mcastguard.permit.socket_multicast_permit import SocketMulticastPermit
from mcastguard.permit.socket_permit_provider import SocketPermitProvider

__all__ = [
    "MulticastPermit",
    "PermitProvider",
    "SocketMulticastPermit",
    "SocketPermitProvider",
]

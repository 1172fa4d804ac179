"""Utilities for locating the IPv4 address of the current network interface."""

import ipaddress
import socket
from typing import Optional

import psutil  # type: ignore[import-untyped]


def get_interface_address_strings(interface_name: str) -> list[str]:
    """Retrieves the IPv4 address strings assigned to one network interface.

    Args:
        interface_name: Name of the interface, as reported by the OS
            (e.g. "eth0", "wlan0", "en0").

    Returns:
        A list of IPv4 address strings. Empty if the interface does not exist
        or has no IPv4 address.
    """
    interface_addresses = psutil.net_if_addrs().get(interface_name, [])
    return [
        address.address
        for address in interface_addresses
        if address.family == socket.AF_INET
    ]


def get_up_interface_names() -> list[str]:
    """Retrieves the names of all network interfaces that are currently up."""
    return [
        name for name, stats in psutil.net_if_stats().items() if stats.isup
    ]


def _is_loopback(address: str) -> bool:
    return ipaddress.IPv4Address(address).is_loopback


def select_interface_address(
    interface_name: Optional[str] = None, include_loopback: bool = False
) -> Optional[str]:
    """Selects the IPv4 address that multicast membership should bind to.

    If `interface_name` is given, only that interface is considered, and it
    must be up; a pinned interface qualifies even if it is loopback.
    Otherwise interfaces that are up are scanned in the order psutil reports
    them and the first qualifying IPv4 address wins.

    Args:
        interface_name: Optional interface to restrict the search to.
        include_loopback: Whether loopback addresses qualify when
            auto-selecting.

    Returns:
        The selected IPv4 address string, or None if no interface qualifies.
    """
    up_names = get_up_interface_names()
    if interface_name is not None:
        if interface_name not in up_names:
            return None
        candidates = [interface_name]
    else:
        candidates = up_names

    allow_loopback = include_loopback or interface_name is not None
    for name in candidates:
        for address in get_interface_address_strings(name):
            if allow_loopback or not _is_loopback(address):
                return address
    return None

# mcastguard/config/guard_config.py
import ipaddress
from dataclasses import dataclass
from typing import Optional

# mDNS group; LAN discovery protocols listen here.
DEFAULT_GROUP_ADDRESS = "224.0.0.251"
DEFAULT_PERMIT_TAG = "fs_multicast"


@dataclass(frozen=True)
class MulticastGuardConfig:
    """Configuration for creating multicast reception permits."""

    group_address: str = DEFAULT_GROUP_ADDRESS

    # Pin the permit to one interface. When both are None, the first up,
    # non-loopback interface with an IPv4 address is used.
    interface_name: Optional[str] = None
    interface_address: Optional[str] = None

    # Diagnostic name attached to every permit created with this config.
    permit_tag: str = DEFAULT_PERMIT_TAG

    # Whether loopback interfaces are candidates during auto-selection.
    include_loopback: bool = False

    def __post_init__(self) -> None:
        try:
            group = ipaddress.IPv4Address(self.group_address)
        except ValueError as e:
            raise ValueError(
                f"group_address must be an IPv4 address, got "
                f"'{self.group_address}'."
            ) from e
        if not group.is_multicast:
            raise ValueError(
                f"group_address must be a multicast address, got "
                f"'{self.group_address}'."
            )

        if self.interface_address is not None:
            try:
                ipaddress.IPv4Address(self.interface_address)
            except ValueError as e:
                raise ValueError(
                    f"interface_address must be an IPv4 address, got "
                    f"'{self.interface_address}'."
                ) from e

        if self.interface_name is not None and not self.interface_name:
            raise ValueError("interface_name cannot be empty.")

        if not self.permit_tag:
            raise ValueError("permit_tag cannot be empty.")

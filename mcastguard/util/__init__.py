"""Utility functions for mcastguard."""

from mcastguard.util.ip import (
    get_interface_address_strings,
    get_up_interface_names,
    select_interface_address,
)

__all__ = [
    "get_interface_address_strings",
    "get_up_interface_names",
    "select_interface_address",
]

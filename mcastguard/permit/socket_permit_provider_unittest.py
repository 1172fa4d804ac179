import socket

import psutil  # type: ignore[import-untyped]
import pytest

from mcastguard.config.guard_config import MulticastGuardConfig
from mcastguard.errors import PermitUnavailableError
from mcastguard.permit.socket_multicast_permit import SocketMulticastPermit
from mcastguard.permit.socket_permit_provider import SocketPermitProvider


@pytest.fixture
def mock_select(mocker):
    return mocker.patch("mcastguard.util.ip.select_interface_address")


def test_default_config() -> None:
    provider = SocketPermitProvider()
    assert provider.config == MulticastGuardConfig()


def test_create_permit_auto_selects_interface(mock_select) -> None:
    mock_select.return_value = "192.168.1.20"
    provider = SocketPermitProvider()

    permit = provider.create_permit()

    assert isinstance(permit, SocketMulticastPermit)
    assert permit.interface_address == "192.168.1.20"
    assert permit.group_address == "224.0.0.251"
    assert permit.tag == "fs_multicast"
    assert not permit.is_held
    mock_select.assert_called_once_with(
        interface_name=None, include_loopback=False
    )


def test_create_permit_passes_interface_name_and_loopback(
    mock_select,
) -> None:
    mock_select.return_value = "127.0.0.1"
    config = MulticastGuardConfig(interface_name="lo", include_loopback=True)

    permit = SocketPermitProvider(config).create_permit()

    assert permit.interface_address == "127.0.0.1"
    mock_select.assert_called_once_with(
        interface_name="lo", include_loopback=True
    )


def test_explicit_interface_address_skips_lookup(mock_select) -> None:
    config = MulticastGuardConfig(
        interface_address="10.1.2.3",
        group_address="239.255.42.1",
        permit_tag="discovery",
    )

    permit = SocketPermitProvider(config).create_permit()

    assert permit.interface_address == "10.1.2.3"
    assert permit.group_address == "239.255.42.1"
    assert permit.tag == "discovery"
    mock_select.assert_not_called()


def test_no_interface_raises_permit_unavailable(mock_select) -> None:
    mock_select.return_value = None

    with pytest.raises(PermitUnavailableError, match="No active network"):
        SocketPermitProvider().create_permit()


def test_named_interface_missing_raises_permit_unavailable(
    mock_select,
) -> None:
    mock_select.return_value = None
    config = MulticastGuardConfig(interface_name="wlan0")

    with pytest.raises(PermitUnavailableError, match="wlan0"):
        SocketPermitProvider(config).create_permit()


def test_interface_enumeration_failure(mock_select) -> None:
    mock_select.side_effect = psutil.AccessDenied()

    with pytest.raises(PermitUnavailableError, match="enumerate"):
        SocketPermitProvider().create_permit()


def test_named_loopback_interface_creates_permit(mocker) -> None:
    loopback = mocker.MagicMock(family=socket.AF_INET, address="127.0.0.1")
    mocker.patch("psutil.net_if_addrs", return_value={"lo": [loopback]})
    mocker.patch(
        "psutil.net_if_stats", return_value={"lo": mocker.MagicMock(isup=True)}
    )
    config = MulticastGuardConfig(interface_name="lo")

    permit = SocketPermitProvider(config).create_permit()

    assert permit.interface_address == "127.0.0.1"

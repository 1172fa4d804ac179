import socket  # For AF_INET, AF_INET6 constants

import pytest

from mcastguard.util import ip as ip_util


# Helper to create a mock address object
def create_mock_address(mocker, family, address):
    mock_addr = mocker.MagicMock()
    mock_addr.family = family
    mock_addr.address = address
    return mock_addr


def create_mock_stats(mocker, isup):
    mock_stats = mocker.MagicMock()
    mock_stats.isup = isup
    return mock_stats


class TestIpUtils:

    @pytest.fixture
    def mock_addrs(self, mocker):
        return mocker.patch("psutil.net_if_addrs")

    @pytest.fixture
    def mock_stats(self, mocker):
        return mocker.patch("psutil.net_if_stats")

    # --- Tests for get_interface_address_strings ---

    def test_get_interface_address_strings_unknown_interface(
        self, mock_addrs
    ):
        mock_addrs.return_value = {}

        result = ip_util.get_interface_address_strings("eth0")

        assert result == []
        mock_addrs.assert_called_once()

    def test_get_interface_address_strings_filters_non_ipv4(
        self, mocker, mock_addrs
    ):
        ipv4_address = "192.168.1.100"
        mock_addrs.return_value = {
            "eth0": [
                create_mock_address(mocker, socket.AF_INET6, "fe80::1"),
                create_mock_address(mocker, socket.AF_INET, ipv4_address),
                create_mock_address(mocker, socket.AF_PACKET, "00:11:22:33:44:55"),  # type: ignore
            ],
            "eth1": [create_mock_address(mocker, socket.AF_INET, "10.0.0.5")],
        }

        result = ip_util.get_interface_address_strings("eth0")
        print(f"  Result: {result}")

        assert result == [ipv4_address]

    # --- Tests for get_up_interface_names ---

    def test_get_up_interface_names(self, mocker, mock_stats):
        mock_stats.return_value = {
            "lo": create_mock_stats(mocker, True),
            "eth0": create_mock_stats(mocker, False),
            "wlan0": create_mock_stats(mocker, True),
        }

        result = ip_util.get_up_interface_names()

        assert sorted(result) == ["lo", "wlan0"]

    # --- Tests for select_interface_address ---

    def test_select_skips_loopback_by_default(
        self, mocker, mock_addrs, mock_stats
    ):
        mock_stats.return_value = {
            "lo": create_mock_stats(mocker, True),
            "wlan0": create_mock_stats(mocker, True),
        }
        mock_addrs.return_value = {
            "lo": [create_mock_address(mocker, socket.AF_INET, "127.0.0.1")],
            "wlan0": [
                create_mock_address(mocker, socket.AF_INET, "192.168.0.7")
            ],
        }

        assert ip_util.select_interface_address() == "192.168.0.7"

    def test_select_includes_loopback_when_requested(
        self, mocker, mock_addrs, mock_stats
    ):
        mock_stats.return_value = {"lo": create_mock_stats(mocker, True)}
        mock_addrs.return_value = {
            "lo": [create_mock_address(mocker, socket.AF_INET, "127.0.0.1")],
        }

        assert ip_util.select_interface_address() is None
        assert (
            ip_util.select_interface_address(include_loopback=True)
            == "127.0.0.1"
        )

    def test_select_skips_down_interfaces(
        self, mocker, mock_addrs, mock_stats
    ):
        mock_stats.return_value = {
            "eth0": create_mock_stats(mocker, False),
            "eth1": create_mock_stats(mocker, True),
        }
        mock_addrs.return_value = {
            "eth0": [create_mock_address(mocker, socket.AF_INET, "10.0.0.1")],
            "eth1": [create_mock_address(mocker, socket.AF_INET, "10.0.1.1")],
        }

        assert ip_util.select_interface_address() == "10.0.1.1"

    def test_select_named_interface(self, mocker, mock_addrs, mock_stats):
        mock_stats.return_value = {
            "eth0": create_mock_stats(mocker, True),
            "wlan0": create_mock_stats(mocker, True),
        }
        mock_addrs.return_value = {
            "eth0": [create_mock_address(mocker, socket.AF_INET, "10.0.0.1")],
            "wlan0": [
                create_mock_address(mocker, socket.AF_INET6, "fe80::9"),
                create_mock_address(mocker, socket.AF_INET, "192.168.0.7"),
            ],
        }

        assert (
            ip_util.select_interface_address(interface_name="wlan0")
            == "192.168.0.7"
        )

    def test_select_named_interface_down_returns_none(
        self, mocker, mock_addrs, mock_stats
    ):
        mock_stats.return_value = {"wlan0": create_mock_stats(mocker, False)}
        mock_addrs.return_value = {
            "wlan0": [
                create_mock_address(mocker, socket.AF_INET, "192.168.0.7")
            ],
        }

        assert ip_util.select_interface_address(interface_name="wlan0") is None

    def test_select_no_interfaces(self, mock_addrs, mock_stats):
        mock_stats.return_value = {}
        mock_addrs.return_value = {}

        assert ip_util.select_interface_address() is None

    def test_select_named_loopback_interface(
        self, mocker, mock_addrs, mock_stats
    ):
        mock_stats.return_value = {
            "lo": create_mock_stats(mocker, True),
            "eth0": create_mock_stats(mocker, True),
        }
        mock_addrs.return_value = {
            "lo": [create_mock_address(mocker, socket.AF_INET, "127.0.0.1")],
            "eth0": [create_mock_address(mocker, socket.AF_INET, "10.0.0.1")],
        }

        assert (
            ip_util.select_interface_address(interface_name="lo")
            == "127.0.0.1"
        )

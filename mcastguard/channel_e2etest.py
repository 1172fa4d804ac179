"""Drives the channel through a real guard and socket permits, with the OS mocked."""

import socket

import pytest

from mcastguard import (
    MulticastGuard,
    MulticastGuardConfig,
    PlatformChannel,
)
from mcastguard.permit.socket_permit_provider import SocketPermitProvider


def _mock_interfaces(mocker, interfaces):
    addrs = {}
    stats = {}
    for name, (isup, ipv4) in interfaces.items():
        address = mocker.MagicMock()
        address.family = socket.AF_INET
        address.address = ipv4
        addrs[name] = [address]
        stats[name] = mocker.MagicMock(isup=isup)
    mocker.patch("psutil.net_if_addrs", return_value=addrs)
    mocker.patch("psutil.net_if_stats", return_value=stats)


@pytest.fixture
def mock_socket_cls(mocker):
    return mocker.patch("socket.socket")


def test_discovery_session_lifecycle(mocker, mock_socket_cls) -> None:
    _mock_interfaces(
        mocker,
        {"lo": (True, "127.0.0.1"), "wlan0": (True, "192.168.0.42")},
    )
    guard = MulticastGuard(SocketPermitProvider())
    channel = PlatformChannel(guard)

    assert channel.invoke("acquireMulticast").value is True
    assert channel.invoke("acquireMulticast").value is True

    mock_socket_cls.assert_called_once()
    sock = mock_socket_cls.return_value
    sock.setsockopt.assert_called_once_with(
        socket.IPPROTO_IP,
        socket.IP_ADD_MEMBERSHIP,
        socket.inet_aton("224.0.0.251") + socket.inet_aton("192.168.0.42"),
    )
    assert guard.permit is not None
    assert guard.permit.tag == "fs_multicast"

    assert channel.invoke("releaseMulticast").value is True
    assert channel.invoke("releaseMulticast").value is True

    sock.close.assert_called_once()
    assert not guard.is_held


def test_no_network_reports_err_and_recovers(mocker, mock_socket_cls) -> None:
    _mock_interfaces(mocker, {"lo": (True, "127.0.0.1")})
    guard = MulticastGuard(SocketPermitProvider())
    channel = PlatformChannel(guard)

    response = channel.invoke("acquireMulticast")

    assert response.is_error
    assert response.error_code == "ERR"
    assert response.error_message == "No active network interface."
    assert not guard.is_held
    mock_socket_cls.assert_not_called()

    assert channel.invoke("releaseMulticast").is_success

    # The interface comes up; the caller retries on its own.
    _mock_interfaces(
        mocker,
        {"lo": (True, "127.0.0.1"), "eth0": (True, "10.0.0.9")},
    )
    assert channel.invoke("acquireMulticast").is_success
    assert guard.is_held


def test_join_denied_reports_os_message(mocker, mock_socket_cls) -> None:
    mock_socket_cls.return_value.setsockopt.side_effect = PermissionError(
        1, "Operation not permitted"
    )
    config = MulticastGuardConfig(interface_address="192.168.0.42")

    with MulticastGuard(SocketPermitProvider(config)) as guard:
        response = PlatformChannel(guard).invoke("acquireMulticast")

    assert response.is_error
    assert "Operation not permitted" in response.error_message
    assert not guard.is_held


def test_unknown_request_is_not_implemented(mocker, mock_socket_cls) -> None:
    guard = MulticastGuard(SocketPermitProvider())
    channel = PlatformChannel(guard)

    assert channel.invoke("sendFile").is_not_implemented
    mock_socket_cls.assert_not_called()


def test_closing_guard_leaves_group(mocker, mock_socket_cls) -> None:
    config = MulticastGuardConfig(
        group_address="239.255.42.1", interface_address="10.0.0.9"
    )
    with MulticastGuard(SocketPermitProvider(config)) as guard:
        PlatformChannel(guard).invoke("acquireMulticast")
        assert guard.is_held

    sock = mock_socket_cls.return_value
    sock.setsockopt.assert_called_with(
        socket.IPPROTO_IP,
        socket.IP_DROP_MEMBERSHIP,
        socket.inet_aton("239.255.42.1") + socket.inet_aton("10.0.0.9"),
    )
    sock.close.assert_called_once()
    assert not guard.is_held

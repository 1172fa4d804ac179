import socket

import pytest

from mcastguard.errors import PermitUnavailableError, ReleaseFailedError
from mcastguard.permit.socket_multicast_permit import SocketMulticastPermit

GROUP = "224.0.0.251"
INTERFACE = "192.168.1.20"
EXPECTED_MREQ = socket.inet_aton(GROUP) + socket.inet_aton(INTERFACE)


@pytest.fixture
def mock_socket_cls(mocker):
    return mocker.patch("socket.socket")


@pytest.fixture
def permit() -> SocketMulticastPermit:
    return SocketMulticastPermit("fs_multicast", GROUP, INTERFACE)


def test_initial_state(permit: SocketMulticastPermit) -> None:
    assert permit.tag == "fs_multicast"
    assert permit.group_address == GROUP
    assert permit.interface_address == INTERFACE
    assert not permit.is_held


def test_acquire_joins_group_on_interface(mock_socket_cls, permit) -> None:
    permit.acquire()

    assert permit.is_held
    mock_socket_cls.assert_called_once_with(
        socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
    )
    sock = mock_socket_cls.return_value
    sock.setsockopt.assert_called_once_with(
        socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, EXPECTED_MREQ
    )
    sock.bind.assert_called_once_with(("", 0))
    sock.close.assert_not_called()


def test_acquire_twice_is_noop(mock_socket_cls, permit) -> None:
    permit.acquire()
    permit.acquire()

    assert mock_socket_cls.call_count == 1
    assert mock_socket_cls.return_value.setsockopt.call_count == 1


def test_acquire_join_failure_closes_socket(mock_socket_cls, permit) -> None:
    sock = mock_socket_cls.return_value
    sock.setsockopt.side_effect = OSError(19, "No such device")

    with pytest.raises(PermitUnavailableError, match="No such device") as e:
        permit.acquire()

    assert isinstance(e.value.__cause__, OSError)
    assert not permit.is_held
    sock.close.assert_called_once()


def test_acquire_socket_creation_failure(mock_socket_cls, permit) -> None:
    mock_socket_cls.side_effect = PermissionError(1, "Operation not permitted")

    with pytest.raises(PermitUnavailableError, match="not permitted"):
        permit.acquire()

    assert not permit.is_held


def test_acquire_bind_failure_closes_socket(mock_socket_cls, permit) -> None:
    sock = mock_socket_cls.return_value
    sock.bind.side_effect = OSError(10022, "Invalid argument")

    with pytest.raises(PermitUnavailableError, match="Invalid argument"):
        permit.acquire()

    assert not permit.is_held
    sock.setsockopt.assert_not_called()
    sock.close.assert_called_once()


def test_release_drops_membership_and_closes(mock_socket_cls, permit) -> None:
    permit.acquire()
    sock = mock_socket_cls.return_value
    sock.setsockopt.reset_mock()

    permit.release()

    assert not permit.is_held
    sock.setsockopt.assert_called_once_with(
        socket.IPPROTO_IP, socket.IP_DROP_MEMBERSHIP, EXPECTED_MREQ
    )
    sock.close.assert_called_once()


def test_release_when_not_held_is_noop(mock_socket_cls, permit) -> None:
    permit.release()

    mock_socket_cls.assert_not_called()
    assert not permit.is_held


def test_release_failure_still_closes_and_clears(
    mock_socket_cls, permit
) -> None:
    permit.acquire()
    sock = mock_socket_cls.return_value
    sock.setsockopt.side_effect = OSError(99, "Cannot assign address")

    with pytest.raises(ReleaseFailedError, match="Cannot assign address"):
        permit.release()

    assert not permit.is_held
    sock.close.assert_called_once()

    # A second release has nothing left to do.
    permit.release()
    assert sock.close.call_count == 1


def test_reacquire_after_release_opens_new_socket(
    mock_socket_cls, permit
) -> None:
    permit.acquire()
    permit.release()
    permit.acquire()

    assert permit.is_held
    assert mock_socket_cls.call_count == 2

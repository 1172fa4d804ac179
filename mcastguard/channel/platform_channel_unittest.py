import pytest

from mcastguard.channel.method_call import MethodCall
from mcastguard.channel.method_response import MethodResponse, ResponseStatus
from mcastguard.channel.platform_channel import (
    ACQUIRE_MULTICAST,
    DEFAULT_CHANNEL_NAME,
    RELEASE_MULTICAST,
    PlatformChannel,
)
from mcastguard.errors import (
    PermitUnavailableError,
    ReleaseFailedError,
    UnsupportedOperationError,
)
from mcastguard.guard.multicast_guard import GuardResult, MulticastGuard


@pytest.fixture
def mock_guard(mocker):
    guard = mocker.MagicMock(spec=MulticastGuard)
    guard.acquire.return_value = GuardResult.ok(changed=True)
    guard.release.return_value = GuardResult.ok(changed=True)
    return guard


@pytest.fixture
def channel(mock_guard) -> PlatformChannel:
    return PlatformChannel(mock_guard)


def test_defaults(channel: PlatformChannel) -> None:
    assert channel.name == DEFAULT_CHANNEL_NAME == "lan.discovery/platform"
    assert channel.methods == [ACQUIRE_MULTICAST, RELEASE_MULTICAST]
    assert channel.has_handler("acquireMulticast")
    assert channel.has_handler("releaseMulticast")


def test_constructor_validation(mock_guard) -> None:
    with pytest.raises(ValueError):
        PlatformChannel(None)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        PlatformChannel(mock_guard, name="")


def test_acquire_success(channel, mock_guard) -> None:
    response = channel.invoke("acquireMulticast")

    assert response == MethodResponse.success(True)
    mock_guard.acquire.assert_called_once_with()
    mock_guard.release.assert_not_called()


def test_acquire_already_held_still_true(channel, mock_guard) -> None:
    mock_guard.acquire.return_value = GuardResult.ok(changed=False)

    response = channel.invoke("acquireMulticast")

    assert response.is_success
    assert response.value is True


def test_acquire_failure_returns_err(channel, mock_guard) -> None:
    mock_guard.acquire.return_value = GuardResult.failed(
        PermitUnavailableError("No active network interface.")
    )

    response = channel.invoke("acquireMulticast")

    assert response.is_error
    assert response.error_code == "ERR"
    assert response.error_message == "No active network interface."
    assert response.error_details is None


def test_release_success(channel, mock_guard) -> None:
    response = channel.invoke("releaseMulticast")

    assert response == MethodResponse.success(True)
    mock_guard.release.assert_called_once_with()


def test_release_noop_still_true(channel, mock_guard) -> None:
    mock_guard.release.return_value = GuardResult.ok(changed=False)

    assert channel.invoke("releaseMulticast").value is True


def test_release_failure_returns_err(channel, mock_guard) -> None:
    mock_guard.release.return_value = GuardResult.failed(
        ReleaseFailedError("Could not leave group"), changed=True
    )

    response = channel.invoke("releaseMulticast")

    assert response.is_error
    assert response.error_code == "ERR"
    assert response.error_message == "Could not leave group"


def test_unknown_method_not_implemented(channel, mock_guard) -> None:
    response = channel.invoke("startDiscovery", {"port": 5353})

    assert response.is_not_implemented
    assert not response.is_error
    assert response.status is ResponseStatus.NOT_IMPLEMENTED
    mock_guard.acquire.assert_not_called()
    mock_guard.release.assert_not_called()


def test_method_names_are_case_sensitive(channel) -> None:
    assert channel.invoke("AcquireMulticast").is_not_implemented


def test_get_handler_unknown_raises(channel) -> None:
    with pytest.raises(UnsupportedOperationError) as e:
        channel.get_handler("nope")
    assert e.value.method == "nope"
    assert e.value.code == "ERR"


def test_handle_accepts_method_call(channel, mock_guard) -> None:
    response = channel.handle(MethodCall("acquireMulticast"))

    assert response.is_success
    mock_guard.acquire.assert_called_once()


def test_register_custom_handler(channel) -> None:
    calls = []

    def handler(call: MethodCall) -> MethodResponse:
        calls.append(call)
        return MethodResponse.success(call.arguments)

    channel.register_handler("echo", handler)
    response = channel.invoke("echo", {"x": 1})

    assert response.value == {"x": 1}
    assert calls == [MethodCall("echo", {"x": 1})]
    assert "echo" in channel.methods


def test_register_duplicate_raises(channel) -> None:
    with pytest.raises(ValueError, match="already registered"):
        channel.register_handler(
            "acquireMulticast", lambda call: MethodResponse.success()
        )


def test_register_invalid_raises(channel) -> None:
    with pytest.raises(ValueError):
        channel.register_handler("", lambda call: MethodResponse.success())
    with pytest.raises(ValueError):
        channel.register_handler("x", None)  # type: ignore[arg-type]


def test_handler_guard_error_is_converted(channel) -> None:
    def handler(call: MethodCall) -> MethodResponse:
        raise PermitUnavailableError("denied")

    channel.register_handler("fails", handler)
    response = channel.invoke("fails")

    assert response == MethodResponse.error("ERR", "denied")


def test_handler_unexpected_error_is_converted(channel) -> None:
    def handler(call: MethodCall) -> MethodResponse:
        raise RuntimeError("boom")

    channel.register_handler("crashes", handler)
    response = channel.invoke("crashes")

    assert response.is_error
    assert response.error_code == "ERR"
    assert response.error_message == "boom"


def test_guard_raising_is_converted(channel, mock_guard) -> None:
    mock_guard.acquire.side_effect = RuntimeError("unexpected")

    response = channel.invoke("acquireMulticast")

    assert response.is_error
    assert response.error_message == "unexpected"

import pytest

from mcastguard.config.guard_config import (
    DEFAULT_GROUP_ADDRESS,
    DEFAULT_PERMIT_TAG,
    MulticastGuardConfig,
)


def test_defaults() -> None:
    config = MulticastGuardConfig()
    assert config.group_address == DEFAULT_GROUP_ADDRESS
    assert config.permit_tag == DEFAULT_PERMIT_TAG
    assert config.interface_name is None
    assert config.interface_address is None
    assert config.include_loopback is False


def test_custom_values_accepted() -> None:
    config = MulticastGuardConfig(
        group_address="239.255.42.1",
        interface_name="wlan0",
        interface_address="192.168.1.20",
        permit_tag="discovery",
        include_loopback=True,
    )
    assert config.group_address == "239.255.42.1"
    assert config.interface_name == "wlan0"
    assert config.interface_address == "192.168.1.20"
    assert config.permit_tag == "discovery"
    assert config.include_loopback is True


def test_config_is_frozen() -> None:
    config = MulticastGuardConfig()
    with pytest.raises(AttributeError):
        config.permit_tag = "other"  # type: ignore[misc]


@pytest.mark.parametrize("group", ["192.168.1.1", "10.0.0.1"])
def test_rejects_unicast_group(group: str) -> None:
    with pytest.raises(ValueError, match="multicast"):
        MulticastGuardConfig(group_address=group)


def test_rejects_malformed_group() -> None:
    with pytest.raises(ValueError, match="IPv4 address"):
        MulticastGuardConfig(group_address="not-an-address")


def test_rejects_ipv6_group() -> None:
    with pytest.raises(ValueError, match="IPv4 address"):
        MulticastGuardConfig(group_address="ff02::fb")


def test_rejects_malformed_interface_address() -> None:
    with pytest.raises(ValueError, match="interface_address"):
        MulticastGuardConfig(interface_address="999.1.1.1")


def test_rejects_empty_interface_name() -> None:
    with pytest.raises(ValueError, match="interface_name"):
        MulticastGuardConfig(interface_name="")


def test_rejects_empty_tag() -> None:
    with pytest.raises(ValueError, match="permit_tag"):
        MulticastGuardConfig(permit_tag="")

"""Named request/response surface through which a host drives the guard."""

from mcastguard.channel.method_call import MethodCall
from mcastguard.channel.method_response import MethodResponse, ResponseStatus
from mcastguard.channel.platform_channel import PlatformChannel

__all__ = ["MethodCall", "MethodResponse", "PlatformChannel", "ResponseStatus"]

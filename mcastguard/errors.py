"""Exception types raised or reported by mcastguard components."""

# Machine-readable code carried by every error crossing the channel.
ERROR_CODE = "ERR"


class MulticastGuardError(Exception):
    """Base class for all multicast guard failures."""

    code: str = ERROR_CODE


class PermitUnavailableError(MulticastGuardError):
    """The OS denied or could not grant a multicast reception permit.

    Typical causes are a missing permission, no active network interface, or
    an OS-level socket error while joining the multicast group.
    """


class ReleaseFailedError(MulticastGuardError):
    """The OS-level release of a held permit failed.

    This is non-fatal: the guard clears its local state regardless.
    """


class UnsupportedOperationError(MulticastGuardError):
    """A method name was not recognized by the platform channel."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method '{method}' is not implemented.")
        self.method = method

"""Response types returned by `PlatformChannel` for every request."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from mcastguard.errors import MulticastGuardError


class ResponseStatus(Enum):
    """Defines the three outcomes a channel request can have.

    Attributes:
        SUCCESS: The handler ran and produced a value.
        ERROR: The handler ran and failed; the response carries a
            machine-readable code and a human-readable message.
        NOT_IMPLEMENTED: No handler exists for the requested name. This is
            deliberately distinct from ERROR.
    """

    SUCCESS = "success"
    ERROR = "error"
    NOT_IMPLEMENTED = "notImplemented"


@dataclass(frozen=True)
class MethodResponse:
    """The reply to one `MethodCall`."""

    status: ResponseStatus
    value: Any = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Any = None

    @classmethod
    def success(cls, value: Any = None) -> "MethodResponse":
        return cls(status=ResponseStatus.SUCCESS, value=value)

    @classmethod
    def error(
        cls,
        code: str,
        message: Optional[str] = None,
        details: Any = None,
    ) -> "MethodResponse":
        return cls(
            status=ResponseStatus.ERROR,
            error_code=code,
            error_message=message,
            error_details=details,
        )

    @classmethod
    def not_implemented(cls) -> "MethodResponse":
        return cls(status=ResponseStatus.NOT_IMPLEMENTED)

    @classmethod
    def from_exception(cls, error: MulticastGuardError) -> "MethodResponse":
        return cls.error(error.code, str(error) or None)

    @property
    def is_success(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is ResponseStatus.ERROR

    @property
    def is_not_implemented(self) -> bool:
        return self.status is ResponseStatus.NOT_IMPLEMENTED

    def to_dict(self) -> Dict[str, Any]:
        """Converts the response to a plain dict for transport encoding."""
        if self.status is ResponseStatus.SUCCESS:
            return {"status": self.status.value, "value": self.value}
        if self.status is ResponseStatus.ERROR:
            return {
                "status": self.status.value,
                "code": self.error_code,
                "message": self.error_message,
                "details": self.error_details,
            }
        return {"status": self.status.value}

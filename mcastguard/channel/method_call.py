"""A single named request arriving on a channel."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MethodCall:
    """A request for the channel to run the handler named `method`."""

    method: str
    arguments: Any = None

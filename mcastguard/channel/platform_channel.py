"""PlatformChannel, which maps named host requests to guard operations."""

import logging
import threading
from typing import Any, Callable, Dict, List

from mcastguard.channel.method_call import MethodCall
from mcastguard.channel.method_response import MethodResponse
from mcastguard.errors import (
    ERROR_CODE,
    MulticastGuardError,
    UnsupportedOperationError,
)
from mcastguard.guard.multicast_guard import GuardResult, MulticastGuard

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "lan.discovery/platform"
ACQUIRE_MULTICAST = "acquireMulticast"
RELEASE_MULTICAST = "releaseMulticast"

MethodHandler = Callable[[MethodCall], MethodResponse]


class PlatformChannel:
    """
    Dispatches named requests from a host application to handlers.

    The channel is created with the two multicast operations already
    registered. Every request yields a `MethodResponse`: unknown names get a
    not-implemented response, and any failure inside a handler becomes an
    "ERR" error response. Nothing raises out of `invoke()` or `handle()`.
    """

    def __init__(
        self, guard: MulticastGuard, name: str = DEFAULT_CHANNEL_NAME
    ) -> None:
        """
        Initializes the channel and registers the multicast handlers.

        Args:
            guard: The guard that `acquireMulticast` and `releaseMulticast`
                operate on. The caller keeps ownership of it.
            name: Channel name the host addresses requests to.
        """
        if guard is None:
            raise ValueError("guard cannot be None for PlatformChannel.")
        if not name:
            raise ValueError("name cannot be empty for PlatformChannel.")

        self.__guard = guard
        self.__name = name
        self.__handlers: Dict[str, MethodHandler] = {}
        self.__lock = threading.Lock()

        self.register_handler(ACQUIRE_MULTICAST, self._acquire_multicast)
        self.register_handler(RELEASE_MULTICAST, self._release_multicast)

    @property
    def name(self) -> str:
        return self.__name

    @property
    def methods(self) -> List[str]:
        """Names of all registered methods, sorted."""
        with self.__lock:
            return sorted(self.__handlers)

    def register_handler(self, method: str, handler: MethodHandler) -> None:
        """
        Registers `handler` for requests named `method`.

        Raises:
            ValueError: If `method` is empty or already has a handler.
        """
        if not method:
            raise ValueError("method cannot be empty.")
        if handler is None:
            raise ValueError(f"handler for '{method}' cannot be None.")

        with self.__lock:
            if method in self.__handlers:
                raise ValueError(
                    f"Handler for '{method}' already registered on "
                    f"channel '{self.__name}'."
                )
            self.__handlers[method] = handler

    def has_handler(self, method: str) -> bool:
        with self.__lock:
            return method in self.__handlers

    def get_handler(self, method: str) -> MethodHandler:
        """
        Returns the handler for `method`.

        Raises:
            UnsupportedOperationError: If no handler is registered.
        """
        with self.__lock:
            handler = self.__handlers.get(method)
        if handler is None:
            raise UnsupportedOperationError(method)
        return handler

    def invoke(self, method: str, arguments: Any = None) -> MethodResponse:
        """Handles a request given by name and optional arguments."""
        return self.handle(MethodCall(method, arguments))

    def handle(self, call: MethodCall) -> MethodResponse:
        """Runs the handler for `call` and returns its response."""
        try:
            handler = self.get_handler(call.method)
        except UnsupportedOperationError:
            logger.debug(
                "Channel '%s' has no handler for '%s'.",
                self.__name,
                call.method,
            )
            return MethodResponse.not_implemented()

        try:
            return handler(call)
        except MulticastGuardError as e:
            logger.warning(
                "Handler '%s' on channel '%s' failed: %s",
                call.method,
                self.__name,
                e,
            )
            return MethodResponse.from_exception(e)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Unexpected error in handler '%s' on channel '%s': %s",
                call.method,
                self.__name,
                e,
                exc_info=True,
            )
            return MethodResponse.error(ERROR_CODE, str(e) or None)

    def _acquire_multicast(self, call: MethodCall) -> MethodResponse:
        return self.__to_response(self.__guard.acquire())

    def _release_multicast(self, call: MethodCall) -> MethodResponse:
        return self.__to_response(self.__guard.release())

    @staticmethod
    def __to_response(result: GuardResult) -> MethodResponse:
        if result.success:
            return MethodResponse.success(True)
        if result.error is not None:
            return MethodResponse.from_exception(result.error)
        return MethodResponse.error(ERROR_CODE)

"""
Client Error Types

Connection failures are raised from Client.connect(). Everything that goes
wrong after that point is carried inside the returned result object.
"""

from typing import NamedTuple, Sequence


class KVClientError(Exception):
    """Base class for all kvclient errors."""


class AddressFailure(NamedTuple):
    """A single failed connection attempt."""
    address: str
    cause: BaseException

    def __str__(self) -> str:
        return f"{self.address}: {self.cause!r}"


class ConnectError(KVClientError, ConnectionError):
    """
    Raised when every candidate address failed to connect.

    Attributes:
        failures: One AddressFailure per attempted address, in attempt order.
    """

    def __init__(self, failures: Sequence[AddressFailure]):
        self.failures = tuple(failures)
        super().__init__(self._describe())

    def _describe(self) -> str:
        count = len(self.failures)
        noun = "error" if count == 1 else "errors"
        lines = [f"could not connect to server: {count} {noun} occurred:"]
        lines.extend(f"\t* {failure}" for failure in self.failures)
        return "\n".join(lines)


class ExecutionError(KVClientError):
    """
    The executor failed to deliver a reply.

    Attributes:
        verb: The command verb that was being executed
        cause: The underlying exception (transport fault, timeout, ...)
    """

    def __init__(self, verb: str, cause: BaseException):
        self.verb = verb
        self.cause = cause
        super().__init__(f"could not execute {verb}: {cause!r}")


class ServerError(KVClientError):
    """The server accepted the command but reported a failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnexpectedReplyError(KVClientError):
    """The reply type is not valid for the result kind of the verb."""


class ProtocolError(KVClientError):
    """The transport received a frame it could not decode."""


class ClientClosedError(KVClientError):
    """An operation was issued on a client that has been closed."""

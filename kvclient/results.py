"""
Result Variants

Every client operation returns one of three immutable result objects:

    ScalarResult  - at most one value (GET, LLEN, TTL, ...)
    StatusResult  - success or failure without payload (SET, DEL, ...)
    ListResult    - an ordered sequence of values (KEYS, LRANGE, ...)

Each one exposes ``error``. When it is set, every value accessor returns a
zero value ("", 0, False, empty tuple), so callers never observe partial data
next to an error.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .errors import ServerError, UnexpectedReplyError
from .protocol.commands import Reply, ReplyType, ResultKind

logger = logging.getLogger(__name__)


class _ErrorAware:
    """Error accessors shared by all result variants."""

    error: Optional[Exception]

    @property
    def ok(self) -> bool:
        """True when the operation produced no error."""
        return self.error is None

    def raise_for_error(self):
        """Raise the carried error, if any. Returns self otherwise."""
        if self.error is not None:
            raise self.error
        return self


def _unexpected(reply: Reply, kind: ResultKind) -> UnexpectedReplyError:
    logger.debug(f"Reply {reply.type.name} is not valid for a {kind.name} result")
    return UnexpectedReplyError(
        f"unexpected reply {reply.type.name} for a {kind.name.lower()} result"
    )


@dataclass(frozen=True)
class ScalarResult(_ErrorAware):
    """
    Result holding at most one value.

    Attributes:
        raw: The value as sent by the server, None when absent
        error: The failure, if any
    """
    raw: Optional[str] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.error is not None:
            object.__setattr__(self, "raw", None)

    @classmethod
    def from_reply(cls, reply: Reply) -> "ScalarResult":
        """Decode a raw reply into a ScalarResult."""
        if reply.type == ReplyType.NIL:
            return cls()
        if reply.type in (ReplyType.STRING, ReplyType.INT, ReplyType.OK):
            return cls(raw=reply.result)
        if reply.type == ReplyType.ERR:
            return cls(error=ServerError(reply.result))
        return cls(error=_unexpected(reply, ResultKind.SCALAR))

    @property
    def value(self) -> str:
        """The value, or an empty string when absent or failed."""
        return self.raw if self.raw is not None else ""

    @property
    def has_value(self) -> bool:
        return self.raw is not None

    @property
    def is_nil(self) -> bool:
        """True when the server replied without a value."""
        return self.error is None and self.raw is None

    def as_int(self) -> int:
        """
        Coerce the value to an integer.

        Returns 0 when the result is nil or failed.

        Raises:
            ValueError: the value is present but not numeric
        """
        if self.raw is None:
            return 0
        return int(self.raw)

    def as_bool(self) -> bool:
        """Coerce a numeric value ("0"/"1") to a boolean."""
        return self.as_int() != 0


@dataclass(frozen=True)
class StatusResult(_ErrorAware):
    """
    Result of a command that only reports success or failure.

    Attributes:
        message: Optional message attached to a successful reply
        error: The failure, if any
    """
    message: str = ""
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.error is not None:
            object.__setattr__(self, "message", "")

    @classmethod
    def from_reply(cls, reply: Reply) -> "StatusResult":
        """
        Decode a raw reply into a StatusResult.

        Any scalar reply means the command was applied. Counts and strings
        (e.g. the number of removed items) are kept in ``message``; NIL
        leaves it empty. Only ERR and SLICE replies are failures.
        """
        if reply.type in (ReplyType.OK, ReplyType.INT, ReplyType.STRING, ReplyType.NIL):
            return cls(message=reply.result)
        if reply.type == ReplyType.ERR:
            return cls(error=ServerError(reply.result))
        return cls(error=_unexpected(reply, ResultKind.STATUS))


@dataclass(frozen=True)
class ListResult(_ErrorAware):
    """
    Result holding an ordered sequence of values.

    An empty sequence is a valid outcome and is not an error.

    Attributes:
        values: The values in server order
        error: The failure, if any
    """
    values: Tuple[str, ...] = ()
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.error is not None:
            object.__setattr__(self, "values", ())
        else:
            object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def from_reply(cls, reply: Reply) -> "ListResult":
        """Decode a raw reply into a ListResult."""
        if reply.type == ReplyType.SLICE:
            return cls(values=reply.items)
        if reply.type == ReplyType.NIL:
            return cls()
        if reply.type == ReplyType.ERR:
            return cls(error=ServerError(reply.result))
        return cls(error=_unexpected(reply, ResultKind.LIST))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]


Result = Union[ScalarResult, StatusResult, ListResult]

RESULT_TYPES = {
    ResultKind.SCALAR: ScalarResult,
    ResultKind.STATUS: StatusResult,
    ResultKind.LIST: ListResult,
}


def decode_reply(kind: ResultKind, reply: Reply) -> Result:
    """Decode a raw reply into the result variant for ``kind``."""
    return RESULT_TYPES[kind].from_reply(reply)


def failed_result(kind: ResultKind, error: Exception) -> Result:
    """Build the result variant for ``kind`` carrying only an error."""
    return RESULT_TYPES[kind](error=error)

"""
Protocol Command and Reply Definitions

This module defines the data structures for protocol commands and replies,
and the table that routes every verb to the kind of result it produces.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Tuple

# Separates the verb and each argument on the wire. Arguments are not escaped.
SEPARATOR = " "


class Verb(str, Enum):
    """Enumeration of supported command verbs."""
    GET = "GET"
    SET = "SET"
    DEL = "DEL"
    EXPIRE = "EXPIRE"
    GETBIT = "GETBIT"
    SETBIT = "SETBIT"
    HGET = "HGET"
    HSET = "HSET"
    HKEYS = "HKEYS"
    HVALS = "HVALS"
    HDEL = "HDEL"
    KEYS = "KEYS"
    LINDEX = "LINDEX"
    LLEN = "LLEN"
    LPOP = "LPOP"
    LPUSH = "LPUSH"
    RPUSH = "RPUSH"
    LRANGE = "LRANGE"
    LREM = "LREM"
    PING = "PING"
    STRLEN = "STRLEN"
    TTL = "TTL"
    TYPE = "TYPE"


class ResultKind(Enum):
    """Enumeration of result variants a verb can decode into."""
    SCALAR = auto()
    STATUS = auto()
    LIST = auto()


VERB_RESULT_KINDS: Dict[Verb, ResultKind] = {
    Verb.GET: ResultKind.SCALAR,
    Verb.SET: ResultKind.STATUS,
    Verb.DEL: ResultKind.STATUS,
    Verb.EXPIRE: ResultKind.STATUS,
    Verb.GETBIT: ResultKind.SCALAR,
    Verb.SETBIT: ResultKind.STATUS,
    Verb.HGET: ResultKind.SCALAR,
    Verb.HSET: ResultKind.STATUS,
    Verb.HKEYS: ResultKind.LIST,
    Verb.HVALS: ResultKind.LIST,
    Verb.HDEL: ResultKind.SCALAR,
    Verb.KEYS: ResultKind.LIST,
    Verb.LINDEX: ResultKind.SCALAR,
    Verb.LLEN: ResultKind.SCALAR,
    Verb.LPOP: ResultKind.SCALAR,
    Verb.LPUSH: ResultKind.STATUS,
    Verb.RPUSH: ResultKind.STATUS,
    Verb.LRANGE: ResultKind.LIST,
    Verb.LREM: ResultKind.STATUS,
    Verb.PING: ResultKind.SCALAR,
    Verb.STRLEN: ResultKind.SCALAR,
    Verb.TTL: ResultKind.SCALAR,
    Verb.TYPE: ResultKind.SCALAR,
}


@dataclass(frozen=True)
class Command:
    """
    Represents a command to be sent to the server.

    Attributes:
        verb: The command verb
        args: Ordered positional arguments, converted to strings
    """
    verb: Verb
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        """Normalize verb and arguments after initialization."""
        # Raises ValueError for verbs the client does not know
        if not isinstance(self.verb, Verb):
            object.__setattr__(self, "verb", Verb(str(self.verb).upper()))
        object.__setattr__(self, "args", tuple(str(arg) for arg in self.args))

    @property
    def result_kind(self) -> ResultKind:
        """The result variant this command's reply decodes into."""
        return VERB_RESULT_KINDS[self.verb]


class ReplyType(Enum):
    """Enumeration of reply types returned by the server."""
    OK = "OK"
    NIL = "NIL"
    STRING = "STRING"
    INT = "INT"
    SLICE = "SLICE"
    ERR = "ERR"


@dataclass(frozen=True)
class Reply:
    """
    Represents a raw reply from the server.

    Attributes:
        type: What kind of payload the reply carries
        result: Scalar payload, status message or error message
        items: Ordered values for SLICE replies
    """
    type: ReplyType
    result: str = ""
    items: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, message: str = "") -> "Reply":
        """Create a successful status reply."""
        return cls(type=ReplyType.OK, result=message)

    @classmethod
    def nil(cls) -> "Reply":
        """Create a reply for a missing value."""
        return cls(type=ReplyType.NIL)

    @classmethod
    def string(cls, value: str) -> "Reply":
        """Create a reply carrying a single string value."""
        return cls(type=ReplyType.STRING, result=value)

    @classmethod
    def integer(cls, value: int) -> "Reply":
        """Create a reply carrying a single integer value."""
        return cls(type=ReplyType.INT, result=str(value))

    @classmethod
    def slice(cls, items) -> "Reply":
        """Create a reply carrying an ordered list of values."""
        return cls(type=ReplyType.SLICE, items=tuple(items))

    @classmethod
    def error(cls, message: str) -> "Reply":
        """Create an error reply."""
        return cls(type=ReplyType.ERR, result=message)

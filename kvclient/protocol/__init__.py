"""Protocol module for KV-Client."""

from .commands import (
    SEPARATOR,
    VERB_RESULT_KINDS,
    Command,
    Reply,
    ReplyType,
    ResultKind,
    Verb,
)
from .parser import ProtocolParser

__all__ = [
    "SEPARATOR",
    "VERB_RESULT_KINDS",
    "Command",
    "Reply",
    "ReplyType",
    "ResultKind",
    "Verb",
    "ProtocolParser",
]

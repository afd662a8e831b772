"""
Protocol Parser Module

This module handles encoding of commands and decoding of reply frames.

Protocol Format:
    Request:  <VERB> [ARGS...]\\n
    Reply:    <TYPE> [PAYLOAD]\\n
              followed by <count> item lines when TYPE is SLICE
"""

import logging
from typing import Sequence, Tuple

from ..errors import ProtocolError
from .commands import SEPARATOR, Command, Reply, ReplyType

logger = logging.getLogger(__name__)


class ProtocolParser:
    """
    Encoder/decoder for the KV-Client text protocol.

    Reply types:
        OK [message]        -> status succeeded
        NIL                 -> no value
        STRING <value>      -> single string value
        INT <n>             -> single integer value
        SLICE <count>       -> <count> item lines follow
        ERR <message>       -> server-side failure

    Constraints:
        - Arguments are joined with a single space and never escaped
        - Values must not contain newlines
    """

    def encode_command(self, command: Command) -> str:
        """
        Encode a Command into a single request line (no terminator).

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.encode_command(Command("SET", ("foo", "bar")))
            'SET foo bar'
            >>> parser.encode_command(Command("PING"))
            'PING'
        """
        for arg in command.args:
            if not arg or any(ch.isspace() for ch in arg):
                logger.warning(
                    f"{command.verb.value} argument {arg!r} is empty or contains "
                    f"whitespace and will be mis-split by the server"
                )
        return SEPARATOR.join([command.verb.value, *command.args])

    def parse_command(self, data: str) -> Command:
        """
        Parse a raw request line into a Command.

        Args:
            data: Raw request string (may include trailing newline)

        Raises:
            ProtocolError: empty input or unknown verb
        """
        parts = data.strip().split()
        if not parts:
            raise ProtocolError("empty command")
        try:
            return Command(parts[0], tuple(parts[1:]))
        except ValueError:
            raise ProtocolError(f"unknown command: {parts[0]}") from None

    def parse_reply_header(self, line: str) -> Tuple[ReplyType, str]:
        """
        Parse the first line of a reply frame.

        Returns:
            Tuple of (reply type, payload). The payload is everything after
            the first separator, preserved verbatim.
        """
        line = line.rstrip("\r\n")
        name, _, payload = line.partition(SEPARATOR)
        try:
            return ReplyType(name.upper()), payload
        except ValueError:
            raise ProtocolError(f"unknown reply type: {name!r}") from None

    def slice_length(self, payload: str) -> int:
        """Validate and return the item count of a SLICE header."""
        try:
            count = int(payload)
        except ValueError:
            raise ProtocolError(f"invalid slice length: {payload!r}") from None
        if count < 0:
            raise ProtocolError(f"invalid slice length: {payload!r}")
        return count

    def build_reply(
            self,
            reply_type: ReplyType,
            payload: str,
            items: Sequence[str] = (),
    ) -> Reply:
        """Assemble a Reply from a parsed header and its item lines."""
        if reply_type == ReplyType.SLICE:
            return Reply.slice(items)
        if reply_type == ReplyType.INT:
            try:
                int(payload)
            except ValueError:
                raise ProtocolError(f"invalid integer reply: {payload!r}") from None
        if reply_type == ReplyType.NIL:
            return Reply.nil()
        return Reply(type=reply_type, result=payload)

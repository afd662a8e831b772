"""
Command Executor Module

An Executor sends one encoded command line and returns the server's raw
reply. StreamExecutor is the default implementation over an asyncio TCP
stream. Any other object providing the same two coroutines can be plugged
into the client through a custom dialer.

Key asyncio concepts used:
- asyncio.open_connection(): Open the TCP stream
- StreamReader.readline(): Read one reply line
- asyncio.Lock: One request/reply exchange in flight per connection
- asyncio.shield(): A caller that stops waiting does not desync the stream
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import List, Optional, Protocol, Tuple

from ..config.settings import settings
from ..errors import ProtocolError
from ..protocol.commands import Reply, ReplyType
from ..protocol.parser import ProtocolParser

logger = logging.getLogger(__name__)


class Executor(Protocol):
    """
    Capability that transmits an encoded command and returns a raw reply.

    Implementations must be safe to call from several tasks at once, or
    serialize calls themselves.
    """

    async def execute(self, line: str) -> Reply:
        """
        Send one command line and wait for its reply.

        A caller that stops waiting before its command reached the socket
        withdraws the command. Once written, the exchange runs to completion.
        """
        if self._closed:
            raise ConnectionResetError(f"connection to {self.address} is closed")
        sent = asyncio.Event()
        task = asyncio.ensure_future(self._exchange(line, sent))
        task.add_done_callback(self._log_orphaned)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not sent.is_set():
                task.cancel()
            raise

    async def _exchange(self, line: str, sent: asyncio.Event) -> Reply:
        async with self._lock:
            if self._closed:
                raise ConnectionResetError(f"connection to {self.address} is closed")
            self.writer.write(f"{line}\n".encode())
            sent.set()
            try:
                await self.writer.drain()
                return await self._read_reply()
            except BaseException:
                # Unread lines of this frame would answer the next request
                self._abort()
                raise

    async def _read_reply(self) -> Reply:
        header = await self._readline()
        reply_type, payload = self.parser.parse_reply_header(header)
        items: List[str] = []
        if reply_type == ReplyType.SLICE:
            count = self.parser.slice_length(payload)
            for _ in range(count):
                items.append((await self._readline()).rstrip("\r"))
        return self.parser.build_reply(reply_type, payload, items)

    async def _readline(self) -> str:
        data = await self.reader.readline()
        if not data:
            raise ProtocolError(f"connection to {self.address} closed by server")
        return data.decode("utf-8", errors="surrogateescape").rstrip("\n")

    def _abort(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        logger.warning(f"Connection to {self.address} dropped after a failed exchange")

    def _log_orphaned(self, task: "asyncio.Future") -> None:
        # Consume exceptions of exchanges whose caller already gave up
        if task.cancelled():
            return
        error: Optional[BaseException] = task.exception()
        if error is not None:
            logger.debug(f"Exchange with {self.address} failed: {error!r}")

    async def close(self) -> None:
        """Close the stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except Exception as e:
            logger.debug(f"Error while closing {self.address}: {e!r}")
        logger.debug(f"Closed connection to {self.address}")


async def open_stream_executor(address: str) -> "StreamExecutor":
    """Default dialer used by Client.connect()."""
    return await StreamExecutor.open(address)

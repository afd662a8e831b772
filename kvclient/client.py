"""
KV-Client Facade

The Client owns one connection (an Executor) and exposes one coroutine per
command verb. Each of them encodes a Command, hands it to the executor and
decodes the reply into a ScalarResult, StatusResult or ListResult.

Usage:
    client = await Client.connect("10.0.0.1:4000", "10.0.0.2:4000")
    async with client:
        await client.set("foo", "bar")
        result = await client.get("foo")
        if result.error is None:
            print(result.value)
"""

import asyncio
import logging
from typing import Optional, Tuple, Union

from .config.settings import settings
from .errors import ClientClosedError, ExecutionError
from .network.connector import Dialer, connect_first
from .network.executor import Executor, open_stream_executor
from .protocol.commands import Command, Verb
from .protocol.parser import ProtocolParser
from .results import (
    ListResult,
    Result,
    ScalarResult,
    StatusResult,
    decode_reply,
    failed_result,
)

logger = logging.getLogger(__name__)

Arg = Union[str, int]


class Client:
    """
    Client for a remote key-value store.

    Build it with ``await Client.connect(...)``; construction either yields a
    connected client or raises ConnectError. There is no reconnection: once
    closed, every operation returns a result carrying ClientClosedError.

    Every operation accepts ``timeout``: seconds to wait for the reply, or
    None (the default) to wait as long as the transport does. An expired
    timeout is reported as an ExecutionError inside the result. It only ends
    the wait: a command already written to the connection may still be
    applied by the server. A command still queued behind another caller's
    exchange is withdrawn and never sent.

    Attributes:
        addresses: All candidate addresses, in preference order
        address: The address the client is connected to
    """

    def __init__(self, addresses: Tuple[str, ...], address: str, executor: Executor):
        self.addresses = addresses
        self.address = address
        self.parser = ProtocolParser()
        self._executor = executor
        self._closed = False

    @classmethod
    async def connect(
            cls,
            address: str,
            *addresses: str,
            dialer: Optional[Dialer] = None,
            connect_timeout: Optional[float] = None,
    ) -> "Client":
        """
        Connect to the first reachable address.

        Args:
            address: Primary server address ("host:port")
            *addresses: Alternate addresses, tried in order
            dialer: Coroutine function opening an Executor (default: TCP)
            connect_timeout: Seconds per attempt (default from settings)

        Raises:
            ConnectError: every address failed
        """
        candidates = (address, *addresses)
        timeout = connect_timeout if connect_timeout is not None else settings.CONNECT_TIMEOUT
        connected, executor = await connect_first(
            candidates, dialer or open_stream_executor, timeout
        )
        return cls(candidates, connected, executor)

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._executor.close()
        logger.info(f"Client for {self.address} closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def execute(
            self,
            verb: Union[Verb, str],
            *args: Arg,
            timeout: Optional[float] = None,
    ) -> Result:
        """
        Run any verb and decode its reply into the matching result variant.

        Raises:
            ValueError: the verb is unknown
        """
        command = Command(verb, args)
        kind = command.result_kind
        if self._closed:
            return failed_result(
                kind, ExecutionError(command.verb.value, ClientClosedError("client is closed"))
            )

        line = self.parser.encode_command(command)
        logger.debug(f"Executing {line!r} on {self.address}")
        try:
            reply = await asyncio.wait_for(self._executor.execute(line), timeout=timeout)
        except Exception as e:
            logger.debug(f"{command.verb.value} failed: {e!r}")
            return failed_result(kind, ExecutionError(command.verb.value, e))
        return decode_reply(kind, reply)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    async def get(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        """Get the value at ``key``."""
        return await self.execute(Verb.GET, key, timeout=timeout)

    async def set(self, key: str, value: str, *, timeout: Optional[float] = None) -> StatusResult:
        """Set ``key`` to ``value``."""
        return await self.execute(Verb.SET, key, value, timeout=timeout)

    async def delete(self, key: str, *, timeout: Optional[float] = None) -> StatusResult:
        """Delete ``key``."""
        return await self.execute(Verb.DEL, key, timeout=timeout)

    async def strlen(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        """Length of the string stored at ``key``."""
        return await self.execute(Verb.STRLEN, key, timeout=timeout)

    async def getbit(self, key: str, offset: int, *, timeout: Optional[float] = None) -> ScalarResult:
        """Bit value at ``offset`` in the string stored at ``key``."""
        return await self.execute(Verb.GETBIT, key, offset, timeout=timeout)

    async def setbit(
            self, key: str, offset: int, value: int, *, timeout: Optional[float] = None
    ) -> StatusResult:
        """Set or clear the bit at ``offset`` in the bitmap stored at ``key``."""
        return await self.execute(Verb.SETBIT, key, offset, value, timeout=timeout)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    async def keys(self, pattern: str, *, timeout: Optional[float] = None) -> ListResult:
        """All keys matching ``pattern``."""
        return await self.execute(Verb.KEYS, pattern, timeout=timeout)

    async def expire(self, key: str, seconds: int, *, timeout: Optional[float] = None) -> StatusResult:
        """Expire ``key`` in ``seconds`` from now."""
        return await self.execute(Verb.EXPIRE, key, seconds, timeout=timeout)

    async def ttl(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        """Remaining time to live of ``key``. -1 means the key has no expiration."""
        return await self.execute(Verb.TTL, key, timeout=timeout)

    async def type(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        """Name of the data type stored at ``key``."""
        return await self.execute(Verb.TYPE, key, timeout=timeout)

    async def ping(self, message: Optional[str] = None, *, timeout: Optional[float] = None) -> ScalarResult:
        """PONG, or a copy of ``message`` when given."""
        if message is None:
            return await self.execute(Verb.PING, timeout=timeout)
        return await self.execute(Verb.PING, message, timeout=timeout)

    # ------------------------------------------------------------------
    # Hashes
    # ------------------------------------------------------------------

    async def hget(self, key: str, field: str, *, timeout: Optional[float] = None) -> ScalarResult:
        return await self.execute(Verb.HGET, key, field, timeout=timeout)

    async def hset(
            self, key: str, field: str, value: str, *, timeout: Optional[float] = None
    ) -> StatusResult:
        return await self.execute(Verb.HSET, key, field, value, timeout=timeout)

    async def hkeys(self, key: str, *, timeout: Optional[float] = None) -> ListResult:
        return await self.execute(Verb.HKEYS, key, timeout=timeout)

    async def hvals(self, key: str, *, timeout: Optional[float] = None) -> ListResult:
        return await self.execute(Verb.HVALS, key, timeout=timeout)

    async def hdel(
            self, key: str, field: str, *fields: str, timeout: Optional[float] = None
    ) -> ScalarResult:
        """Delete one or more fields. The value is the number of fields removed."""
        return await self.execute(Verb.HDEL, key, field, *fields, timeout=timeout)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    async def lindex(self, key: str, index: int, *, timeout: Optional[float] = None) -> ScalarResult:
        return await self.execute(Verb.LINDEX, key, index, timeout=timeout)

    async def llen(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        return await self.execute(Verb.LLEN, key, timeout=timeout)

    async def lpop(self, key: str, *, timeout: Optional[float] = None) -> ScalarResult:
        """Remove and return the first element of the list."""
        return await self.execute(Verb.LPOP, key, timeout=timeout)

    async def lpush(self, key: str, value: str, *, timeout: Optional[float] = None) -> StatusResult:
        """Prepend ``value`` to the list."""
        return await self.execute(Verb.LPUSH, key, value, timeout=timeout)

    async def rpush(
            self, key: str, value: str, *values: str, timeout: Optional[float] = None
    ) -> StatusResult:
        """Append one or more values to the list."""
        return await self.execute(Verb.RPUSH, key, value, *values, timeout=timeout)

    async def lrange(
            self, key: str, start: int, stop: int, *, timeout: Optional[float] = None
    ) -> ListResult:
        """Elements between the zero-based indexes ``start`` and ``stop``."""
        return await self.execute(Verb.LRANGE, key, start, stop, timeout=timeout)

    async def lrem(self, key: str, value: str, *, timeout: Optional[float] = None) -> StatusResult:
        """Remove ``value`` from the list."""
        return await self.execute(Verb.LREM, key, value, timeout=timeout)

    def __repr__(self) -> str:
        return (f"Client(address={self.address!r}, "
                f"addresses={self.addresses!r}, closed={self._closed})")

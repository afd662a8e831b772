"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
from collections import deque
from contextlib import closing
from typing import AsyncGenerator, Callable, Dict, List, Optional, Union

import pytest
import pytest_asyncio

from kvclient.client import Client
from kvclient.protocol.commands import SEPARATOR, Reply, ReplyType
from kvclient.protocol.parser import ProtocolParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Fake Executor Fixtures
# ============================================================================

class FakeExecutor:
    """
    In-memory executor for client tests.

    Records every encoded line it receives and answers with queued replies.
    A queued exception is raised instead of being returned.

    Usage:
        executor = FakeExecutor()
        executor.queue(Reply.ok())
        reply = await executor.execute("SET foo bar")
        assert executor.lines == ["SET foo bar"]
    """

    def __init__(self, delay: float = 0.0):
        self.lines: List[str] = []
        self.replies = deque()
        self.delay = delay
        self.closed = False

    def queue(self, *replies) -> "FakeExecutor":
        self.replies.extend(replies)
        return self

    async def execute(self, line: str) -> Reply:
        self.lines.append(line)
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies.popleft() if self.replies else Reply.ok()
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


class FakeDialer:
    """
    Dialer that connects only to a chosen set of addresses.

    Unreachable addresses either raise ConnectionRefusedError or, when listed
    in ``hanging``, never complete so the connect timeout has to fire.
    """

    def __init__(
            self,
            reachable: Dict[str, FakeExecutor],
            hanging: Optional[List[str]] = None,
    ):
        self.reachable = reachable
        self.hanging = set(hanging or [])
        self.attempts: List[str] = []

    async def __call__(self, address: str) -> FakeExecutor:
        self.attempts.append(address)
        if address in self.hanging:
            await asyncio.sleep(3600)
        if address not in self.reachable:
            raise ConnectionRefusedError(f"connection refused: {address}")
        return self.reachable[address]


@pytest.fixture
def executor() -> FakeExecutor:
    """Create a fresh FakeExecutor."""
    return FakeExecutor()


@pytest_asyncio.fixture
async def client(executor: FakeExecutor) -> AsyncGenerator[Client, None]:
    """Create a Client connected to the fake executor."""
    dialer = FakeDialer({"fake:1": executor})
    c = await Client.connect("fake:1", dialer=dialer)
    yield c
    await c.close()


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


# ============================================================================
# Server Fixtures
# ============================================================================

def format_reply(reply: Reply) -> str:
    """
    Format a Reply into a protocol frame, the way a server writes it.

    Examples:
        >>> format_reply(Reply.ok())
        'OK\\n'
        >>> format_reply(Reply.slice(["a", "b"]))
        'SLICE 2\\na\\nb\\n'
    """
    prefix = reply.type.value

    if reply.type == ReplyType.SLICE:
        body = "".join(f"{item}\n" for item in reply.items)
        return f"{prefix}{SEPARATOR}{len(reply.items)}\n{body}"
    if reply.type == ReplyType.NIL:
        return f"{prefix}\n"
    if reply.result or reply.type == ReplyType.STRING:
        return f"{prefix}{SEPARATOR}{reply.result}\n"
    return f"{prefix}\n"


class ReplayServer:
    """
    Loopback TCP server that answers each request line with a scripted reply.

    ``handler`` maps the received request line to a Reply, or to raw bytes
    written unchanged. Every received line is recorded in ``requests``.
    """

    def __init__(self, handler: Callable[[str], Union[Reply, bytes]], delay: float = 0.0):
        self.handler = handler
        self.delay = delay
        self.requests: List[str] = []
        self._server: Optional[asyncio.AbstractServer] = None
        self._writers = set()

    async def handle_client(self, reader, writer) -> None:
        self._writers.add(writer)
        try:
            while True:
                data = await reader.readline()
                if not data:
                    break
                line = data.decode().rstrip("\n")
                self.requests.append(line)
                if self.delay:
                    await asyncio.sleep(self.delay)
                reply = self.handler(line)
                if isinstance(reply, Reply):
                    reply = format_reply(reply).encode()
                writer.write(reply)
                await writer.drain()
        finally:
            self._writers.discard(writer)
            writer.close()

    async def start(self, port: int) -> None:
        self._server = await asyncio.start_server(self.handle_client, '127.0.0.1', port)

    async def stop(self) -> None:
        for writer in list(self._writers):
            writer.close()
        if self._server:
            self._server.close()
            await self._server.wait_closed()


@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest.fixture
def server_address(server_port: int) -> str:
    return f"127.0.0.1:{server_port}"


@pytest_asyncio.fixture
async def server_factory(server_port: int):
    """
    Factory fixture to start a ReplayServer on the free port.

    Usage:
        async def test_something(server_factory, server_address):
            server = await server_factory(lambda line: Reply.ok())
    """
    servers: List[ReplayServer] = []

    async def factory(handler: Callable[[str], Union[Reply, bytes]], delay: float = 0.0) -> ReplayServer:
        srv = ReplayServer(handler, delay=delay)
        await srv.start(server_port)
        servers.append(srv)
        return srv

    yield factory

    for srv in servers:
        await srv.stop()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


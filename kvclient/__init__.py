"""
KV-Client: Client Library for a Remote Key-Value Store

An asyncio client that connects to the first reachable server out of a
ranked address list and exposes typed, error-aware results for every
command the store understands.
"""

from .client import Client
from .errors import (
    AddressFailure,
    ClientClosedError,
    ConnectError,
    ExecutionError,
    KVClientError,
    ProtocolError,
    ServerError,
    UnexpectedReplyError,
)
from .results import ListResult, ScalarResult, StatusResult

__version__ = "1.0.0"

__all__ = [
    "Client",
    "AddressFailure",
    "ClientClosedError",
    "ConnectError",
    "ExecutionError",
    "KVClientError",
    "ProtocolError",
    "ServerError",
    "UnexpectedReplyError",
    "ListResult",
    "ScalarResult",
    "StatusResult",
]

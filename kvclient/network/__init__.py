"""Network module for KV-Client."""

from .connector import Dialer, connect_first
from .executor import Executor, open_stream_executor

__all__ = [
    "Dialer",
    "connect_first",
    "Executor",
    "open_stream_executor",
]

"""
Connection Failover Module

Tries candidate server addresses in preference order, one at a time, each
under a bounded timeout, and adopts the first one that connects.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, Tuple

from ..errors import AddressFailure, ConnectError
from .executor import Executor

logger = logging.getLogger(__name__)

Dialer = Callable[[str], Awaitable[Executor]]


async def connect_first(
        addresses: Sequence[str],
        dialer: Dialer,
        timeout: float,
) -> Tuple[str, Executor]:
    """
    Connect to the first reachable address.

    Args:
        addresses: Candidate addresses, primary first
        dialer: Coroutine function opening an Executor for one address
        timeout: Seconds allowed for each individual attempt

    Returns:
        Tuple of (address, executor) for the adopted connection

    Raises:
        ValueError: no addresses were given
        ConnectError: every address failed; carries one failure per address
    """
    if not addresses:
        raise ValueError("at least one address is required")

    failures: List[AddressFailure] = []
    for address in addresses:
        logger.debug(f"Connecting to {address} (timeout {timeout}s)")
        try:
            executor = await asyncio.wait_for(dialer(address), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.debug(f"Timeout connecting to {address}")
            failures.append(AddressFailure(address, e))
            continue
        except Exception as e:
            logger.debug(f"Failed to connect to {address}: {e!r}")
            failures.append(AddressFailure(address, e))
            continue

        if failures:
            logger.info(
                f"Connected to {address} after {len(failures)} failed attempt(s)"
            )
        else:
            logger.info(f"Connected to {address}")
        return address, executor

    error = ConnectError(failures)
    logger.error(str(error))
    raise error

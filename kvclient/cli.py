#!/usr/bin/env python3
"""
Interactive Client for a KV Store

A small command-line shell for manually talking to the server.

Usage:
    kvclient                                        # Connect to localhost:4000
    kvclient -a 10.0.0.1:4000 -a 10.0.0.2:4000      # Failover candidates
    kvclient --timeout 2.5                          # Per-command timeout
    kvclient --debug                                # Enable debug logging

Environment Variables:
    KV_CLIENT_ADDRESS           - Default server address
    KV_CLIENT_CONNECT_TIMEOUT   - Seconds allowed per connection attempt
    KV_CLIENT_DEBUG             - Enable debug mode (true/false)
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .client import Client
from .config.settings import settings
from .errors import ConnectError, ProtocolError
from .protocol.commands import Verb
from .protocol.parser import ProtocolParser
from .results import ListResult, Result, ScalarResult


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive client for a KV store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-a", "--address",
        dest="addresses",
        action="append",
        help="Server address host:port, repeat for failover order",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each reply, None waits forever",
    )

    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=settings.CONNECT_TIMEOUT,
        help="Seconds allowed per connection attempt",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    if not args.addresses:
        args.addresses = [settings.DEFAULT_ADDRESS]
    return args


def setup_logging(debug: bool) -> None:
    """Configure logging for the shell."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def format_result(result: Result) -> str:
    """Render a result the way the shell prints it."""
    if result.error is not None:
        return f"(error) {result.error}"
    if isinstance(result, ScalarResult):
        return "(nil)" if result.is_nil else result.value
    if isinstance(result, ListResult):
        if not result.values:
            return "(empty list)"
        return "\n".join(f"{i}) {value}" for i, value in enumerate(result.values, 1))
    return f"OK {result.message}".rstrip()


def print_help():
    """Print help message."""
    verbs = " ".join(verb.value for verb in Verb)
    print(f"""
Server Commands:
----------------
  {verbs}

Client Commands:
----------------
  help                      Show this help message
  exit                      Exit the client

Examples:
---------
  SET mykey myvalue         Store "myvalue" under "mykey"
  EXPIRE mykey 60           Expire "mykey" in 60 seconds
  RPUSH mylist a b c        Append three values to "mylist"
  LRANGE mylist 0 -1        Read the whole list
""")


async def run_shell(args: argparse.Namespace) -> int:
    """Connect and run the read-eval-print loop. Returns the exit status."""
    print(f"Connecting to {', '.join(args.addresses)}...")
    try:
        client = await Client.connect(
            *args.addresses, connect_timeout=args.connect_timeout
        )
    except ConnectError as e:
        print(e)
        return 1

    print(f"Connected to {client.address}! Type 'help' for commands.\n")
    parser = ProtocolParser()
    loop = asyncio.get_running_loop()

    async with client:
        while True:
            try:
                line = await loop.run_in_executor(None, input, ">>> ")
            except EOFError:
                print("\nGoodbye!")
                return 0

            line = line.strip()
            if not line:
                continue

            lower_cmd = line.lower()
            if lower_cmd == "help":
                print_help()
                continue
            if lower_cmd in ("exit", "quit"):
                print("Goodbye!")
                return 0

            try:
                command = parser.parse_command(line)
            except ProtocolError as e:
                print(f"(error) {e}")
                continue

            result = await client.execute(command.verb, *command.args, timeout=args.timeout)
            print(format_result(result))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        status = asyncio.run(run_shell(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    main()

"""
KV-Client Configuration Settings

This module contains all configuration constants for the client library.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Client configuration settings."""

    # Network settings
    DEFAULT_ADDRESS: str = os.environ.get("KV_CLIENT_ADDRESS", "localhost:4000")
    CONNECT_TIMEOUT: float = float(os.environ.get("KV_CLIENT_CONNECT_TIMEOUT", "0.1"))

    # Stream settings
    READ_BUFFER_SIZE: int = 64 * 1024  # asyncio StreamReader line limit

    # Logging settings
    DEBUG: bool = os.environ.get("KV_CLIENT_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KV_CLIENT_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()

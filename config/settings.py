"""Configuration management for the Tenkai client."""

from dataclasses import dataclass
from typing import Optional
import os
from pathlib import Path

from dotenv import load_dotenv

from protocol.constants import DEFAULT_IDENTITY, DEFAULT_PORT, READ_BUFFER_SIZE
from protocol.identity import validate_identity
from utils.exceptions import ConfigurationError


# Load .env file from project root
# This is called at module import time to ensure env vars are available
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path, override=False)


@dataclass
class ClientConfig:
    """Configuration for a Tenkai client connection."""

    host: str
    port: int = DEFAULT_PORT
    identity: str = DEFAULT_IDENTITY
    connect_timeout: Optional[float] = None
    read_buffer_size: int = READ_BUFFER_SIZE

    def validate(self) -> None:
        """Validate client configuration parameters."""
        if not self.host:
            raise ValueError("Server host is required")
        if not isinstance(self.port, int) or self.port < 1 or self.port > 65535:
            raise ValueError("Server port must be between 1 and 65535")
        if not self.identity:
            raise ValueError("Identity is required")
        validate_identity(self.identity)
        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise ValueError("Connect timeout must be positive")
        if self.read_buffer_size < 1:
            raise ValueError("Read buffer size must be positive")


def _parse_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid integer, got: {raw}")


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.client: Optional[ClientConfig] = None

    def load_client_config(self) -> ClientConfig:
        """
        Load client configuration from environment variables.

        Environment variables:
            TENKAI_HOST: Server address (required)
            TENKAI_PORT: Server port (default: 4989)
            TENKAI_IDENTITY: Name presented to the server (default: TenkaiClientNode)
            TENKAI_CONNECT_TIMEOUT: Seconds to wait for the connection (default: no limit)
            TENKAI_READ_BUFFER_SIZE: Bytes per transport read (default: 4096)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If a value cannot be parsed
            ValueError: If required configuration is missing or invalid
        """
        host = os.getenv('TENKAI_HOST')
        if not host:
            raise ValueError(
                "TENKAI_HOST environment variable is required. "
                "Example: TENKAI_HOST=192.168.1.20"
            )

        timeout_str = os.getenv('TENKAI_CONNECT_TIMEOUT')
        connect_timeout = None
        if timeout_str:
            try:
                connect_timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"TENKAI_CONNECT_TIMEOUT must be a number, got: {timeout_str}"
                )

        config = ClientConfig(
            host=host,
            port=_parse_int('TENKAI_PORT', str(DEFAULT_PORT)),
            identity=os.getenv('TENKAI_IDENTITY', DEFAULT_IDENTITY),
            connect_timeout=connect_timeout,
            read_buffer_size=_parse_int('TENKAI_READ_BUFFER_SIZE', str(READ_BUFFER_SIZE)),
        )
        config.validate()
        self.client = config
        return config

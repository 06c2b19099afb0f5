#!/usr/bin/env python3
"""
Main entry point for the Tenkai client.

Connects to a Tenkai server, identifies, sends every file given on the
command line and leaves. Connection settings are loaded from environment
variables (or a .env file).

Usage:
    python main_client.py FILE [FILE ...]
"""

import asyncio
import signal
import sys
import os
from typing import List, Optional, Set

from config.settings import Config
from client.tenkai_client import TenkaiClient
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError, TenkaiError

logger = get_logger(__name__)


class ClientApplication:
    """Main application class for the file sending client."""

    def __init__(self, files: List[str]):
        """Initialize application."""
        self.config = Config()
        self.files = files
        self.client: Optional[TenkaiClient] = None
        self._tasks: Set[asyncio.Task] = set()

    async def run(self) -> int:
        """
        Run the client application.

        Returns:
            Process exit code
        """
        try:
            logger.info("Loading configuration...")
            client_config = self.config.load_client_config()
            logger.info(
                f"Configuration loaded: "
                f"server={client_config.host}:{client_config.port}, "
                f"identity={client_config.identity}"
            )

            self.client = TenkaiClient.from_config(client_config)
            await self.client.connect()
            await self.client.identify(client_config.identity)

            for path in self.files:
                await self.client.send_file(path)

            await self.client.leave()
            return 0

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error(
                "Please check your environment variables. "
                "See .env.example for required configuration."
            )
            return 1
        except ValueError as e:
            logger.error(f"Configuration validation error: {e}")
            return 1
        except TenkaiError as e:
            logger.error(f"Transfer failed: {e}")
            return 1
        finally:
            if self.client:
                await self.client.leave()
            await self._wait_shutdown_tasks()

    def handle_shutdown(self, signum: int) -> None:
        """
        Schedule leaving the server when a shutdown signal arrives.

        Args:
            signum: Signal number
        """
        logger.info(f"Received signal {signum}")
        if not self.client:
            return
        task = asyncio.create_task(self.client.leave())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _wait_shutdown_tasks(self) -> None:
        if not self._tasks:
            return
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Error while leaving on shutdown: {result}")


async def main(argv: List[str]) -> int:
    """Main entry point."""
    setup_logging(os.getenv('LOG_LEVEL', 'INFO'))

    if not argv:
        logger.error("Usage: main_client.py FILE [FILE ...]")
        return 2

    app = ClientApplication(argv)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: app.handle_shutdown(s)
        )

    return await app.run()


if __name__ == '__main__':
    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        print("\nShutdown complete")
        sys.exit(0)

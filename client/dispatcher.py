"""Reactions to commands received from the server."""

from typing import Awaitable, Callable, Optional

from protocol.codec import decode_command
from protocol.commands import Break, Command, IdentifyAck
from client.observer import ClientObserver
from utils.logging import get_logger

logger = get_logger(__name__)


class CommandDispatcher:
    """
    Routes decoded inbound commands to their handlers.

    Dispatch never fails: unrecognised input is ignored.
    """

    def __init__(
        self,
        close: Callable[[], Awaitable[None]],
        observer: Optional[ClientObserver] = None,
    ):
        """
        Args:
            close: Closes the connection the commands arrive on
            observer: Receives identification notices
        """
        self._close = close
        self._observer = observer or ClientObserver()

    async def dispatch_line(self, line: str) -> None:
        """Decode one inbound line and dispatch the resulting command."""
        logger.debug(f"Get data: {line!r}")
        await self.dispatch(decode_command(line))

    async def dispatch(self, command: Command) -> None:
        if isinstance(command, IdentifyAck):
            self._observer.on_identified(command.name)
        elif isinstance(command, Break):
            # The server is the one leaving, so no BRK is written back
            logger.info("Server is leaving, closing connection")
            await self._close()
        else:
            logger.debug(f"Ignoring inbound command: {command!r}")

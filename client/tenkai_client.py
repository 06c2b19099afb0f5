"""High-level client for interacting with Tenkai servers."""

from typing import Optional

from protocol.commands import Break, Identify
from protocol.constants import DEFAULT_PORT, READ_BUFFER_SIZE
from protocol.identity import validate_identity
from client.connection import Callback, ConnectionManager, ConnectionState
from client.dispatcher import CommandDispatcher
from client.observer import ClientObserver
from client.transfer import FileReader, FileTransfer, PathLike
from config.settings import ClientConfig
from utils.logging import get_logger
from utils.exceptions import ReadFailure, TenkaiError

logger = get_logger(__name__)


class TenkaiClient:
    """
    Client session with a Tenkai server.

    Typical use is connect, identify, any number of file sends, then
    leave. The session can also be driven with ``async with``, which
    connects on entry and leaves on exit.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        observer: Optional[ClientObserver] = None,
        read_file: Optional[FileReader] = None,
        connect_timeout: Optional[float] = None,
        read_buffer_size: int = READ_BUFFER_SIZE,
    ):
        """
        Initialize a client bound to a server address.

        Args:
            host: Local IP or hostname of the server
            port: Server port
            observer: Receives connection events (logging observer by default)
            read_file: Filesystem reader used for file sends
            connect_timeout: Seconds to wait for connect; None waits forever
            read_buffer_size: Bytes requested per transport read
        """
        self.host = host
        self.port = port
        self._observer = observer or ClientObserver()
        self._connection = ConnectionManager(
            host,
            port,
            observer=self._observer,
            connect_timeout=connect_timeout,
            read_buffer_size=read_buffer_size,
        )
        self._dispatcher = CommandDispatcher(self._connection.close, self._observer)
        self._connection.on_line(self._dispatcher.dispatch_line)
        self._transfer = FileTransfer(read_file)
        self._leaving = False

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> 'TenkaiClient':
        """Build a client from a validated ClientConfig."""
        return cls(
            config.host,
            config.port,
            connect_timeout=config.connect_timeout,
            read_buffer_size=config.read_buffer_size,
            **kwargs,
        )

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def closed(self) -> bool:
        return self._connection.closed

    async def connect(self, on_connected: Optional[Callback] = None) -> None:
        """
        Connect to the server.

        Args:
            on_connected: Invoked once the connection is established

        Raises:
            ConnectFailure: If the connection could not be established
        """
        await self._connection.connect(on_connected)

    async def identify(self, name: Optional[str] = None) -> str:
        """
        Tell the server what kind of client this is.

        Similar to a user agent in HTTP. Validation happens before
        anything is written.

        Args:
            name: Client name without whitespace; defaults to TenkaiClientNode

        Returns:
            Identity that was sent

        Raises:
            InvalidIdentityError: If the name contains whitespace
            NotConnectedError: If the client is not connected
        """
        identity = validate_identity(name)
        logger.info(f"Identifying as {identity}")
        await self._connection.send(Identify(name=identity))
        return identity

    async def send_file(self, file_path: PathLike) -> str:
        """
        Send a local file to the server.

        If the file cannot be read the client leaves the session before
        the error is raised, so the server is not left waiting.

        Args:
            file_path: Path of the file to send

        Returns:
            File name as transmitted

        Raises:
            ReadFailure: If the file could not be read
            NotConnectedError: If the client is not connected
        """
        logger.info(f"Sending {file_path}...")
        try:
            command = await self._transfer.prepare(file_path)
        except ReadFailure as e:
            logger.error(str(e))
            await self.leave()
            raise

        await self._connection.send(command)
        logger.info(f"Sent {command.file_name}.")
        return command.file_name

    async def leave(self) -> None:
        """
        Tell the server we are leaving, then release the socket.

        Does nothing if the connection is already closed or a leave is
        under way. Errors while writing the Break are logged, not raised.
        """
        if self._leaving or self._connection.closed:
            return
        self._leaving = True

        logger.info("Left.")

        if self._connection.state is not ConnectionState.CONNECTED:
            await self._connection.close()
            return

        try:
            await self._connection.send_with_ack(Break(), self._on_break_flushed)
        except TenkaiError as e:
            logger.error(f"While leaving: {e}")
        finally:
            await self._connection.close()

    async def _on_break_flushed(self) -> None:
        logger.info("Socket destroyed because we left.")
        await self._connection.close()

    async def __aenter__(self) -> 'TenkaiClient':
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.leave()

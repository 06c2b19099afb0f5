"""TCP connection owner and its lifecycle state machine."""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union
import asyncio
import inspect

from protocol.codec import encode_command
from protocol.commands import Command
from protocol.constants import DEFAULT_PORT, READ_BUFFER_SIZE, WIRE_ENCODING
from protocol.framing import LineBuffer
from client.observer import ClientObserver
from utils.logging import get_logger
from utils.exceptions import (
    ConnectFailure,
    ConnectionStateError,
    NotConnectedError,
    SendFailure,
    SendInProgressError,
)

logger = get_logger(__name__)

Callback = Callable[..., Union[Any, Awaitable[Any]]]


async def _invoke(callback: Callback, *args: Any) -> None:
    """Call a sync or async callback and await it if needed."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class ConnectionState(Enum):
    """Lifecycle states of the connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class ConnectionManager:
    """
    Sole owner of the TCP stream to the server.

    Drives the DISCONNECTED -> CONNECTING -> CONNECTED -> CLOSED state
    machine, writes encoded commands and hands every complete inbound
    line to the registered line handler in arrival order. CLOSED is
    terminal; nothing leaves it.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        observer: Optional[ClientObserver] = None,
        connect_timeout: Optional[float] = None,
        read_buffer_size: int = READ_BUFFER_SIZE,
    ):
        """
        Initialize an unconnected connection.

        Args:
            host: Server address
            port: Server port
            observer: Receives lifecycle events (logging observer by default)
            connect_timeout: Seconds to wait for connect; None waits forever
            read_buffer_size: Bytes requested per transport read
        """
        self.host = host
        self.port = port
        self._observer = observer or ClientObserver()
        self._connect_timeout = connect_timeout
        self._read_buffer_size = read_buffer_size

        self._state = ConnectionState.DISCONNECTED
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._line_handler: Optional[Callback] = None
        self._line_buffer = LineBuffer()
        self._send_in_progress = False

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    def on_line(self, handler: Callback) -> None:
        """
        Register the callback invoked once per complete inbound line.

        Args:
            handler: Sync or async callable taking the line as a str
        """
        self._line_handler = handler

    async def connect(self, on_connected: Optional[Callback] = None) -> None:
        """
        Open the connection to the server.

        Args:
            on_connected: Invoked exactly once after the connection is established

        Raises:
            ConnectionStateError: If connect was already called
            ConnectFailure: If the socket could not be opened
        """
        if self._state is not ConnectionState.DISCONNECTED:
            raise ConnectionStateError(
                f"Cannot connect: connection is {self._state.value}"
            )

        logger.info(f"Connecting to: {self.host}:{self.port}")
        self._state = ConnectionState.CONNECTING

        try:
            opening = asyncio.open_connection(self.host, self.port)
            if self._connect_timeout is not None:
                reader, writer = await asyncio.wait_for(opening, self._connect_timeout)
            else:
                reader, writer = await opening
        except Exception as e:
            # Includes UnicodeError from IDNA encoding of a malformed host
            self._observer.on_error(e)
            await self.close()
            raise ConnectFailure(f"Failed to connect to {self.host}:{self.port}: {e}") from e
        except BaseException:
            # Cancelled while connecting
            await self.close()
            raise

        if self._state is ConnectionState.CLOSED:
            # close() won the race against the pending connect
            writer.close()
            raise ConnectFailure(f"Connection to {self.host}:{self.port} closed while connecting")

        self._reader = reader
        self._writer = writer
        self._state = ConnectionState.CONNECTED
        self._reader_task = asyncio.create_task(self._read_loop())

        self._observer.on_connected(self.host, self.port)
        if on_connected is not None:
            await _invoke(on_connected)

    async def send(self, command: Command) -> None:
        """
        Encode and write a command.

        Args:
            command: Command to send

        Raises:
            NotConnectedError: If the connection is not CONNECTED
            SendInProgressError: If another send is still outstanding
            SendFailure: If the transport rejected the write
        """
        await self._write(command)

    async def send_with_ack(self, command: Command, on_flushed: Callback) -> None:
        """
        Write a command and invoke a callback once it is flushed.

        Used for the terminal Break so the socket is released only after
        the bytes reached the transport.

        Args:
            command: Command to send
            on_flushed: Sync or async callable invoked after the drain
        """
        await self._write(command)
        await _invoke(on_flushed)

    async def close(self) -> None:
        """
        Release the socket and enter the CLOSED state.

        This method is idempotent, can be called multiple times safely
        and never raises.
        """
        if self._state is ConnectionState.CLOSED:
            return

        self._state = ConnectionState.CLOSED
        writer = self._writer
        task = self._reader_task
        self._writer = None
        self._reader = None
        self._reader_task = None

        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except Exception as e:
                logger.debug(f"Ignoring error while releasing socket: {e}")

        logger.debug(f"Connection to {self.host}:{self.port} released")
        self._observer.on_closed()

    async def _write(self, command: Command) -> None:
        if self._state is not ConnectionState.CONNECTED:
            raise NotConnectedError(
                f"Cannot send {type(command).__name__}: connection is {self._state.value}"
            )
        if self._send_in_progress:
            raise SendInProgressError(
                f"Cannot send {type(command).__name__}: another send is outstanding"
            )

        data = encode_command(command).encode(WIRE_ENCODING)
        self._send_in_progress = True
        try:
            self._writer.write(data)
            await self._writer.drain()
            logger.debug(f"Sent {type(command).__name__} ({len(data)} bytes)")
        except OSError as e:
            self._observer.on_error(e)
            await self.close()
            raise SendFailure(f"Error sending {type(command).__name__}: {e}") from e
        finally:
            self._send_in_progress = False

    async def _read_loop(self) -> None:
        """Read from the transport until EOF, error or close."""
        reader = self._reader
        try:
            while True:
                data = await reader.read(self._read_buffer_size)
                if not data:
                    logger.debug("Server closed the connection")
                    for line in self._line_buffer.flush():
                        await self._deliver(line)
                    break

                logger.debug(f"Got data: {len(data)} bytes")
                for line in self._line_buffer.feed(data):
                    await self._deliver(line)
                    if self._state is ConnectionState.CLOSED:
                        return
        except OSError as e:
            self._observer.on_error(e)

        await self.close()

    async def _deliver(self, line: str) -> None:
        if self._line_handler is None:
            logger.debug(f"No line handler registered, dropping: {line!r}")
            return
        try:
            await _invoke(self._line_handler, line)
        except Exception:
            logger.error("Error handling inbound line", exc_info=True)

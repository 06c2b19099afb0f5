"""Observer interface for connection lifecycle events."""

from utils.logging import get_logger

logger = get_logger(__name__)


class ClientObserver:
    """
    Receives notifications about the client connection.

    The default implementation writes every event to the log.
    Subclass and override to route events elsewhere.
    """

    def on_connected(self, host: str, port: int) -> None:
        logger.info(f"Connected to server {host}:{port}.")

    def on_identified(self, name: str) -> None:
        logger.info(f"Server identified as: {name}")

    def on_error(self, error: BaseException) -> None:
        logger.error(f"Socket error: {error}")

    def on_closed(self) -> None:
        logger.warning("Socket close: Connection was closed.")

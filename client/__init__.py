"""Client components: connection, dispatching, file transfer and the session facade."""

from client.observer import ClientObserver
from client.connection import ConnectionManager, ConnectionState
from client.dispatcher import CommandDispatcher
from client.transfer import FileTransfer, read_file_bytes
from client.tenkai_client import TenkaiClient

__all__ = [
    'ClientObserver',
    'ConnectionManager',
    'ConnectionState',
    'CommandDispatcher',
    'FileTransfer',
    'read_file_bytes',
    'TenkaiClient',
]

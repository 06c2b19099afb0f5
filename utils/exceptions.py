"""Custom exception classes for the Tenkai client."""


class TenkaiError(Exception):
    """Base exception class for all client errors."""
    pass


class ConnectFailure(TenkaiError):
    """Exception raised when the connection to the server cannot be established."""
    pass


class ConnectionStateError(TenkaiError):
    """Exception raised when an operation is not valid in the current connection state."""
    pass


class NotConnectedError(ConnectionStateError):
    """Exception raised when attempting to send on a connection that is not connected."""
    pass


class SendInProgressError(ConnectionStateError):
    """Exception raised when a send is attempted while another one is outstanding."""
    pass


class SendFailure(TenkaiError):
    """Exception raised when writing to the transport fails."""
    pass


class ReadFailure(TenkaiError):
    """Exception raised when a local file cannot be read for transfer."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Error reading {path}: {cause}")
        self.path = path
        self.cause = cause


class InvalidIdentityError(TenkaiError, ValueError):
    """Exception raised when a client identity contains disallowed characters."""
    pass


class PayloadDecodeError(TenkaiError):
    """Exception raised when a file payload is not valid base64."""
    pass


class ConfigurationError(TenkaiError):
    """Exception raised when configuration is invalid or missing."""
    pass

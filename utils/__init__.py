"""Utility modules for logging and exception handling."""

from utils.logging import setup_logging, get_logger
from utils.exceptions import (
    TenkaiError,
    ConnectFailure,
    ConnectionStateError,
    NotConnectedError,
    SendInProgressError,
    SendFailure,
    ReadFailure,
    InvalidIdentityError,
    PayloadDecodeError,
    ConfigurationError,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'TenkaiError',
    'ConnectFailure',
    'ConnectionStateError',
    'NotConnectedError',
    'SendInProgressError',
    'SendFailure',
    'ReadFailure',
    'InvalidIdentityError',
    'PayloadDecodeError',
    'ConfigurationError',
]

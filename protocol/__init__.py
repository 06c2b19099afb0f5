"""Protocol module for command definitions, line encoding and framing."""

from protocol.constants import (
    DEFAULT_IDENTITY,
    DEFAULT_PORT,
    LINE_TERMINATOR,
    UNKNOWN_IDENTITY,
)
from protocol.commands import (
    Break,
    Command,
    CommandKind,
    File,
    Identify,
    IdentifyAck,
    Unknown,
)
from protocol.encoding import encode_payload, decode_payload
from protocol.codec import encode_command, decode_command
from protocol.identity import validate_identity
from protocol.framing import LineBuffer

__all__ = [
    'DEFAULT_IDENTITY',
    'DEFAULT_PORT',
    'LINE_TERMINATOR',
    'UNKNOWN_IDENTITY',
    'Break',
    'Command',
    'CommandKind',
    'File',
    'Identify',
    'IdentifyAck',
    'Unknown',
    'encode_payload',
    'decode_payload',
    'encode_command',
    'decode_command',
    'LineBuffer',
    'validate_identity',
]

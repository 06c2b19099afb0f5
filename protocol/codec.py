"""Translation between command values and wire lines."""

from protocol.commands import (
    Break,
    Command,
    CommandKind,
    File,
    Identify,
    IdentifyAck,
    Unknown,
)
from protocol.constants import DELIMITER, LINE_TERMINATOR, UNKNOWN_IDENTITY
from protocol.encoding import decode_payload, encode_payload
from utils.exceptions import PayloadDecodeError


def encode_command(command: Command) -> str:
    """
    Encode a command into a single newline-terminated line.

    No escaping is performed. Names containing the delimiter or the
    terminator produce a corrupt frame; callers validate them first.

    Args:
        command: Command to encode

    Returns:
        Wire line including the terminator

    Raises:
        TypeError: If the command cannot be sent (e.g. Unknown)
    """
    if isinstance(command, Identify):
        tokens = [CommandKind.IDENTIFY.value, command.name]
    elif isinstance(command, IdentifyAck):
        tokens = [CommandKind.IDENTIFY_ACK.value, command.name]
    elif isinstance(command, Break):
        tokens = [CommandKind.BREAK.value]
    elif isinstance(command, File):
        tokens = [CommandKind.FILE.value, encode_payload(command.payload), command.file_name]
    else:
        raise TypeError(f"Cannot encode command: {command!r}")

    return DELIMITER.join(tokens) + LINE_TERMINATOR


def decode_command(raw_line: str) -> Command:
    """
    Parse one inbound line into a command.

    Never raises: empty, malformed or unrecognised input becomes Unknown.

    Args:
        raw_line: Line with or without its terminator

    Returns:
        Decoded command
    """
    tokens = raw_line.split()
    if not tokens:
        return Unknown(raw=raw_line)

    cmd = tokens[0]

    if cmd == CommandKind.IDENTIFY_ACK.value:
        return IdentifyAck(name=tokens[1] if len(tokens) > 1 else UNKNOWN_IDENTITY)

    if cmd == CommandKind.BREAK.value:
        return Break()

    if cmd == CommandKind.IDENTIFY.value and len(tokens) > 1:
        return Identify(name=tokens[1])

    if cmd == CommandKind.FILE.value:
        # Exact split keeps the empty payload token of an empty file
        fields = raw_line.strip().split(DELIMITER)
        if len(fields) < 3 or not fields[2]:
            return Unknown(raw=raw_line)
        try:
            payload = decode_payload(fields[1])
        except PayloadDecodeError:
            return Unknown(raw=raw_line)
        return File(payload=payload, file_name=fields[2])

    return Unknown(raw=raw_line)

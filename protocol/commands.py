"""Protocol command definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from protocol.constants import UNKNOWN_IDENTITY


class CommandKind(str, Enum):
    """Leading wire token of each protocol command."""

    IDENTIFY = "IDN"            # Client declares its identity
    IDENTIFY_ACK = "IDNH"       # Server confirms the identity
    BREAK = "BRK"               # Sender is leaving the session
    FILE = "FIL"                # Client delivers a complete file


@dataclass(frozen=True)
class Identify:
    """Client identity declaration."""

    name: str
    kind: CommandKind = field(default=CommandKind.IDENTIFY, init=False, repr=False)


@dataclass(frozen=True)
class IdentifyAck:
    """Server acknowledgment of an identity."""

    name: str = UNKNOWN_IDENTITY
    kind: CommandKind = field(default=CommandKind.IDENTIFY_ACK, init=False, repr=False)


@dataclass(frozen=True)
class Break:
    """Session termination notice."""

    kind: CommandKind = field(default=CommandKind.BREAK, init=False, repr=False)


@dataclass(frozen=True)
class File:
    """A complete file carried in a single frame."""

    payload: bytes
    file_name: str
    kind: CommandKind = field(default=CommandKind.FILE, init=False, repr=False)

    def __repr__(self) -> str:
        return f"File(file_name={self.file_name!r}, size={len(self.payload)})"


@dataclass(frozen=True)
class Unknown:
    """Inbound line that did not match any known command."""

    raw: str


Command = Union[Identify, IdentifyAck, Break, File, Unknown]

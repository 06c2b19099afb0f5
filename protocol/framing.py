"""Reassembly of transport chunks into protocol lines."""

from typing import List

from protocol.constants import LINE_TERMINATOR, WIRE_ENCODING

_TERMINATOR = LINE_TERMINATOR.encode(WIRE_ENCODING)


class LineBuffer:
    """
    Accumulates raw bytes and yields complete lines.

    The transport may split one line across several reads or merge
    several lines into one read; only terminated lines are emitted.
    """

    def __init__(self):
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> List[str]:
        """
        Append a chunk and return every line it completes.

        Args:
            chunk: Bytes as delivered by the transport

        Returns:
            Complete lines in arrival order, without terminators
        """
        self._buffer.extend(chunk)
        lines = []
        while True:
            index = self._buffer.find(_TERMINATOR)
            if index < 0:
                break
            raw = bytes(self._buffer[:index])
            del self._buffer[:index + len(_TERMINATOR)]
            lines.append(self._decode(raw))
        return lines

    def flush(self) -> List[str]:
        """Return the unterminated tail, if any, and reset the buffer."""
        if not self._buffer:
            return []
        raw = bytes(self._buffer)
        self._buffer.clear()
        return [self._decode(raw)]

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet emitted as a line."""
        return len(self._buffer)

    @staticmethod
    def _decode(raw: bytes) -> str:
        return raw.decode(WIRE_ENCODING, errors='replace').rstrip('\r')

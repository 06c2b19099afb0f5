"""Protocol constants for the Tenkai line protocol.

These are protocol-level constants that should not be changed
without updating both client and server implementations.
"""

# Well-known port of a Tenkai server
DEFAULT_PORT = 4989

# Identity presented when the caller does not supply one
DEFAULT_IDENTITY = "TenkaiClientNode"

# Name reported when an identify acknowledgment carries no name
UNKNOWN_IDENTITY = "unknown"

# Token separator and line terminator of every frame
DELIMITER = " "
LINE_TERMINATOR = "\n"

# Text encoding of frames on the wire
WIRE_ENCODING = "utf-8"

# Bytes requested from the transport per read
READ_BUFFER_SIZE = 4096

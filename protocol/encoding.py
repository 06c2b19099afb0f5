"""Payload encoding and decoding functions."""

import base64
import binascii

from utils.exceptions import PayloadDecodeError


def encode_payload(data: bytes) -> str:
    """
    Encode file bytes to a text-safe token for transmission.

    Base64 output never contains the frame delimiter or terminator,
    so the token can be embedded in a single protocol line.
    """
    return base64.b64encode(data).decode('ascii')


def decode_payload(text: str) -> bytes:
    """
    Decode a payload token back to the original bytes.

    Raises:
        PayloadDecodeError: If the token is not valid base64
    """
    try:
        return base64.b64decode(text.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise PayloadDecodeError(f"Invalid payload encoding: {e}") from e

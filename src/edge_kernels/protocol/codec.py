"""
Frame Codec
===========

Decodes hex-encoded Modbus-RTU frames and encodes them back.

This is the ONLY place in the codebase that turns untrusted hex into
frame bytes.

Design Rules:
    - Structural problems (bad hex, too short) raise DecodeError
    - A CRC mismatch is NOT an error: it yields crc_valid=False so that
      callers can observe corrupted frames instead of only rejecting them
    - No logging, no retries
"""

import string
from typing import Optional

from edge_kernels.errors import EdgeKernelError
from edge_kernels.models.frame import Frame
from edge_kernels.protocol.checksum import checksum16


# address + function + 2 CRC bytes
MIN_FRAME_LENGTH = 4

_HEX_DIGITS = frozenset(string.hexdigits)


class DecodeError(EdgeKernelError):
    """Raised when input cannot be decoded into a frame."""
    pass


class MalformedHex(DecodeError):
    """Raised when the input is not an even-length run of hex digit pairs."""

    def __init__(self, offset: int, reason: Optional[str] = None) -> None:
        self.offset = offset
        super().__init__(reason or f"invalid hex at position {offset}")


class FrameTooShort(DecodeError):
    """Raised when fewer than MIN_FRAME_LENGTH bytes were decoded."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(
            f"frame too short: {length} bytes (min {MIN_FRAME_LENGTH} bytes)"
        )


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Strictly decode a hex string.

    Unlike bytes.fromhex, whitespace is rejected, and the error names the
    character offset of the offending pair.

    Args:
        hex_string: Even-length string of hex digits (either case)

    Returns:
        Decoded bytes

    Raises:
        MalformedHex: On odd length or a non-hex pair
    """
    if len(hex_string) % 2 != 0:
        raise MalformedHex(
            len(hex_string) - 1,
            "hex string must have even length",
        )

    for offset in range(0, len(hex_string), 2):
        pair = hex_string[offset:offset + 2]
        if pair[0] not in _HEX_DIGITS or pair[1] not in _HEX_DIGITS:
            raise MalformedHex(offset)

    return bytes.fromhex(hex_string)


def decode_frame(hex_string: str) -> Frame:
    """
    Decode a hex-encoded Modbus-RTU frame.

    Args:
        hex_string: Frame as hex, e.g. "01030000000AC5CD"

    Returns:
        Frame with crc_valid reporting the checksum comparison

    Raises:
        MalformedHex: If the input is not valid hex
        FrameTooShort: If fewer than 4 bytes were decoded
    """
    raw = hex_to_bytes(hex_string)

    if len(raw) < MIN_FRAME_LENGTH:
        raise FrameTooShort(len(raw))

    declared_crc = int.from_bytes(raw[-2:], "little")
    computed_crc = checksum16(raw[:-2])

    return Frame(
        device_id=raw[0],
        function_code=raw[1],
        data=raw[2:-2],
        crc_valid=declared_crc == computed_crc,
    )


def encode_frame(device_id: int, function_code: int, data: bytes = b"") -> str:
    """
    Build a hex-encoded frame with a correct CRC appended.

    Args:
        device_id: Slave address (0-255)
        function_code: Function byte (0-255)
        data: Payload bytes

    Returns:
        Uppercase hex string

    Raises:
        ValueError: If device_id or function_code does not fit in a byte
    """
    for name, value in (("device_id", device_id), ("function_code", function_code)):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"{name} must be in 0..255, got {value}")

    body = bytes([device_id, function_code]) + bytes(data)
    crc = checksum16(body)

    return (body + crc.to_bytes(2, "little")).hex().upper()

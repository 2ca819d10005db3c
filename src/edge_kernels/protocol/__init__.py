"""
Protocol Module
===============

Modbus-RTU frame handling.

Components:
    - checksum16: CRC-16 (poly 0xA001, seed 0xFFFF)
    - decode_frame: Hex string -> Frame, with CRC verification
    - encode_frame: Address/function/data -> hex string with CRC

Example:
    from edge_kernels.protocol import decode_frame

    frame = decode_frame("01030000000AC5CD")
    assert frame.crc_valid
"""

from edge_kernels.protocol.checksum import checksum16
from edge_kernels.protocol.codec import (
    DecodeError,
    FrameTooShort,
    MalformedHex,
    decode_frame,
    encode_frame,
    hex_to_bytes,
)

__all__ = [
    "checksum16",
    "decode_frame",
    "encode_frame",
    "hex_to_bytes",
    "DecodeError",
    "MalformedHex",
    "FrameTooShort",
]

"""
Frame Data Model
================

Decoded representation of a Modbus-RTU frame.

Wire layout:
    [address: 1 byte][function: 1 byte][data: N bytes][crc: 2 bytes, LE]

Design Rules:
    - A Frame only exists for structurally valid input (>= 4 bytes)
    - A checksum mismatch is carried as crc_valid=False, never raised
    - Immutable once constructed
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# Set on the function byte of a Modbus exception response
EXCEPTION_FLAG = 0x80


class FunctionCode(IntEnum):
    """
    Standard Modbus public function codes.

    Codes outside this set are still decoded; they simply have no name.
    """

    READ_COILS = 1
    READ_DISCRETE_INPUTS = 2
    READ_HOLDING_REGISTERS = 3
    READ_INPUT_REGISTERS = 4
    WRITE_SINGLE_COIL = 5
    WRITE_SINGLE_REGISTER = 6
    WRITE_MULTIPLE_COILS = 15
    WRITE_MULTIPLE_REGISTERS = 16


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Decoded Modbus-RTU frame.

    Attributes:
        device_id: Slave address (byte 0)
        function_code: Raw function byte (byte 1), exception flag included
        data: Payload between the function byte and the checksum
        crc_valid: Whether the trailing CRC matches the computed one
    """

    device_id: int
    function_code: int
    data: bytes
    crc_valid: bool

    @property
    def is_exception(self) -> bool:
        """True for exception responses (high bit of the function byte)."""
        return bool(self.function_code & EXCEPTION_FLAG)

    @property
    def function(self) -> Optional[FunctionCode]:
        """Known function code, ignoring the exception flag."""
        try:
            return FunctionCode(self.function_code & ~EXCEPTION_FLAG)
        except ValueError:
            return None

    @property
    def function_name(self) -> Optional[str]:
        function = self.function
        if function is None:
            return None
        if self.is_exception:
            return f"{function.name}_EXCEPTION"
        return function.name

    def __repr__(self) -> str:
        return (
            f"Frame(device_id={self.device_id}, "
            f"function_code={self.function_code}, "
            f"data={self.data.hex().upper() or '-'}, "
            f"crc_valid={self.crc_valid})"
        )

    def to_dict(self) -> dict:
        """Export as dictionary for JSON serialization."""
        return {
            "device_id": self.device_id,
            "function_code": self.function_code,
            "function_name": self.function_name,
            "data": list(self.data),
            "crc_valid": self.crc_valid,
        }

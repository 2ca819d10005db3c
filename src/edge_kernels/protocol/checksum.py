"""
CRC-16 Checksum
===============

Modbus CRC-16: reflected polynomial 0xA001 (0x8005 bit-reversed),
seed 0xFFFF, no final XOR. The result goes on the wire little-endian.

Known vector:
    checksum16(bytes.fromhex("01030000000A")) == 0xCDC5  # wire: C5 CD
"""

CRC16_SEED = 0xFFFF
CRC16_POLY = 0xA001


def checksum16(data: bytes) -> int:
    """
    Compute the Modbus CRC-16 of `data`.

    Args:
        data: Bytes to checksum (any bytes-like object)

    Returns:
        16-bit checksum. Empty input returns the seed, 0xFFFF.
    """
    crc = CRC16_SEED

    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ CRC16_POLY
            else:
                crc >>= 1

    return crc

"""
Telemetry Module
================

Fault-tolerant processing of redundant sensor readings.

Components:
    - vote: 2-out-of-3 voting with a fixed pairwise tie-break order
    - InvalidReadingCount: Raised for anything but three readings
"""

from edge_kernels.telemetry.voter import (
    REQUIRED_READINGS,
    TOLERANCE,
    InvalidReadingCount,
    vote,
)

__all__ = [
    "vote",
    "InvalidReadingCount",
    "TOLERANCE",
    "REQUIRED_READINGS",
]

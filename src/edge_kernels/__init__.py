"""
Edge Kernels
============

Deterministic computation kernels for an edge-deployed demo platform.

This package provides three independent kernels behind a thin FastAPI layer.
Each kernel is a pure transformation of untrusted input; the HTTP layer only
validates, dispatches and serializes.

Components:
    - protocol: Modbus-RTU frame codec and CRC-16 checksum
    - telemetry: 2-out-of-3 redundant sensor voting
    - ratelimit: Fixed-window request counter over a key-value store

Example:
    from edge_kernels.protocol import decode_frame
    from edge_kernels.telemetry import vote

    frame = decode_frame("01030000000AC5CD")
    result = vote([23.5, 23.6, 99.9])

    # The HTTP service is started via the FastAPI application
    # See main.py for entry point
"""

__version__ = "0.1.0"
__author__ = "Edge Kernels Project"

__all__ = [
    "__version__",
]

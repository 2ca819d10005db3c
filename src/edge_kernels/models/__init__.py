"""
Data Models
===========

Result types for the kernels and schemas for the HTTP layer.

This module re-exports all data models for convenient access.

Models:
    Protocol:
        - Frame: Decoded Modbus-RTU frame
        - FunctionCode: Standard Modbus function codes

    Telemetry:
        - FaultStatus: Voting fault classification
        - VoteResult: Consensus, rejected readings and status

    Rate limiting:
        - RateCounter: Per-client record kept in the store
        - RateDecision: Admission decision with quota figures

    API:
        - ParseRequest, FrameResponse
        - VoteRequest, VoteResponse
        - ProtectedResponse, RateLimitedResponse, RateLimitStatus
"""

from edge_kernels.models.frame import Frame, FunctionCode
from edge_kernels.models.vote import FaultStatus, VoteResult
from edge_kernels.models.rate import RateCounter, RateDecision
from edge_kernels.models.api import (
    FrameResponse,
    ParseRequest,
    ProtectedResponse,
    RateLimitedResponse,
    RateLimitStatus,
    VoteRequest,
    VoteResponse,
)

__all__ = [
    # Protocol
    "Frame",
    "FunctionCode",
    # Telemetry
    "FaultStatus",
    "VoteResult",
    # Rate limiting
    "RateCounter",
    "RateDecision",
    # API
    "ParseRequest",
    "FrameResponse",
    "VoteRequest",
    "VoteResponse",
    "ProtectedResponse",
    "RateLimitedResponse",
    "RateLimitStatus",
]

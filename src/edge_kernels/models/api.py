"""
API Schemas
===========

Pydantic models for the HTTP request and response bodies.

Kernel results are dataclasses; these models only describe the JSON
contract at the service boundary.

Request Contracts:
    POST /api/parse  {"frame": "01030000000AC5CD"}
    POST /api/vote   {"readings": [23.5, 23.6, 99.9]}

Example:
    request = VoteRequest.model_validate_json(raw_body)
    result = vote(request.readings)
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from edge_kernels.models.vote import FaultStatus


class ParseRequest(BaseModel):
    """Body of a frame decode request."""

    frame: str = Field(
        ...,
        description="Hex-encoded Modbus-RTU frame including the CRC",
    )

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {"frame": "01030000000AC5CD"},
        }


class FrameResponse(BaseModel):
    """Decoded frame as returned by /api/parse."""

    device_id: int = Field(..., ge=0, le=255, description="Slave address")
    function_code: int = Field(..., ge=0, le=255, description="Raw function byte")
    function_name: Optional[str] = Field(
        default=None,
        description="Standard Modbus function name, if known",
    )
    data: List[int] = Field(..., description="Payload bytes")
    crc_valid: bool = Field(..., description="Whether the frame CRC matches")


class VoteRequest(BaseModel):
    """
    Body of a voting request.

    The length is checked by the voter, not here, so that a wrong count
    surfaces as the voter's own error.
    """

    readings: List[float] = Field(
        ...,
        description="Exactly three redundant sensor readings",
    )

    class Config:
        """Pydantic model configuration."""

        # NaN/inf cannot be serialized back into a JSON response
        allow_inf_nan = False
        json_schema_extra = {
            "example": {"readings": [23.5, 23.6, 99.9]},
        }


class VoteResponse(BaseModel):
    """Voting outcome as returned by /api/vote."""

    consensus: float = Field(..., description="Consensus value (0.0 if none)")
    rejected: List[float] = Field(..., description="Rejected readings")
    fault_status: FaultStatus = Field(..., description="Fault classification")


class ProtectedResponse(BaseModel):
    """Payload of the rate-limited demo resource."""

    message: str
    timestamp: int = Field(..., ge=0, description="UNIX seconds")


class RateLimitedResponse(BaseModel):
    """Body of a 429 response."""

    error: str = "Too Many Requests"
    retry_after_seconds: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)


class RateLimitStatus(BaseModel):
    """Quota view for a client, as returned by /api/status."""

    client_id: str = Field(..., description="Truncated client identifier")
    requests_made: int = Field(..., ge=0)
    requests_remaining: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
    reset_in_seconds: int = Field(..., ge=0)

"""
Edge Kernels Main Application
=============================

FastAPI entry point for the edge kernels service.

Each endpoint validates its input, invokes exactly one kernel and
serializes the result. Kernels never log; failures are logged here.

Endpoints:
    GET  /              - Service information
    GET  /health        - Liveness probe
    GET  /metrics       - Error counters and store metrics
    POST /api/parse     - Decode a Modbus-RTU frame
    POST /api/vote      - 2-out-of-3 sensor voting
    GET  /api/protected - Rate-limited demo resource
    GET  /api/status    - Rate limit status (does not consume quota)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from edge_kernels.config import settings
from edge_kernels.models.api import (
    FrameResponse,
    ParseRequest,
    ProtectedResponse,
    RateLimitedResponse,
    RateLimitStatus,
    VoteRequest,
    VoteResponse,
)
from edge_kernels.models.rate import RateDecision
from edge_kernels.protocol import DecodeError, decode_frame
from edge_kernels.ratelimit import (
    InMemoryKVStore,
    KVStore,
    StoreUnavailableError,
    WindowCounter,
)
from edge_kernels.telemetry import InvalidReadingCount, vote


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_store: Optional[KVStore] = None
_counter: Optional[WindowCounter] = None
_startup_time: float = 0.0

# Error counters
_input_error_count: int = 0
_store_error_count: int = 0


# =============================================================================
# Getters
# =============================================================================

def get_store() -> Optional[KVStore]:
    return _store

def get_counter() -> Optional[WindowCounter]:
    return _counter


# =============================================================================
# Helpers
# =============================================================================

def get_client_id(request: Request) -> str:
    """
    Identify the caller for rate limiting.

    Prefers the API key header, falls back to the peer address.
    """
    api_key = request.headers.get(settings.rate_limit.api_key_header)
    if api_key:
        return f"key:{api_key}"

    if request.client is not None and request.client.host:
        return f"ip:{request.client.host}"

    return "unknown"


def rate_limit_headers(decision: RateDecision) -> dict:
    """Build X-RateLimit-* headers for a decision."""
    return {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(decision.reset_in_seconds),
    }


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _store_unavailable(e: StoreUnavailableError) -> JSONResponse:
    global _store_error_count
    _store_error_count += 1
    logger.error(f"Rate limit store unavailable: {e}")
    return _error_response("rate limit store unavailable", 503)


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _store, _counter, _startup_time

    # Startup
    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")

    # Keep a store injected before startup (tests, alternative backends)
    if _store is None:
        _store = InMemoryKVStore()
    _counter = WindowCounter(store=_store, config=settings.rate_limit)

    logger.info(
        f"Rate limit: {settings.rate_limit.limit} requests / "
        f"{settings.rate_limit.window_seconds}s"
    )

    yield

    # Shutdown
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="EdgeKernels",
    description="Frame decoding, sensor voting and rate limiting at the edge",
    version=settings.service.version,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report schema errors without echoing the offending input back."""
    global _input_error_count
    _input_error_count += 1

    # The input may be NaN or inf, which a JSON response cannot carry
    detail = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    logger.warning(f"Request to {request.url.path} failed validation: {len(detail)} error(s)")
    return JSONResponse({"error": "invalid request body", "detail": detail}, status_code=422)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "EdgeKernels",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": "running",
        "endpoints": [
            "POST /api/parse",
            "POST /api/vote",
            "GET /api/protected",
            "GET /api/status",
        ],
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Error counters and store metrics."""
    store = get_store()
    store_metrics = store.metrics() if isinstance(store, InMemoryKVStore) else {}

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "input_errors": _input_error_count,
        "store_errors": _store_error_count,
        **{f"store_{k}": v for k, v in store_metrics.items()},
    })


@app.post("/api/parse")
async def parse(body: ParseRequest) -> JSONResponse:
    """Decode a hex-encoded Modbus-RTU frame."""
    global _input_error_count

    try:
        frame = decode_frame(body.frame)
    except DecodeError as e:
        _input_error_count += 1
        logger.warning(f"Frame decode failed: {e}")
        return _error_response(f"parse error: {e}", 400)

    response = FrameResponse.model_validate(frame.to_dict())
    return JSONResponse(response.model_dump(mode="json"))


@app.post("/api/vote")
async def vote_readings(body: VoteRequest) -> JSONResponse:
    """Run 2-out-of-3 voting over three readings."""
    global _input_error_count

    try:
        result = vote(body.readings)
    except InvalidReadingCount as e:
        _input_error_count += 1
        logger.warning(f"Vote rejected: {e}")
        return _error_response(str(e), 400)

    response = VoteResponse.model_validate(result.to_dict())
    return JSONResponse(response.model_dump(mode="json"))


@app.get("/api/protected")
async def protected(request: Request) -> JSONResponse:
    """Rate-limited demo resource."""
    counter = get_counter()
    if counter is None:
        return _error_response("service not ready", 503)

    client_id = get_client_id(request)

    try:
        decision = await counter.check_and_increment(client_id)
    except StoreUnavailableError as e:
        return _store_unavailable(e)

    headers = rate_limit_headers(decision)

    if not decision.admitted:
        logger.info(f"Rate limited {client_id}: {decision}")
        headers["Retry-After"] = str(decision.reset_in_seconds)
        body = RateLimitedResponse(
            retry_after_seconds=decision.reset_in_seconds,
            limit=decision.limit,
        )
        return JSONResponse(body.model_dump(mode="json"), status_code=429, headers=headers)

    body = ProtectedResponse(
        message="You have accessed the protected resource!",
        timestamp=decision.now,
    )
    return JSONResponse(body.model_dump(mode="json"), headers=headers)


@app.get("/api/status")
async def status(request: Request) -> JSONResponse:
    """Rate limit status for the caller, without consuming a request."""
    counter = get_counter()
    if counter is None:
        return _error_response("service not ready", 503)

    client_id = get_client_id(request)
    now = int(time.time())

    try:
        record = await counter.peek(client_id, now=now)
    except StoreUnavailableError as e:
        return _store_unavailable(e)

    snapshot = RateDecision(
        admitted=record.count < counter.config.limit,
        count=record.count,
        window_start=record.window_start,
        limit=counter.config.limit,
        window_seconds=counter.config.window_seconds,
        now=now,
    )

    body = RateLimitStatus(
        client_id=f"{client_id[:8]}...",
        requests_made=snapshot.count,
        requests_remaining=snapshot.remaining,
        limit=snapshot.limit,
        reset_in_seconds=snapshot.reset_in_seconds,
    )
    return JSONResponse(
        body.model_dump(mode="json"),
        headers={"Cache-Control": "public, max-age=2"},
    )


# =============================================================================
# Main Entry Point
# =============================================================================

def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "edge_kernels.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run()

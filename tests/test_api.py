"""
API Tests
=========

Tests for the FastAPI layer: request validation, error mapping,
JSON shapes and rate limit headers.
"""

import pytest

from edge_kernels.config import settings


class TestServiceEndpoints:
    """Tests for service information and health."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "EdgeKernels"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_metrics(self, client):
        client.post("/api/parse", json={"frame": "0103"})
        body = client.get("/metrics").json()
        assert body["input_errors"] >= 1
        assert "store_size" in body
        assert "store_evicted_count" in body


class TestParseEndpoint:
    """Tests for POST /api/parse."""

    def test_valid_frame(self, client, sample_frame_hex):
        response = client.post("/api/parse", json={"frame": sample_frame_hex})

        assert response.status_code == 200
        assert response.json() == {
            "device_id": 1,
            "function_code": 3,
            "function_name": "READ_HOLDING_REGISTERS",
            "data": [0, 0, 0, 10],
            "crc_valid": True,
        }

    def test_corrupted_frame_is_200(self, client):
        response = client.post("/api/parse", json={"frame": "01030000000A0000"})

        assert response.status_code == 200
        assert response.json()["crc_valid"] is False

    @pytest.mark.parametrize("frame", ["0103", "0A0", "ZZZZZZZZ"])
    def test_malformed_frames(self, client, frame):
        response = client.post("/api/parse", json={"frame": frame})

        assert response.status_code == 400
        assert response.json()["error"].startswith("parse error:")

    def test_missing_field(self, client):
        response = client.post("/api/parse", json={"data": "0103"})
        assert response.status_code == 422


class TestVoteEndpoint:
    """Tests for POST /api/vote."""

    def test_one_faulty(self, client):
        response = client.post("/api/vote", json={"readings": [23.5, 23.6, 99.9]})

        assert response.status_code == 200
        body = response.json()
        assert body["fault_status"] == "OneFaulty"
        assert body["rejected"] == [99.9]
        assert body["consensus"] == pytest.approx(23.55)

    def test_no_consensus(self, client):
        body = client.post("/api/vote", json={"readings": [10.0, 50.0, 90.0]}).json()

        assert body["fault_status"] == "NoConsensus"
        assert body["rejected"] == [10.0, 50.0, 90.0]
        assert body["consensus"] == 0.0

    @pytest.mark.parametrize("readings", [[], [1.0, 2.0], [1.0, 2.0, 3.0, 4.0]])
    def test_wrong_reading_count(self, client, readings):
        response = client.post("/api/vote", json={"readings": readings})

        assert response.status_code == 400
        assert "exactly 3 readings" in response.json()["error"]

    def test_non_numeric_readings(self, client):
        response = client.post("/api/vote", json={"readings": ["a", "b", "c"]})
        assert response.status_code == 422

    def test_readings_near_float_max(self, client):
        response = client.post("/api/vote", json={"readings": [1.7e308, 1.7e308, 1.7e308]})

        assert response.status_code == 200
        body = response.json()
        assert body["fault_status"] == "AllHealthy"
        assert body["consensus"] == pytest.approx(1.7e308)

    @pytest.mark.parametrize("raw", [
        '{"readings": [NaN, 1.0, 1.0]}',
        '{"readings": [1.0, Infinity, 1.0]}',
        '{"readings": [1.0, 1.0, -Infinity]}',
    ])
    def test_non_finite_readings(self, client, raw):
        response = client.post(
            "/api/vote",
            content=raw,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "invalid request body"
        assert body["detail"][0]["loc"][:2] == ["body", "readings"]


class TestRateLimitEndpoints:
    """Tests for /api/protected and /api/status."""

    def test_headers_on_admit(self, client):
        response = client.get("/api/protected", headers={"X-API-Key": "alpha"})

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == str(settings.rate_limit.limit)
        assert response.headers["X-RateLimit-Remaining"] == str(settings.rate_limit.limit - 1)
        assert "X-RateLimit-Reset" in response.headers
        assert response.json()["message"].startswith("You have accessed")

    def test_limit_exceeded(self, client):
        headers = {"X-API-Key": "bravo"}
        limit = settings.rate_limit.limit

        for _ in range(limit):
            assert client.get("/api/protected", headers=headers).status_code == 200

        response = client.get("/api/protected", headers=headers)
        assert response.status_code == 429
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert "Retry-After" in response.headers

        body = response.json()
        assert body["error"] == "Too Many Requests"
        assert body["limit"] == limit
        assert body["retry_after_seconds"] <= settings.rate_limit.window_seconds

    def test_api_keys_are_separate_clients(self, client):
        limit = settings.rate_limit.limit
        for _ in range(limit + 1):
            client.get("/api/protected", headers={"X-API-Key": "charlie"})

        response = client.get("/api/protected", headers={"X-API-Key": "delta"})
        assert response.status_code == 200

    def test_status_does_not_consume(self, client):
        headers = {"X-API-Key": "echo-client"}
        client.get("/api/protected", headers=headers)

        first = client.get("/api/status", headers=headers).json()
        second = client.get("/api/status", headers=headers).json()

        assert first["requests_made"] == 1
        assert second["requests_made"] == 1
        assert first["requests_remaining"] == settings.rate_limit.limit - 1
        assert first["client_id"] == "key:echo..."

    def test_status_without_api_key_uses_peer_address(self, client):
        body = client.get("/api/status").json()

        assert body["client_id"].startswith("ip:")
        assert body["requests_made"] == 0
        assert body["reset_in_seconds"] == settings.rate_limit.window_seconds

    def test_store_outage_is_503_not_429(self, broken_client):
        response = broken_client.get("/api/protected")

        assert response.status_code == 503
        assert response.json()["error"] == "rate limit store unavailable"

    def test_status_store_outage(self, broken_client):
        assert broken_client.get("/api/status").status_code == 503

    def test_other_kernels_unaffected_by_store_outage(self, broken_client):
        response = broken_client.post("/api/vote", json={"readings": [1.0, 1.0, 1.0]})
        assert response.status_code == 200


class TestRun:
    """Tests for the uvicorn entry point."""

    def test_uses_configured_port(self, monkeypatch):
        from edge_kernels import main

        calls = []
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append(kwargs))
        # Read once by load_config; a later change must not leak in
        monkeypatch.setenv("PORT", "1")

        main.run()

        assert calls[0]["port"] == settings.server.port
        assert calls[0]["host"] == settings.server.host

"""Tests for the Amadeus client: token caching, requests and error mapping."""

import aiohttp
import pytest
from unittest.mock import patch

from mcp_server_amadeus import config
from mcp_server_amadeus.client import (
    AmadeusClient,
    AmadeusNetworkError,
    AmadeusResponseError,
    AmadeusServiceError,
    clean_params,
    handle_error,
)

TOKEN = {"access_token": "tok-123", "expires_in": 1799}


class TestCleanParams:
    """Query parameter rendering."""

    def test_drops_none_and_renders_booleans(self):
        params = clean_params({"origin": "JFK", "maxPrice": None, "nonStop": True, "adults": 2})
        assert params == {"origin": "JFK", "nonStop": "true", "adults": "2"}

    def test_empty(self):
        assert clean_params(None) == {}


class TestHandleError:
    """Operation-prefixed error messages."""

    def test_server_error_means_search_too_generic(self):
        error = handle_error(AmadeusResponseError(500, {}), "Flight search")
        assert str(error).startswith("Flight search failed: Search too generic")

    def test_api_errors_are_joined(self):
        body = {
            "errors": [
                {"code": 477, "title": "INVALID FORMAT", "detail": "departureDate"},
                {"code": 32171, "title": "MANDATORY DATA MISSING"},
            ]
        }
        error = handle_error(AmadeusResponseError(400, body), "Flight search")
        assert str(error) == (
            "Flight search failed (400): 477: INVALID FORMAT - departureDate; "
            "32171: MANDATORY DATA MISSING - "
        )

    def test_message_field_used_when_no_errors(self):
        error = handle_error(AmadeusResponseError(401, {"error_description": "Invalid client"}), "Hotel search")
        assert str(error) == "Hotel search failed (401): Invalid client"

    def test_plain_exception(self):
        error = handle_error(ValueError("bad input"), "Location search")
        assert isinstance(error, AmadeusServiceError)
        assert str(error) == "Location search failed: bad input"

    def test_service_error_passes_through(self):
        original = AmadeusServiceError("Flight pricing failed: x")
        assert handle_error(original, "Other") is original


class TestAmadeusClient:
    """Token exchange and authenticated requests."""

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            AmadeusClient("", "secret")

    def test_unknown_environment_falls_back_to_test(self):
        client = AmadeusClient("id", "secret", environment="staging")
        assert client.base_url == "https://test.api.amadeus.com"

    @pytest.mark.asyncio
    async def test_token_is_cached_between_requests(self, fake_session, fake_response):
        session = fake_session(
            fake_response(200, TOKEN),
            fake_response(200, {"data": [{"id": "1"}]}),
            fake_response(200, {"data": [{"id": "2"}]}),
        )
        client = AmadeusClient("id", "secret")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            first = await client.get("/v1/reference-data/airlines", {"airlineCodes": "BA"})
            second = await client.get("/v1/reference-data/airlines", {"airlineCodes": "AA"})

        assert first["data"][0]["id"] == "1"
        assert second["data"][0]["id"] == "2"
        token_calls = [call for call in session.calls if call[1].endswith("/v1/security/oauth2/token")]
        assert len(token_calls) == 1
        method, url, kwargs = session.calls[1]
        assert method == "GET"
        assert url == "https://test.api.amadeus.com/v1/reference-data/airlines"
        assert kwargs["headers"]["Authorization"] == "Bearer tok-123"
        assert kwargs["params"] == {"airlineCodes": "BA"}

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, fake_session, fake_response):
        session = fake_session(fake_response(200, TOKEN), fake_response(201, {"data": {"id": "order-1"}}))
        client = AmadeusClient("id", "secret")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            response = await client.post("/v1/booking/flight-orders", {"data": {"type": "flight-order"}})

        assert response["data"]["id"] == "order-1"
        assert session.calls[1][2]["json"] == {"data": {"type": "flight-order"}}

    @pytest.mark.asyncio
    async def test_http_error_raises_response_error(self, fake_session, fake_response):
        session = fake_session(
            fake_response(200, TOKEN),
            fake_response(400, {"errors": [{"code": 477, "title": "INVALID FORMAT"}]}),
        )
        client = AmadeusClient("id", "secret")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            with pytest.raises(AmadeusResponseError) as exc_info:
                await client.get("/v2/shopping/flight-offers")

        assert exc_info.value.status == 400
        assert exc_info.value.errors[0]["code"] == 477

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, fake_session, fake_response):
        session = fake_session(fake_response(401, {"error": "invalid_client"}))
        client = AmadeusClient("id", "wrong")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            with pytest.raises(AmadeusResponseError) as exc_info:
                await client.get_access_token()

        assert exc_info.value.status == 401

    @pytest.mark.asyncio
    async def test_network_failure(self, fake_session, fake_response):
        session = fake_session(fake_response(200, TOKEN), aiohttp.ClientConnectionError("connection reset"))
        client = AmadeusClient("id", "secret")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            with pytest.raises(AmadeusNetworkError, match="Network error"):
                await client.get("/v1/shopping/flight-destinations")

    @pytest.mark.asyncio
    async def test_unparseable_body(self, fake_session, fake_response):
        session = fake_session(fake_response(200, TOKEN), fake_response(200, "<html>oops</html>"))
        client = AmadeusClient("id", "secret")

        with patch("mcp_server_amadeus.client.aiohttp.ClientSession", return_value=session):
            with pytest.raises(AmadeusNetworkError, match="Failed to parse response"):
                await client.get("/v1/shopping/flight-destinations")


class TestConfig:
    """Environment driven configuration."""

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("AMADEUS_CLIENT_ID", raising=False)
        monkeypatch.delenv("AMADEUS_CLIENT_SECRET", raising=False)
        with pytest.raises(ValueError, match="AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET"):
            config.get_amadeus_client()

    def test_client_is_shared(self, amadeus_env):
        assert config.get_amadeus_client() is config.get_amadeus_client()

    def test_environment_selection(self, monkeypatch):
        monkeypatch.delenv("AMADEUS_ENVIRONMENT", raising=False)
        monkeypatch.setenv("AMADEUS_ENV", "production")
        assert config.get_environment() == "production"
        monkeypatch.setenv("AMADEUS_ENVIRONMENT", "test")
        assert config.get_base_url() == "https://test.api.amadeus.com"

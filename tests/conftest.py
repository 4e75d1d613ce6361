"""Pytest configuration and fixtures for the Amadeus and Coralogix MCP tests."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from mcp_server_amadeus import config as amadeus_config
from mcp_server_coralogix import config as coralogix_config


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(self, status=200, body=None, content_type="application/json"):
        self.status = status
        if body is None:
            self._text = ""
        elif isinstance(body, str):
            self._text = body
        else:
            self._text = json.dumps(body)
        self.headers = {"Content-Type": content_type}

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stand-in for aiohttp.ClientSession that replays queued responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method, url, kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    """Factory: fake_session(response, ...) -> FakeSession."""
    def _make(*responses):
        return FakeSession(responses)
    return _make


@pytest.fixture(autouse=True)
def reset_clients():
    """Each test starts without a cached API client."""
    amadeus_config.reset_amadeus_client()
    coralogix_config.reset_coralogix_client()
    yield
    amadeus_config.reset_amadeus_client()
    coralogix_config.reset_coralogix_client()


@pytest.fixture
def amadeus_env(monkeypatch):
    monkeypatch.setenv("AMADEUS_CLIENT_ID", "test-client-id-123")
    monkeypatch.setenv("AMADEUS_CLIENT_SECRET", "test-secret")
    monkeypatch.delenv("AMADEUS_ENVIRONMENT", raising=False)
    monkeypatch.delenv("AMADEUS_ENV", raising=False)


@pytest.fixture
def coralogix_env(monkeypatch):
    monkeypatch.setenv("CORALOGIX_API_KEY", "cxtp_test_key")
    monkeypatch.setenv("CORALOGIX_DOMAIN", "eu2.coralogix.com")


@pytest.fixture
def mock_amadeus_client():
    """Amadeus client whose get/post return whatever the test configures."""
    client = MagicMock()
    client.get = AsyncMock(return_value={"data": []})
    client.post = AsyncMock(return_value={"data": {}})
    return client


@pytest.fixture
def mock_coralogix_client():
    """Coralogix client where every API method is an AsyncMock."""
    client = MagicMock()
    for name in (
        "query",
        "submit_background_query",
        "get_background_query_status",
        "get_background_query_data",
        "cancel_background_query",
        "get_data_usage",
        "get_quota_info",
        "get_daily_usage_tokens",
        "get_daily_usage_gbs",
        "get_daily_usage_units",
        "get_data_usage_export_status",
        "update_data_usage_export_status",
        "list_alert_defs",
        "list_alert_defs_with_filter",
        "create_alert_def",
        "get_alert_def",
        "get_alert_def_by_version_id",
        "update_alert_def",
        "delete_alert_def",
        "set_alert_def_active",
        "download_alerts",
        "get_alert_event",
        "get_alert_events_statistics",
        "get_dashboard_catalog",
        "create_dashboard",
        "get_dashboard",
        "update_dashboard",
        "delete_dashboard",
        "get_target",
        "set_target",
        "validate_target",
        "list_enrichments",
        "get_enrichment_limits",
        "get_enrichment_settings",
        "list_custom_enrichments",
        "create_custom_enrichment",
        "update_custom_enrichment",
        "delete_custom_enrichment",
        "list_rule_groups",
        "get_rule_group",
        "get_rule_group_limits",
        "create_rule_group",
        "update_rule_group",
        "delete_rule_group",
        "set_rule_group_active",
        "list_events2metrics",
        "get_events2metrics",
        "get_events2metrics_limits",
        "get_events2metrics_cardinality",
    ):
        setattr(client, name, AsyncMock(return_value={}))
    return client


@pytest.fixture
def sample_flight_offer():
    """One round-trip flight offer as returned by /v2/shopping/flight-offers."""
    return {
        "id": "1",
        "numberOfBookableSeats": 4,
        "lastTicketingDate": "2025-12-01",
        "itineraries": [
            {
                "duration": "PT6H15M",
                "segments": [
                    {
                        "carrierCode": "BA",
                        "number": "178",
                        "departure": {"iataCode": "JFK", "at": "2025-12-10T19:30:00"},
                        "arrival": {"iataCode": "LHR", "at": "2025-12-11T07:45:00"},
                    }
                ],
            },
            {
                "duration": "PT7H20M",
                "segments": [
                    {
                        "carrierCode": "BA",
                        "number": "177",
                        "departure": {"iataCode": "LHR", "at": "2025-12-17T10:00:00"},
                        "arrival": {"iataCode": "JFK", "at": "2025-12-17T13:20:00"},
                    }
                ],
            },
        ],
        "price": {"currency": "USD", "total": "1234.50", "base": "900.00", "grandTotal": "1234.50"},
        "travelerPricings": [
            {
                "travelerId": "1",
                "fareDetailsBySegment": [{"segmentId": "1", "cabin": "PREMIUM_ECONOMY"}],
            }
        ],
    }


@pytest.fixture
def sample_alert_defs():
    """Alert definitions as returned by the alert-defs list endpoint."""
    return {
        "alertDefs": [
            {
                "id": "alert-1",
                "createdTime": "2024-05-01T10:00:00Z",
                "alertDefProperties": {
                    "name": "High error rate",
                    "enabled": True,
                    "priority": "ALERT_DEF_PRIORITY_P1",
                    "type": "ALERT_DEF_TYPE_LOGS_THRESHOLD",
                    "groupByKeys": ["applicationName"],
                },
            },
            {
                "id": "alert-2",
                "alertDefProperties": {
                    "name": "Slow checkout",
                    "enabled": False,
                    "priority": "ALERT_DEF_PRIORITY_P3",
                    "type": "ALERT_DEF_TYPE_TRACING_THRESHOLD",
                },
            },
        ]
    }

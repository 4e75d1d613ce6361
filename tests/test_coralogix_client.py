"""Tests for the Coralogix client: domains, response decoding and HTTP error messages."""

import aiohttp
import pytest
from unittest.mock import patch

from mcp_server_coralogix import config
from mcp_server_coralogix.client import (
    CoralogixAPIError,
    CoralogixClient,
    describe_http_error,
    merge_blocks,
    parse_body,
    parse_ndjson,
    resolve_base_url,
)


def patched_session(session):
    return patch("mcp_server_coralogix.client.aiohttp.ClientSession", return_value=session)


class TestDomains:
    """Regional API hosts."""

    @pytest.mark.parametrize(
        "domain, base_url",
        [
            ("coralogix.com", "https://api.coralogix.com"),
            ("eu2.coralogix.com", "https://api.eu2.coralogix.com"),
            ("coralogixsg.com", "https://api.coralogixsg.com"),
            ("ap3.coralogix.com", "https://api.ap3.coralogix.com"),
        ],
    )
    def test_supported_domains(self, domain, base_url):
        assert resolve_base_url(domain) == base_url

    def test_unsupported_domain_lists_choices(self):
        with pytest.raises(ValueError, match="Unsupported Coralogix domain: example.com. Supported domains: coralogix.com"):
            resolve_base_url("example.com")


class TestResponseDecoding:
    """JSON and NDJSON bodies."""

    def test_parse_ndjson_skips_blank_lines(self):
        records = parse_ndjson('{"queryId": {"queryId": "q1"}}\n\n{"result": {"results": []}}\n')
        assert records == [{"queryId": {"queryId": "q1"}}, {"result": {"results": []}}]

    def test_ndjson_detected_by_content_type(self):
        assert parse_body("application/x-ndjson", '{"a": 1}') == [{"a": 1}]

    def test_ndjson_detected_by_line_structure(self):
        assert parse_body("application/json", '{"a": 1}\n{"b": 2}') == [{"a": 1}, {"b": 2}]

    def test_plain_json_and_empty_body(self):
        assert parse_body("application/json", '{"alertDefs": []}') == {"alertDefs": []}
        assert parse_body("application/json", "") == {}

    def test_merge_blocks_concatenates_lists(self):
        merged = merge_blocks([
            {"entries": [{"units": 1}], "pagination": {"page": 1}},
            {"entries": [{"units": 2}], "pagination": {"page": 2}},
        ])
        assert merged == {"entries": [{"units": 1}, {"units": 2}], "pagination": {"page": 2}}

    def test_merge_blocks_passes_objects_through(self):
        assert merge_blocks({"entries": []}) == {"entries": []}
        assert merge_blocks(None) == {}
        assert merge_blocks("not json") == {}


class TestDescribeHttpError:
    """User-facing messages for HTTP failures."""

    def test_forbidden(self):
        assert describe_http_error(403, {}, "Failed to list alert definitions") == (
            "Failed to list alert definitions: Authentication failed. Please check your API key and permissions."
        )

    def test_bad_request_uses_server_message(self):
        message = describe_http_error(400, {"message": "unknown field 'foo'"}, "Failed to execute query")
        assert message == "Failed to execute query: Bad request: unknown field 'foo'"

    def test_bad_request_default(self):
        assert describe_http_error(400, None, "Failed to execute query").endswith("Invalid query or parameters")

    def test_rate_limited(self):
        assert "Rate limit exceeded" in describe_http_error(429, None, "Failed to execute query")

    def test_other_status(self):
        assert describe_http_error(502, "Bad Gateway", "Failed to get dashboard") == (
            "Failed to get dashboard (HTTP 502): Bad Gateway"
        )
        assert describe_http_error(500, {}, "Failed to get dashboard") == (
            "Failed to get dashboard (HTTP 500): Request failed"
        )


class TestCoralogixClient:
    """Requests against the regional API."""

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            CoralogixClient("", "coralogix.com")

    @pytest.mark.asyncio
    async def test_query_posts_to_dataprime_endpoint(self, fake_session, fake_response):
        body = '{"queryId": {"queryId": "q1"}}\n{"result": {"results": []}}\n'
        session = fake_session(fake_response(200, body, content_type="application/x-ndjson"))
        client = CoralogixClient("key", "eu2.coralogix.com")

        with patched_session(session):
            response = await client.query({"query": "source logs | limit 1", "metadata": {}})

        assert response[0]["queryId"]["queryId"] == "q1"
        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url == "https://api.eu2.coralogix.com/api/v1/dataprime/query"
        assert kwargs["headers"]["Authorization"] == "Bearer key"
        assert kwargs["json"]["query"] == "source logs | limit 1"

    @pytest.mark.asyncio
    async def test_http_error_carries_context(self, fake_session, fake_response):
        session = fake_session(fake_response(403, {"message": "forbidden"}))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            with pytest.raises(CoralogixAPIError) as exc_info:
                await client.list_alert_defs()

        assert exc_info.value.status == 403
        assert str(exc_info.value).startswith("Failed to list alert definitions: Authentication failed")

    @pytest.mark.asyncio
    async def test_network_error(self, fake_session):
        session = fake_session(aiohttp.ClientConnectionError("connection refused"))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            with pytest.raises(CoralogixAPIError, match="Failed to get dashboard catalog: Network error - connection refused"):
                await client.get_dashboard_catalog()

    @pytest.mark.asyncio
    async def test_data_usage_repeats_aggregate_params(self, fake_session, fake_response):
        session = fake_session(fake_response(200, {"entries": []}))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            await client.get_data_usage(
                "2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z", "1h",
                ["AGGREGATE_BY_APPLICATION", "AGGREGATE_BY_PILLAR"],
            )

        method, url, kwargs = session.calls[0]
        assert url == "https://api.coralogix.com/v2/datausage"
        assert kwargs["params"] == [
            ("dateRange.fromDate", "2024-01-01T00:00:00Z"),
            ("dateRange.toDate", "2024-01-02T00:00:00Z"),
            ("resolution", "1h"),
            ("aggregate", "AGGREGATE_BY_APPLICATION"),
            ("aggregate", "AGGREGATE_BY_PILLAR"),
        ]

    @pytest.mark.asyncio
    async def test_set_alert_active_renders_boolean(self, fake_session, fake_response):
        session = fake_session(fake_response(200, {}))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            await client.set_alert_def_active("alert-1", False)

        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url.endswith("/mgmt/openapi/v3/alert-defs/alert-1:setActive")
        assert kwargs["params"] == [("active", "false")]

    @pytest.mark.asyncio
    async def test_quota_sums_last_day(self, fake_session, fake_response):
        entries = {"entries": [{"units": 1.5, "sizeGb": 2.0}, {"units": 0.5, "sizeGb": 1.0}]}
        session = fake_session(fake_response(200, entries))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            quota = await client.get_quota_info()

        assert quota == {"usedQuotaGb": 3.0, "units": {"usedUnits": 2.0}}

    @pytest.mark.asyncio
    async def test_quota_sums_streamed_blocks(self, fake_session, fake_response):
        body = '{"entries": [{"units": 1.5, "sizeGb": 2.0}]}\n{"entries": [{"units": 0.5, "sizeGb": 1.0}]}\n'
        session = fake_session(fake_response(200, body, content_type="application/x-ndjson"))
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            quota = await client.get_quota_info()

        assert quota == {"usedQuotaGb": 3.0, "units": {"usedUnits": 2.0}}

    @pytest.mark.asyncio
    async def test_set_rule_group_active_rewrites_enabled(self, fake_session, fake_response):
        session = fake_session(
            fake_response(200, {"ruleGroup": {"id": "rg-1", "name": "Parsers", "enabled": True}}),
            fake_response(200, {}),
        )
        client = CoralogixClient("key", "coralogix.com")

        with patched_session(session):
            await client.set_rule_group_active("rg-1", False)

        method, url, kwargs = session.calls[1]
        assert method == "PUT"
        assert kwargs["json"] == {"groupId": "rg-1", "ruleGroup": {"name": "Parsers", "enabled": False}}


class TestConfig:
    """Credentials from the environment."""

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("CORALOGIX_API_KEY", raising=False)
        monkeypatch.setenv("CORALOGIX_DOMAIN", "coralogix.com")
        assert not config.credentials_configured()
        with pytest.raises(ValueError, match="CORALOGIX_API_KEY and CORALOGIX_DOMAIN"):
            config.get_coralogix_client()

    def test_client_uses_configured_domain(self, coralogix_env):
        client = config.get_coralogix_client()
        assert client.base_url == "https://api.eu2.coralogix.com"
        assert client is config.get_coralogix_client()

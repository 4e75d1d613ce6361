"""Tests for the Coralogix tools as reached through the server's registry."""

import json

import pytest
from unittest.mock import patch

from mcp_server_coralogix import config
from mcp_server_coralogix.client import CoralogixAPIError
from mcp_server_coralogix.tools import is_query_tool, registry
from mcp_server_coralogix.tools.alerts import build_search_request
from mcp_server_coralogix.tools.billing import format_data_usage, resolve_date_range
from mcp_server_coralogix.tools.dashboards import count_widgets
from mcp_server_coralogix.tools.targets import build_target_request


def patched_client(client):
    return patch("mcp_server_coralogix.config.get_coralogix_client", return_value=client)


class TestRouting:
    """Tool names reach the right group."""

    def test_every_tool_routes_to_its_own_group(self):
        for route in registry.routes:
            for tool in route.tools:
                assert registry.find_route(tool["name"]) is route, tool["name"]

    def test_tool_names_are_unique(self):
        names = [tool["name"] for tool in registry.get_tool_definitions()]
        assert len(names) == len(set(names))

    def test_query_tool_predicate(self):
        assert is_query_tool("query_dataprime")
        assert is_query_tool("cancel_background_query")
        assert not is_query_tool("search_alerts")

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await registry.handle_tool_call("make_coffee", {})
        assert result.is_error
        assert result.text == "Error: Unknown tool: make_coffee"

    @pytest.mark.asyncio
    async def test_test_connection(self, monkeypatch):
        monkeypatch.setenv("CORALOGIX_API_KEY", "key")
        monkeypatch.delenv("CORALOGIX_DOMAIN", raising=False)
        result = await registry.handle_tool_call("test_connection", {})
        assert result.text.startswith("✅ Coralogix MCP Server is working!")
        assert "- Domain Value: Not set" in result.text
        assert result.text.endswith(f"Server version: {config.SERVER_VERSION}")


class TestQueryTools:
    """Direct and background queries."""

    @pytest.mark.asyncio
    async def test_dataprime_query_request(self, mock_coralogix_client):
        mock_coralogix_client.query.return_value = [
            {"queryId": {"queryId": "q-1"}},
            {"result": {"results": [{"userData": '{"msg": "hi"}'}]}},
        ]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "query_dataprime", {"query": "source logs | limit 10", "limit": 10}
            )

        assert not result.is_error
        assert "DataPrime Query Results" in result.text
        assert "📊 Results (1 records):" in result.text
        request = mock_coralogix_client.query.call_args[0][0]
        assert request == {
            "query": "source logs | limit 10",
            "metadata": {"syntax": "QUERY_SYNTAX_DATAPRIME", "tier": "TIER_FREQUENT_SEARCH", "limit": 10},
        }

    @pytest.mark.asyncio
    async def test_lucene_query_failure(self, mock_coralogix_client):
        mock_coralogix_client.query.side_effect = CoralogixAPIError(
            "Failed to execute query: Bad request: bad syntax", status=400
        )
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("query_lucene", {"query": "level:"})

        assert result.is_error
        assert result.text == "Error: Lucene query failed: Failed to execute query: Bad request: bad syntax"

    @pytest.mark.asyncio
    async def test_query_requires_text(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("query_dataprime", {})
        assert result.text == "Error: Missing required parameter(s): query"

    @pytest.mark.asyncio
    async def test_submit_background_query_passes_now_date(self, mock_coralogix_client):
        mock_coralogix_client.submit_background_query.return_value = {"queryId": "bq-7"}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "submit_background_query",
                {
                    "query": "source logs | count",
                    "startDate": "2024-05-01T00:00:00Z",
                    "endDate": "2024-05-02T00:00:00Z",
                    "nowDate": "2024-05-02T00:00:00Z",
                },
            )

        assert not result.is_error
        request = mock_coralogix_client.submit_background_query.call_args[0][0]
        assert request["nowDate"] == "2024-05-02T00:00:00Z"
        assert request["syntax"] == "QUERY_SYNTAX_DATAPRIME"

    @pytest.mark.asyncio
    async def test_background_data_not_ready(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_background_query_data", {"queryId": "bq-1"})
        assert result.text.startswith("No data available for query ID: bq-1")

    @pytest.mark.asyncio
    async def test_background_data_from_stream(self, mock_coralogix_client):
        mock_coralogix_client.get_background_query_data.return_value = [
            {"response": {"results": {"results": [{"userData": "{}"}, {"userData": "{}"}]}}}
        ]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_background_query_data", {"queryId": "bq-1"})
        assert "📊 Results (2 records):" in result.text

    @pytest.mark.asyncio
    async def test_cancel_background_query(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("cancel_background_query", {"queryId": "bq-9"})
        assert result.text == "Background query bq-9 has been cancelled successfully."


class TestAlertTools:
    """Alert definitions, search and bulk management."""

    @pytest.mark.asyncio
    async def test_list_alert_definitions(self, mock_coralogix_client, sample_alert_defs):
        mock_coralogix_client.list_alert_defs.return_value = sample_alert_defs
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("list_alert_definitions", {})

        assert result.text.startswith("Alert Definitions (2 found)")
        assert "1. High error rate" in result.text
        assert "Status: 🟢 Enabled" in result.text
        assert "Priority: P1 (Critical)" in result.text
        assert "Group By: applicationName" in result.text
        assert "Created: 2024-05-01 10:00:00" in result.text
        assert "Status: 🔴 Disabled" in result.text

    @pytest.mark.asyncio
    async def test_no_alert_definitions(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("list_alert_definitions", {})
        assert result.text == "No alert definitions found in your Coralogix account."

    @pytest.mark.asyncio
    async def test_list_failure_is_prefixed(self, mock_coralogix_client):
        mock_coralogix_client.list_alert_defs.side_effect = CoralogixAPIError("Failed to list alert definitions: Authentication failed.")
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("list_alert_definitions", {})
        assert result.is_error
        assert result.text.startswith("Error: Failed to list alerts: ")

    @pytest.mark.asyncio
    async def test_set_alert_active(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("set_alert_active", {"id": "alert-1", "active": False})
        assert result.text == "✅ Alert definition (ID: alert-1) has been disabled successfully."
        mock_coralogix_client.set_alert_def_active.assert_awaited_once_with("alert-1", False)

    @pytest.mark.asyncio
    async def test_priority_enum_is_enforced(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "create_logs_threshold_alert",
                {
                    "name": "Errors",
                    "priority": "URGENT",
                    "threshold": 10,
                    "timeWindow": "LOGS_TIME_WINDOW_VALUE_MINUTES_5_OR_UNSPECIFIED",
                    "conditionType": "LOGS_THRESHOLD_CONDITION_TYPE_MORE_THAN_OR_UNSPECIFIED",
                },
            )
        assert result.is_error
        assert "Parameter 'priority' must be one of" in result.text
        mock_coralogix_client.create_alert_def.assert_not_called()

    def test_search_request_filters(self):
        request = build_search_request(
            {
                "namePattern": "error",
                "priorities": ["ALERT_DEF_PRIORITY_P1"],
                "enabled": False,
                "modifiedAfter": "2024-01-01T00:00:00Z",
                "pageSize": 50,
            }
        )
        query_filter = request["queryFilter"]
        assert request["pagination"] == {"pageSize": 50}
        assert query_filter["nameFilter"] == {"name": ["error"], "matcher": "FILTER_MATCHER_CONTAINS"}
        assert query_filter["priorityFilter"]["priority"] == ["ALERT_DEF_PRIORITY_P1"]
        assert query_filter["enabledFilter"] == {"enabled": False}
        assert query_filter["modifiedTimeRangeFilter"]["modifiedAtRange"]["startTime"] == "2024-01-01T00:00:00Z"

    def test_search_request_defaults(self):
        assert build_search_request({}) == {"pagination": {"pageSize": 200}}

    @pytest.mark.asyncio
    async def test_search_alerts_summary(self, mock_coralogix_client, sample_alert_defs):
        mock_coralogix_client.list_alert_defs_with_filter.return_value = {
            **sample_alert_defs,
            "pagination": {"totalSize": 7, "nextPageToken": "page-2"},
        }
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("search_alerts", {"namePattern": "e"})

        assert "Found 2 alerts (7 total)" in result.text
        assert "🟢 Enabled: 1" in result.text
        assert "🔴 Disabled: 1" in result.text
        assert "Logs Threshold: 1" in result.text
        assert 'Use pageToken: "page-2"' in result.text

    @pytest.mark.asyncio
    async def test_bulk_delete_requires_confirmation(self, mock_coralogix_client, sample_alert_defs):
        mock_coralogix_client.get_alert_def.return_value = {"alertDef": sample_alert_defs["alertDefs"][0]}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "bulk_manage_alerts", {"operation": "delete", "alertIds": ["alert-1"]}
            )

        assert "DELETE OPERATION REQUIRES CONFIRMATION" in result.text
        assert "- High error rate (alert-1)" in result.text
        mock_coralogix_client.delete_alert_def.assert_not_called()

    @pytest.mark.asyncio
    async def test_bulk_disable_reports_failures(self, mock_coralogix_client):
        mock_coralogix_client.set_alert_def_active.side_effect = [{}, CoralogixAPIError("not found")]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "bulk_manage_alerts", {"operation": "disable", "alertIds": ["a", "b"]}
            )

        assert "✅ Successful: 1" in result.text
        assert "❌ Failed: 1" in result.text
        assert "- b: not found" in result.text

    @pytest.mark.asyncio
    async def test_bulk_needs_targets(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("bulk_manage_alerts", {"operation": "enable"})
        assert result.is_error
        assert "Either alertIds or searchCriteria must be provided" in result.text

    @pytest.mark.asyncio
    async def test_alert_event_statistics(self, mock_coralogix_client):
        mock_coralogix_client.get_alert_events_statistics.return_value = {
            "totalCount": 5,
            "triggeredCount": 3,
            "resolvedCount": 2,
        }
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_alert_events", {"status": ["TRIGGERED"]})

        assert "Total Events: 5" in result.text
        assert "🔴 Triggered: 3" in result.text
        mock_coralogix_client.get_alert_events_statistics.assert_awaited_once_with({"status": ["TRIGGERED"]})


class TestDashboardTools:
    """Custom dashboards."""

    @pytest.mark.asyncio
    async def test_empty_catalog(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_dashboard_catalog", {})
        assert result.text == "No dashboards found in your Coralogix account."

    @pytest.mark.asyncio
    async def test_catalog_groups_by_folder(self, mock_coralogix_client):
        mock_coralogix_client.get_dashboard_catalog.return_value = {
            "items": [
                {"id": "d1", "name": "Overview", "isPinned": True},
                {"id": "d2", "name": "Payments", "folderId": {"id": "f1"}},
            ]
        }
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_dashboard_catalog", {})

        assert "📁 Root Folder:" in result.text
        assert "1. 📌 Overview" in result.text
        assert "📁 Folder ID: f1:" in result.text

    @pytest.mark.asyncio
    async def test_create_dashboard_request(self, mock_coralogix_client):
        mock_coralogix_client.create_dashboard.return_value = {"dashboardId": "new-1"}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("create_dashboard", {"name": "Latency"})

        assert "Dashboard ID: new-1" in result.text
        request = mock_coralogix_client.create_dashboard.call_args[0][0]
        assert request["requestId"].startswith("req_")
        assert request["dashboard"]["relativeTimeFrame"] == "24h"
        assert request["dashboard"]["layout"] == {"sections": []}
        assert request["isLocked"] is False

    def test_count_widgets(self):
        layout = {"sections": [{"rows": [{"widgets": [{}, {}]}, {"widgets": [{}]}]}, {"rows": []}]}
        assert count_widgets(layout) == 3


class TestTargetTools:
    """S3 archive target."""

    def test_build_target_request(self):
        assert build_target_request({"bucket": "archive", "region": "eu-west-1"}) == {
            "isActive": True,
            "s3": {"bucket": "archive", "region": "eu-west-1"},
        }

    @pytest.mark.asyncio
    async def test_no_target_configured(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_target", {})
        assert result.text == "📦 No archive storage target is configured."

    @pytest.mark.asyncio
    async def test_validate_target_failure(self, mock_coralogix_client):
        mock_coralogix_client.validate_target.return_value = {"isValid": False}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(
                "validate_target", {"bucket": "archive", "region": "eu-west-1", "prefix": "logs/"}
            )
        assert result.text.startswith("❌ Target validation failed for S3")
        assert "Prefix: logs/" in result.text


class TestManagementTools:
    """Enrichments, rule groups and Events2Metrics return the raw API response."""

    @pytest.mark.asyncio
    async def test_enrichment_limits_as_json(self, mock_coralogix_client):
        mock_coralogix_client.get_enrichment_limits.return_value = {"limit": 10, "used": 2}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_enrichment_limits", {})
        assert json.loads(result.text) == {"limit": 10, "used": 2}

    @pytest.mark.asyncio
    async def test_delete_custom_enrichment_empty_response(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("delete_custom_enrichment", {"enrichmentId": "7"})
        assert result.text == "Operation completed successfully."

    @pytest.mark.asyncio
    async def test_create_rule_group_defaults(self, mock_coralogix_client):
        mock_coralogix_client.get_rule_group_limits.return_value = {"companyId": "4242"}
        with patched_client(mock_coralogix_client):
            await registry.handle_tool_call("create_rule_group", {"name": "Apache"})

        rule_group = mock_coralogix_client.create_rule_group.call_args[0][0]
        assert rule_group["teamId"] == {"id": 4242}
        assert rule_group["enabled"] is True
        assert rule_group["creator"] == "MCP Server"
        assert rule_group["ruleSubgroups"] == []

    @pytest.mark.asyncio
    async def test_create_rule_group_failure_note(self, mock_coralogix_client):
        mock_coralogix_client.create_rule_group.side_effect = CoralogixAPIError("bad request")
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("create_rule_group", {"name": "Apache"})
        assert result.is_error
        assert "Rule group creation may have API limitations" in result.text

    @pytest.mark.asyncio
    async def test_events2metrics_routing(self, mock_coralogix_client):
        mock_coralogix_client.list_events2metrics.return_value = {"e2m": []}
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("list_events2metrics", {})
        assert json.loads(result.text) == {"e2m": []}


class TestBillingTools:
    """Usage and quota reports."""

    def test_resolve_date_range_prefers_explicit_dates(self):
        assert resolve_date_range({"fromDate": "a", "toDate": "b", "days": 3}) == ("a", "b")

    def test_resolve_date_range_defaults_to_a_week(self):
        start, end = resolve_date_range({})
        assert start.endswith("Z") and end.endswith("Z")
        assert start < end

    def test_no_usage_data(self):
        text = format_data_usage({}, "s", "e")
        assert text.endswith("**No usage data found for the specified period.**")

    def test_usage_breakdown_and_cost(self):
        text = format_data_usage(
            {
                "entries": [
                    {"applicationName": "api", "units": 2.0, "sizeGb": 1.0},
                    {
                        "dimensions": [{"genericDimension": {"key": "application_name", "value": "web"}}],
                        "units": 1.0,
                        "sizeGb": 0.5,
                    },
                ]
            },
            "s",
            "e",
        )
        assert "- **Total Units Consumed:** 3.0000 units" in text
        assert "- **Estimated Cost:** $4.50" in text
        assert "**api:**" in text
        assert "**web:**" in text

    @pytest.mark.asyncio
    async def test_data_usage_default_resolution(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_data_usage", {"days": 1})

        assert "No usage data found" in result.text
        args = mock_coralogix_client.get_data_usage.call_args[0]
        assert args[2] == "6h"

    @pytest.mark.asyncio
    async def test_daily_gbs(self, mock_coralogix_client):
        mock_coralogix_client.get_daily_usage_gbs.return_value = {
            "gbs": [
                {"date": "2024-05-01", "processedGigabytes": 1.25},
                {"date": "2024-05-02", "processedGigabytes": 0.75},
            ]
        }
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_daily_usage_gbs", {"range": "RANGE_LAST_WEEK"})

        assert "💾 Total GBs: 2.00 GB" in result.text
        assert "📊 Average per Day: 1.00 GB" in result.text
        assert "2024-05-01: 1.25 GB" in result.text
        mock_coralogix_client.get_daily_usage_gbs.assert_awaited_once_with("RANGE_LAST_WEEK", None)

    @pytest.mark.asyncio
    async def test_quota_failure(self, mock_coralogix_client):
        mock_coralogix_client.get_quota_info.side_effect = CoralogixAPIError("timeout")
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_current_quota", {})
        assert result.text == "Error: Failed to get quota information: timeout"

    @pytest.mark.asyncio
    async def test_export_status_update(self, mock_coralogix_client):
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("update_data_usage_export_status", {"enabled": True})
        assert "📤 New Status: 🟢 ENABLED" in result.text
        mock_coralogix_client.update_data_usage_export_status.assert_awaited_once_with(True)

    @pytest.mark.asyncio
    async def test_streamed_usage_blocks_are_merged(self, mock_coralogix_client):
        mock_coralogix_client.get_data_usage.return_value = [
            {"entries": [{"applicationName": "web", "units": 1.0, "sizeGb": 2.0}]},
            {"entries": [{"applicationName": "api", "units": 0.5, "sizeGb": 1.0}]},
        ]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_data_usage", {"days": 1})

        assert not result.is_error
        assert "- **Total Entries:** 2" in result.text
        assert "**web:**" in result.text
        assert "**api:**" in result.text

    @pytest.mark.asyncio
    async def test_streamed_usage_without_entries(self, mock_coralogix_client):
        mock_coralogix_client.get_data_usage.return_value = [{"entries": []}, {"entries": []}]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_data_usage", {"days": 1})

        assert not result.is_error
        assert result.text.endswith("**No usage data found for the specified period.**")

    @pytest.mark.asyncio
    async def test_streamed_daily_tokens(self, mock_coralogix_client):
        mock_coralogix_client.get_daily_usage_tokens.return_value = [
            {"tokens": [{"date": "2024-05-01", "evaluationTokens": 1200}]},
            {"tokens": [{"date": "2024-05-02", "evaluationTokens": 800}]},
        ]
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call("get_daily_usage_tokens", {"range": "RANGE_LAST_WEEK"})

        assert "🎯 Total Tokens: 2,000" in result.text
        assert "📅 Days: 2" in result.text


class TestEmptyResults:
    """Empty replies are described rather than rendered as blank output."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, reply, tool, args, expected",
        [
            (
                "query",
                [{"result": {"results": []}}],
                "query_dataprime",
                {"query": "source logs | filter false"},
                "No results found.",
            ),
            (
                "list_alert_defs",
                {},
                "list_alert_definitions",
                {},
                "No alert definitions found in your Coralogix account.",
            ),
            (
                "list_alert_defs_with_filter",
                {"alertDefs": []},
                "search_alerts",
                {"namePattern": "nothing-matches"},
                "No alerts found matching the search criteria.",
            ),
            (
                "list_alert_defs_with_filter",
                {"alertDefs": []},
                "bulk_manage_alerts",
                {"operation": "disable", "searchCriteria": {"namePattern": "nothing-matches"}},
                "No alerts found to operate on.",
            ),
            (
                "get_dashboard_catalog",
                {"items": []},
                "get_dashboard_catalog",
                {},
                "No dashboards found in your Coralogix account.",
            ),
            (
                "get_data_usage",
                {"entries": []},
                "get_data_usage",
                {"days": 1},
                "**No usage data found for the specified period.**",
            ),
        ],
    )
    async def test_empty_reply(self, mock_coralogix_client, method, reply, tool, args, expected):
        getattr(mock_coralogix_client, method).return_value = reply
        with patched_client(mock_coralogix_client):
            result = await registry.handle_tool_call(tool, args)

        assert not result.is_error
        assert expected in result.text

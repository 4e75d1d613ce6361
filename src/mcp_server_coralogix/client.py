"""
Coralogix API client.

Wraps the DataPrime query API and the management (OpenAPI) endpoints used by
the MCP tools. Every public method names the operation it performs so that
failures surface as "<operation> (HTTP <status>): <message>".
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

import aiohttp

logger = logging.getLogger(__name__)

DOMAIN_ENDPOINTS = {
    "coralogix.com": "https://api.coralogix.com",
    "coralogix.us": "https://api.coralogix.us",
    "cx498.coralogix.com": "https://api.cx498.coralogix.com",
    "eu2.coralogix.com": "https://api.eu2.coralogix.com",
    "coralogix.in": "https://api.coralogix.in",
    "coralogixsg.com": "https://api.coralogixsg.com",
    "ap3.coralogix.com": "https://api.ap3.coralogix.com",
}

DEFAULT_TIMEOUT = 30

Params = Union[Dict[str, Any], List[Tuple[str, Any]]]


class CoralogixAPIError(Exception):
    """A Coralogix API call failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def resolve_base_url(domain: str) -> str:
    """Map a Coralogix domain (e.g. "eu2.coralogix.com") to its API host."""
    base_url = DOMAIN_ENDPOINTS.get(domain)
    if not base_url:
        raise ValueError(
            f"Unsupported Coralogix domain: {domain}. "
            f"Supported domains: {', '.join(DOMAIN_ENDPOINTS)}"
        )
    return base_url


def is_ndjson(content_type: str, text: str) -> bool:
    return "application/x-ndjson" in (content_type or "") or "\n{" in text


def parse_ndjson(text: str) -> List[Any]:
    """Parse newline-delimited JSON into a list of objects."""
    return [json.loads(line) for line in text.split("\n") if line.strip()]


def parse_body(content_type: str, text: str) -> Any:
    if not text.strip():
        return {}
    if is_ndjson(content_type, text):
        return parse_ndjson(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def merge_blocks(response: Any) -> Dict[str, Any]:
    """
    Fold a streamed reply into a single object.

    Usage endpoints may answer with several NDJSON blocks; list fields such as
    ``entries`` are concatenated across blocks and scalar fields keep the last
    value seen.
    """
    if not isinstance(response, list):
        return response if isinstance(response, dict) else {}

    merged: Dict[str, Any] = {}
    for block in response:
        if not isinstance(block, dict):
            continue
        for key, value in block.items():
            if isinstance(value, list):
                merged.setdefault(key, []).extend(value)
            else:
                merged[key] = value
    return merged


def describe_http_error(status: int, data: Any, context: str) -> str:
    """Build the user-facing message for an HTTP error response."""
    message = None
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
    elif isinstance(data, str) and data.strip():
        message = data.strip()[:500]

    if status == 403:
        return f"{context}: Authentication failed. Please check your API key and permissions."
    if status == 400:
        return f"{context}: Bad request: {message or 'Invalid query or parameters'}"
    if status == 429:
        return f"{context}: Rate limit exceeded. Please wait before making more requests."
    return f"{context} (HTTP {status}): {message or 'Request failed'}"


def _query_params(params: Optional[Params]) -> List[Tuple[str, str]]:
    if not params:
        return []
    items = params.items() if isinstance(params, dict) else params
    rendered = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        rendered.append((key, str(value)))
    return rendered


class CoralogixClient:
    """Authenticated access to one Coralogix region."""

    def __init__(self, api_key: str, domain: str, timeout: int = DEFAULT_TIMEOUT):
        if not api_key:
            raise ValueError("Coralogix API key is required")

        self.domain = domain
        self.base_url = resolve_base_url(domain)
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def request(
        self,
        method: str,
        path: str,
        context: str,
        params: Optional[Params] = None,
        body: Optional[Any] = None
    ) -> Any:
        """
        Send a request and decode the JSON (or NDJSON) response.

        Args:
            method: HTTP method
            path: Path below the regional API host
            context: Operation description used to prefix error messages
            params: Query parameters (a list of pairs allows repeated keys)
            body: JSON request body

        Returns:
            Decoded response: a dict, a list of NDJSON records, or raw text

        Raises:
            CoralogixAPIError: For HTTP errors and network failures
        """
        url = f"{self.base_url}{path}"
        kwargs: Dict[str, Any] = {"headers": self.headers, "params": _query_params(params)}
        if body is not None:
            kwargs["json"] = body

        logger.debug(f"{method} {path}")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, **kwargs) as response:
                    text = await response.text()
                    content_type = response.headers.get("Content-Type", "")

                    if response.status >= 400:
                        try:
                            data = json.loads(text) if text else None
                        except json.JSONDecodeError:
                            data = text
                        logger.error(f"{method} {path} -> HTTP {response.status}")
                        raise CoralogixAPIError(
                            describe_http_error(response.status, data, context),
                            status=response.status,
                        )

                    return parse_body(content_type, text)

        except aiohttp.ClientError as e:
            raise CoralogixAPIError(f"{context}: Network error - {e}") from e
        except json.JSONDecodeError as e:
            raise CoralogixAPIError(f"{context}: Failed to parse response - {e}") from e

    # ------------------------------------------------------------------
    # DataPrime queries
    # ------------------------------------------------------------------

    async def query(self, request: Dict[str, Any]) -> Any:
        return await self.request("POST", "/api/v1/dataprime/query", "Failed to execute query", body=request)

    async def submit_background_query(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "POST", "/api/v1/dataprime/background-query", "Failed to submit background query", body=request
        )

    async def get_background_query_status(self, query_id: str) -> Dict[str, Any]:
        return await self.request(
            "POST", "/api/v1/dataprime/background-query/status",
            "Failed to get background query status", body={"queryId": query_id},
        )

    async def get_background_query_data(self, query_id: str) -> Any:
        return await self.request(
            "POST", "/api/v1/dataprime/background-query/data",
            "Failed to get background query data", body={"queryId": query_id},
        )

    async def cancel_background_query(self, query_id: str) -> Dict[str, Any]:
        return await self.request(
            "POST", "/api/v1/dataprime/background-query/cancel",
            "Failed to cancel background query", body={"queryId": query_id},
        )

    # ------------------------------------------------------------------
    # Data usage
    # ------------------------------------------------------------------

    async def get_data_usage(
        self,
        from_date: str,
        to_date: str,
        resolution: Optional[str] = None,
        aggregate: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        params: List[Tuple[str, Any]] = [
            ("dateRange.fromDate", from_date),
            ("dateRange.toDate", to_date),
            ("resolution", resolution),
        ]
        params.extend(("aggregate", value) for value in aggregate or [])
        return await self.request("GET", "/v2/datausage", "Failed to get data usage", params=params)

    async def _daily_usage(self, kind: str, context: str, range_: Optional[str], date_range: Optional[Dict[str, str]]) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if range_:
            body["range"] = range_
        if date_range:
            body["dateRange"] = date_range
        return await self.request("POST", f"/v2/datausage/daily/{kind}", context, body=body)

    async def get_daily_usage_tokens(self, range_: Optional[str] = None, date_range: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self._daily_usage("evaluation_tokens", "Failed to get daily evaluation tokens", range_, date_range)

    async def get_daily_usage_gbs(self, range_: Optional[str] = None, date_range: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self._daily_usage("processed_gbs", "Failed to get daily processed GBs", range_, date_range)

    async def get_daily_usage_units(self, range_: Optional[str] = None, date_range: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        return await self._daily_usage("units", "Failed to get daily units", range_, date_range)

    async def get_data_usage_export_status(self) -> Dict[str, Any]:
        return await self.request("GET", "/v2/datausage/exportstatus", "Failed to get data usage export status")

    async def update_data_usage_export_status(self, enabled: bool) -> Dict[str, Any]:
        return await self.request(
            "POST", "/v2/datausage/exportstatus",
            "Failed to update data usage export status", body={"enabled": enabled},
        )

    async def get_quota_info(self) -> Dict[str, Any]:
        """Sum units and GB over the last day of usage entries."""
        now = datetime.now(timezone.utc)
        usage = await self.get_data_usage(
            (now - timedelta(days=1)).isoformat(),
            now.isoformat(),
            resolution="1d",
        )

        total_units = 0.0
        total_size_gb = 0.0
        for entry in merge_blocks(usage).get("entries") or []:
            total_units += entry.get("units") or 0
            total_size_gb += entry.get("sizeGb") or 0

        return {"usedQuotaGb": total_size_gb, "units": {"usedUnits": total_units}}

    # ------------------------------------------------------------------
    # Alert definitions and events
    # ------------------------------------------------------------------

    ALERT_DEFS = "/mgmt/openapi/v3/alert-defs"
    ALERT_EVENTS = "/mgmt/openapi/v3/alert-events"

    async def list_alert_defs(self) -> Dict[str, Any]:
        return await self.request("GET", self.ALERT_DEFS, "Failed to list alert definitions")

    async def list_alert_defs_with_filter(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "POST", f"{self.ALERT_DEFS}:list", "Failed to search alert definitions", body=request
        )

    async def create_alert_def(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", self.ALERT_DEFS, "Failed to create alert definition", body=request)

    async def get_alert_def(self, alert_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"{self.ALERT_DEFS}/{alert_id}", "Failed to get alert definition")

    async def get_alert_def_by_version_id(self, version_id: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"{self.ALERT_DEFS}/version/{version_id}", "Failed to get alert definition version"
        )

    async def update_alert_def(self, alert_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "PUT", self.ALERT_DEFS, "Failed to update alert definition",
            body={"id": alert_id, "alertDefProperties": properties},
        )

    async def delete_alert_def(self, alert_id: str) -> Any:
        return await self.request("DELETE", f"{self.ALERT_DEFS}/{alert_id}", "Failed to delete alert definition")

    async def set_alert_def_active(self, alert_id: str, active: bool) -> Any:
        return await self.request(
            "POST", f"{self.ALERT_DEFS}/{alert_id}:setActive",
            "Failed to set alert definition active state", params={"active": active},
        )

    async def download_alerts(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.ALERT_DEFS}/download", "Failed to download alert definitions")

    async def get_alert_event(self, event_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"{self.ALERT_EVENTS}/{event_id}", "Failed to get alert event")

    async def get_alert_events_statistics(self, filters: Dict[str, Any]) -> Dict[str, Any]:
        params: List[Tuple[str, Any]] = [
            ("startTime", filters.get("startTime")),
            ("endTime", filters.get("endTime")),
        ]
        params.extend(("status", value) for value in filters.get("status") or [])
        params.extend(("alertDefIds", value) for value in filters.get("alertDefIds") or [])
        params.extend(("priorities", value) for value in filters.get("priorities") or [])
        return await self.request(
            "GET", f"{self.ALERT_EVENTS}/statistics", "Failed to get alert events statistics", params=params
        )

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------

    DASHBOARDS = "/mgmt/openapi/v1/dashboards"

    async def get_dashboard_catalog(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.DASHBOARDS}/catalog", "Failed to get dashboard catalog")

    async def create_dashboard(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", f"{self.DASHBOARDS}/dashboards", "Failed to create dashboard", body=request)

    async def get_dashboard(self, dashboard_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"{self.DASHBOARDS}/dashboards/{dashboard_id}", "Failed to get dashboard")

    async def update_dashboard(self, request: Dict[str, Any]) -> Any:
        return await self.request("PUT", f"{self.DASHBOARDS}/dashboards", "Failed to update dashboard", body=request)

    async def delete_dashboard(self, dashboard_id: str, request_id: str) -> Any:
        return await self.request(
            "DELETE", f"{self.DASHBOARDS}/dashboards/{dashboard_id}",
            "Failed to delete dashboard", params={"requestId": request_id},
        )

    # ------------------------------------------------------------------
    # Archive targets
    # ------------------------------------------------------------------

    TARGETS = "/mgmt/openapi/v1/archiving/targets"

    async def get_target(self) -> Dict[str, Any]:
        return await self.request("GET", self.TARGETS, "Failed to get target")

    async def set_target(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", self.TARGETS, "Failed to set target", body=request)

    async def validate_target(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", f"{self.TARGETS}/validate", "Failed to validate target", body=request)

    # ------------------------------------------------------------------
    # Enrichments
    # ------------------------------------------------------------------

    ENRICHMENTS = "/mgmt/openapi/v1/enrichments"
    CUSTOM_ENRICHMENTS = "/mgmt/openapi/v1/custom-enrichments"

    async def list_enrichments(self) -> Dict[str, Any]:
        return await self.request("GET", self.ENRICHMENTS, "Failed to list enrichments")

    async def get_enrichment_limits(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.ENRICHMENTS}/limit", "Failed to get enrichment limits")

    async def get_enrichment_settings(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.ENRICHMENTS}/settings", "Failed to get enrichment settings")

    async def list_custom_enrichments(self) -> Dict[str, Any]:
        return await self.request("GET", self.CUSTOM_ENRICHMENTS, "Failed to list custom enrichments")

    async def create_custom_enrichment(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", self.CUSTOM_ENRICHMENTS, "Failed to create custom enrichment", body=request)

    async def update_custom_enrichment(self, enrichment_id: str, enrichment: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "PUT", self.CUSTOM_ENRICHMENTS, "Failed to update custom enrichment",
            body={**enrichment, "customEnrichmentId": enrichment_id},
        )

    async def delete_custom_enrichment(self, enrichment_id: str) -> Any:
        return await self.request(
            "DELETE", f"{self.CUSTOM_ENRICHMENTS}/{enrichment_id}", "Failed to delete custom enrichment"
        )

    # ------------------------------------------------------------------
    # Parsing rule groups
    # ------------------------------------------------------------------

    RULE_GROUPS = "/mgmt/openapi/v1/rule-groups"

    async def list_rule_groups(self) -> Dict[str, Any]:
        return await self.request("GET", self.RULE_GROUPS, "Failed to list rule groups")

    async def get_rule_group(self, group_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"{self.RULE_GROUPS}/{group_id}", "Failed to get rule group")

    async def get_rule_group_limits(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.RULE_GROUPS}/limits", "Failed to get rule group limits")

    async def create_rule_group(self, rule_group: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", self.RULE_GROUPS, "Failed to create rule group", body=rule_group)

    async def update_rule_group(self, group_id: str, rule_group: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "PUT", self.RULE_GROUPS, "Failed to update rule group",
            body={"groupId": group_id, "ruleGroup": rule_group},
        )

    async def delete_rule_group(self, group_id: str) -> Any:
        return await self.request("DELETE", f"{self.RULE_GROUPS}/{group_id}", "Failed to delete rule group")

    async def set_rule_group_active(self, group_id: str, active: bool) -> Dict[str, Any]:
        """Toggle a rule group by rewriting its enabled flag."""
        current = await self.get_rule_group(group_id)
        rule_group = dict(current.get("ruleGroup", current))
        rule_group.pop("id", None)
        rule_group["enabled"] = active
        return await self.update_rule_group(group_id, rule_group)

    # ------------------------------------------------------------------
    # Events2Metrics
    # ------------------------------------------------------------------

    E2M = "/mgmt/openapi/v2/events2metrics"

    async def list_events2metrics(self) -> Dict[str, Any]:
        return await self.request("GET", self.E2M, "Failed to list events2metrics")

    async def get_events2metrics(self, e2m_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"{self.E2M}/{e2m_id}", "Failed to get events2metrics")

    async def get_events2metrics_limits(self) -> Dict[str, Any]:
        return await self.request("GET", f"{self.E2M}/limits", "Failed to get events2metrics limits")

    async def get_events2metrics_cardinality(
        self,
        spans_query: Optional[Dict[str, Any]] = None,
        logs_query: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if spans_query:
            body["spansQuery"] = spans_query
        if logs_query:
            body["logsQuery"] = logs_query
        return await self.request(
            "POST", f"{self.E2M}/labels_cardinality", "Failed to get events2metrics cardinality", body=body
        )

"""Coralogix tool registry.

Routes are tried in order; the first matching rule owns the call. Archive
target tools have no common name fragment, so they are matched by exact name.
"""

from mcp_server_common import ToolRegistry, ToolRoute, name_contains, name_in

from .alerts import ALERT_TOOLS, handle_alert_tool
from .billing import BILLING_TOOLS, handle_billing_tool
from .connection import CONNECTION_TOOLS, handle_connection_tool
from .dashboards import DASHBOARD_TOOLS, handle_dashboard_tool
from .enrichments import ENRICHMENT_TOOLS, handle_enrichment_tool
from .events2metrics import EVENTS2METRICS_TOOLS, handle_events2metrics_tool
from .query import QUERY_TOOLS, handle_query_tool
from .rule_groups import RULE_GROUP_TOOLS, handle_rule_group_tool
from .targets import TARGET_TOOLS, handle_target_tool


def is_query_tool(name: str) -> bool:
    return name.startswith("query_") or "background_query" in name


def create_registry() -> ToolRegistry:
    return ToolRegistry(
        [
            ToolRoute(name_in(CONNECTION_TOOLS), CONNECTION_TOOLS, handle_connection_tool),
            ToolRoute(is_query_tool, QUERY_TOOLS, handle_query_tool),
            ToolRoute(name_contains("alert"), ALERT_TOOLS, handle_alert_tool),
            ToolRoute(name_contains("dashboard"), DASHBOARD_TOOLS, handle_dashboard_tool),
            ToolRoute(name_contains("enrichment"), ENRICHMENT_TOOLS, handle_enrichment_tool),
            ToolRoute(name_contains("rule_group"), RULE_GROUP_TOOLS, handle_rule_group_tool),
            ToolRoute(name_contains("events2metrics"), EVENTS2METRICS_TOOLS, handle_events2metrics_tool),
            ToolRoute(name_contains("usage", "quota"), BILLING_TOOLS, handle_billing_tool),
            ToolRoute(name_in(TARGET_TOOLS), TARGET_TOOLS, handle_target_tool),
        ],
        log_prefix="Coralogix",
    )


registry = create_registry()

__all__ = ["create_registry", "is_query_tool", "registry"]

"""Events2Metrics tools: rules that turn logs and spans into metrics."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_json

EVENTS2METRICS_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "list_events2metrics",
        "description": "List all Events2Metrics (E2M) configurations that convert logs and spans to metrics",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_events2metrics",
        "description": "Get the detailed configuration of a specific Events2Metrics rule by ID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": {
                    "type": "string",
                    "description": "The Events2Metrics ID. Get this from list_events2metrics.",
                },
            },
            "required": ["id"],
        },
    },
    {
        "name": "get_events2metrics_limits",
        "description": "Get Events2Metrics usage limits and current consumption for your account",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_events2metrics_cardinality",
        "description": "Estimate label cardinality for a planned Events2Metrics rule before creating it",
        "inputSchema": {
            "type": "object",
            "properties": {
                "spansQuery": {
                    "type": "object",
                    "description": "Spans query configuration for span-based E2M rules",
                },
                "logsQuery": {
                    "type": "object",
                    "description": "Logs query configuration for log-based E2M rules",
                },
                "startDate": {
                    "type": "string",
                    "description": "Start time for the analysis in ISO format",
                },
                "endDate": {
                    "type": "string",
                    "description": "End time for the analysis in ISO format",
                },
            },
            "required": [],
        },
    },
]


async def handle_events2metrics_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "list_events2metrics":
        return format_json(await client.list_events2metrics())
    if name == "get_events2metrics":
        return format_json(await client.get_events2metrics(args["id"]))
    if name == "get_events2metrics_limits":
        return format_json(await client.get_events2metrics_limits())
    if name == "get_events2metrics_cardinality":
        return format_json(
            await client.get_events2metrics_cardinality(args.get("spansQuery"), args.get("logsQuery"))
        )
    raise ValueError(f"Unknown Events2Metrics tool: {name}")

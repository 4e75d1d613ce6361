"""Data usage, quota and billing tools."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from .. import config
from ..client import merge_blocks

UNIT_PRICE_USD = 1.5

RANGES = ["RANGE_CURRENT_MONTH", "RANGE_LAST_30_DAYS", "RANGE_LAST_90_DAYS", "RANGE_LAST_WEEK"]

DAILY_RANGE_SCHEMA = {
    "type": "object",
    "properties": {
        "range": {
            "type": "string",
            "enum": RANGES,
            "description": "Predefined time range for data retrieval",
        },
        "fromDate": {
            "type": "string",
            "description": "Custom start date in ISO 8601 format (alternative to range)",
        },
        "toDate": {
            "type": "string",
            "description": "Custom end date in ISO 8601 format (alternative to range)",
        },
    },
    "required": [],
}

BILLING_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_data_usage",
        "description": (
            "Get detailed data usage information for billing analysis, broken down by application "
            "with estimated cost."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "resolution": {
                    "type": "string",
                    "description": 'Time resolution for grouping data (e.g., "1h", "6h", "1d"). Default: 6h',
                },
                "fromDate": {
                    "type": "string",
                    "description": 'Start date in ISO 8601 format (e.g., "2023-12-01T00:00:00.00Z")',
                },
                "toDate": {
                    "type": "string",
                    "description": 'End date in ISO 8601 format (e.g., "2023-12-02T00:00:00.00Z")',
                },
                "days": {
                    "type": "number",
                    "description": "Number of days to look back from now when fromDate/toDate are not given (1-90, default 7)",
                },
                "aggregate": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": [
                            "AGGREGATE_BY_APPLICATION",
                            "AGGREGATE_BY_SUBSYSTEM",
                            "AGGREGATE_BY_PILLAR",
                            "AGGREGATE_BY_PRIORITY",
                        ],
                    },
                    "description": "Dimensions to aggregate the usage by",
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_current_quota",
        "description": "Get current quota information: used data and unit consumption over the last day",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_daily_usage_tokens",
        "description": "Get daily usage evaluation tokens for billing tracking",
        "inputSchema": DAILY_RANGE_SCHEMA,
    },
    {
        "name": "get_daily_usage_gbs",
        "description": "Get daily usage in processed gigabytes for data volume billing tracking",
        "inputSchema": DAILY_RANGE_SCHEMA,
    },
    {
        "name": "get_daily_usage_units",
        "description": "Get daily usage in billing units for cost tracking",
        "inputSchema": DAILY_RANGE_SCHEMA,
    },
    {
        "name": "get_data_usage_export_status",
        "description": "Get the current status of data usage metrics export",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "update_data_usage_export_status",
        "description": "Enable or disable data usage metrics export",
        "inputSchema": {
            "type": "object",
            "properties": {
                "enabled": {
                    "type": "boolean",
                    "description": "Whether to enable or disable data usage export",
                },
            },
            "required": ["enabled"],
        },
    },
]


def resolve_date_range(args: Dict[str, Any]) -> Tuple[str, str]:
    if args.get("fromDate") and args.get("toDate"):
        return args["fromDate"], args["toDate"]

    days = args.get("days") or 7
    now = datetime.now(timezone.utc)
    past = now - timedelta(days=days)
    return past.isoformat().replace("+00:00", "Z"), now.isoformat().replace("+00:00", "Z")


def _application_name(entry: Dict[str, Any]) -> str:
    if entry.get("applicationName"):
        return entry["applicationName"]
    for dimension in entry.get("dimensions") or []:
        generic = dimension.get("genericDimension") or {}
        if generic.get("key") == "application_name":
            return generic.get("value") or "Unknown"
    return "Unknown"


def format_data_usage(response: Dict[str, Any], start_date: str, end_date: str) -> str:
    entries = response.get("entries") or response.get("data") or []
    header = f"## Data Usage Report\n\n**Period:** {start_date} to {end_date}\n\n"

    if not entries:
        return header + "**No usage data found for the specified period.**"

    total_units = 0.0
    total_size_gb = 0.0
    breakdown: Dict[str, Dict[str, float]] = {}

    for entry in entries:
        units = entry.get("units") or 0
        size_gb = entry.get("sizeGb") or 0
        total_units += units
        total_size_gb += size_gb

        stats = breakdown.setdefault(_application_name(entry), {"units": 0.0, "sizeGb": 0.0, "count": 0})
        stats["units"] += units
        stats["sizeGb"] += size_gb
        stats["count"] += 1

    result = header
    result += "### Summary\n"
    result += f"- **Total Data Processed:** {total_size_gb:.4f} GB\n"
    result += f"- **Total Units Consumed:** {total_units:.4f} units\n"
    result += f"- **Estimated Cost:** ${total_units * UNIT_PRICE_USD:.2f}\n"
    result += f"- **Total Entries:** {len(entries)}\n\n"

    result += "### Breakdown by Application\n\n"
    for app, stats in breakdown.items():
        result += f"**{app}:**\n"
        result += f"  - Data: {stats['sizeGb']:.4f} GB\n"
        result += f"  - Units: {stats['units']:.4f}\n"
        result += f"  - Cost: ${stats['units'] * UNIT_PRICE_USD:.2f}\n"
        result += f"  - Entries: {stats['count']}\n\n"

    result += "### Pricing Information\n"
    result += "- **High Priority (Frequent Search):** 1 GB = 0.75 units\n"
    result += "- **Medium Priority (Monitoring):** 1 GB = 0.32 units\n"
    result += "- **Low Priority (Compliance):** 1 GB = 0.12 units\n"
    result += "- **Metrics:** 30 GB = 1 unit\n"
    result += "- **1 unit = $1.50**\n"
    return result


def format_quota(quota: Dict[str, Any]) -> str:
    result = "## Current Quota Information\n\n"

    if quota.get("usedQuotaGb") is not None:
        result += "### Data Usage\n"
        result += f"- **Used Quota:** {quota['usedQuotaGb']:.4f} GB\n"
        if quota.get("remainingQuotaGb") is not None:
            result += f"- **Remaining Quota:** {quota['remainingQuotaGb']:.4f} GB\n"
        if quota.get("dailyQuotaGb") is not None:
            result += f"- **Daily Quota:** {quota['dailyQuotaGb']:.4f} GB\n"

    units = quota.get("units")
    if units:
        result += "\n### Unit Consumption\n"
        if units.get("usedUnits") is not None:
            result += f"- **Used Units:** {units['usedUnits']:.4f} units\n"
            result += f"- **Estimated Cost:** ${units['usedUnits'] * UNIT_PRICE_USD:.2f}\n"
        if units.get("remainingUnits") is not None:
            result += f"- **Remaining Units:** {units['remainingUnits']:.4f} units\n"
        if units.get("dailyQuotaUnits") is not None:
            result += f"- **Daily Quota Units:** {units['dailyQuotaUnits']:.4f} units\n"

    if not quota.get("usedQuotaGb") and not units:
        result += "**No quota information available at this time.**\n"
        result += "This may be due to API limitations or insufficient permissions.\n"

    result += "\n### Notes\n"
    result += "- Quota information is based on recent usage data\n"
    result += "- Data may be delayed by up to 15 minutes\n"
    result += "- 1 unit = $1.50 in billing costs\n"
    return result


def format_daily_usage(
    title: str,
    items: List[Dict[str, Any]],
    value_key: str,
    icon: str,
    label: str,
    unit: str,
    range_name: Optional[str],
    decimals: bool = False
) -> str:
    total = sum(item.get(value_key) or 0 for item in items)
    average = total / len(items) if items else 0

    def render(value: float) -> str:
        return f"{value:.2f}" if decimals else f"{round(value):,}"

    result = f"{title}\n{'=' * len(title)}\n\n"
    result += f"{icon} Total {label}: {render(total)}{' GB' if decimals else ''}\n"
    result += f"📅 Days: {len(items)}\n"
    result += f"📊 Average per Day: {render(average)}{' GB' if decimals else ''}\n"
    result += f"📈 Range: {range_name or 'custom'}\n\n"

    if items:
        result += "Daily Breakdown:\n" + "=" * 16 + "\n"
        for item in items:
            result += f"{item.get('date')}: {render(item.get(value_key) or 0)} {unit}\n"

    return result


def _custom_range(args: Dict[str, Any]) -> Optional[Dict[str, str]]:
    if args.get("fromDate") and args.get("toDate"):
        return {"fromDate": args["fromDate"], "toDate": args["toDate"]}
    return None


def _export_state(enabled: Any) -> str:
    return "🟢 ENABLED" if enabled else "🔴 DISABLED"


async def handle_billing_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "get_data_usage":
        start_date, end_date = resolve_date_range(args)
        try:
            response = merge_blocks(
                await client.get_data_usage(
                    start_date, end_date, args.get("resolution") or "6h", args.get("aggregate")
                )
            )
        except Exception as e:
            raise RuntimeError(f"Failed to get data usage: {e}") from e
        return format_data_usage(response, start_date, end_date)

    if name == "get_current_quota":
        try:
            quota = await client.get_quota_info()
        except Exception as e:
            raise RuntimeError(f"Failed to get quota information: {e}") from e
        return format_quota(quota)

    if name == "get_daily_usage_tokens":
        response = merge_blocks(await client.get_daily_usage_tokens(args.get("range"), _custom_range(args)))
        return format_daily_usage(
            "Daily Evaluation Tokens Usage", response.get("tokens") or [],
            "evaluationTokens", "🎯", "Tokens", "tokens", args.get("range"),
        )

    if name == "get_daily_usage_gbs":
        response = merge_blocks(await client.get_daily_usage_gbs(args.get("range"), _custom_range(args)))
        return format_daily_usage(
            "Daily Processed GBs Usage", response.get("gbs") or [],
            "processedGigabytes", "💾", "GBs", "GB", args.get("range"), decimals=True,
        )

    if name == "get_daily_usage_units":
        response = merge_blocks(await client.get_daily_usage_units(args.get("range"), _custom_range(args)))
        return format_daily_usage(
            "Daily Billing Units Usage", response.get("units") or [],
            "units", "💰", "Units", "units", args.get("range"),
        )

    if name == "get_data_usage_export_status":
        response = merge_blocks(await client.get_data_usage_export_status())
        enabled = response.get("enabled")
        result = "Data Usage Export Status\n" + "=" * 24 + "\n\n"
        result += f"📤 Export Status: {_export_state(enabled)}\n"
        result += f"📊 External Integration: {'Active' if enabled else 'Inactive'}\n\n"
        if enabled:
            result += "✅ Data usage metrics are being exported to external systems.\n"
        else:
            result += "❌ Data usage metrics export is disabled.\n"
            result += "   Use 'update_data_usage_export_status' to enable export.\n"
        return result

    if name == "update_data_usage_export_status":
        enabled = args["enabled"]
        await client.update_data_usage_export_status(enabled)
        result = "Data Usage Export Status Updated\n" + "=" * 32 + "\n\n"
        result += f"📤 New Status: {_export_state(enabled)}\n\n"
        if enabled:
            result += "✅ Data usage metrics export has been enabled.\n"
        else:
            result += "❌ Data usage metrics export has been disabled.\n"
        return result

    raise ValueError(f"Unknown billing tool: {name}")

"""
Alert definition management tools.

Covers CRUD on alert definitions, the guided threshold/tracing alert
builders, alert events, backups, version lookup, filtered search and bulk
operations.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .. import config
from ..formatters import format_timestamp, get_priority_label, get_type_label, humanize_enum

PRIORITIES = [
    "ALERT_DEF_PRIORITY_P1",
    "ALERT_DEF_PRIORITY_P2",
    "ALERT_DEF_PRIORITY_P3",
    "ALERT_DEF_PRIORITY_P4",
    "ALERT_DEF_PRIORITY_P5_OR_UNSPECIFIED",
]

ALERT_TYPES = [
    "ALERT_DEF_TYPE_LOGS_IMMEDIATE_OR_UNSPECIFIED",
    "ALERT_DEF_TYPE_LOGS_THRESHOLD",
    "ALERT_DEF_TYPE_LOGS_ANOMALY",
    "ALERT_DEF_TYPE_LOGS_RATIO_THRESHOLD",
    "ALERT_DEF_TYPE_LOGS_NEW_VALUE",
    "ALERT_DEF_TYPE_LOGS_UNIQUE_COUNT",
    "ALERT_DEF_TYPE_LOGS_TIME_RELATIVE_THRESHOLD",
    "ALERT_DEF_TYPE_METRIC_THRESHOLD",
    "ALERT_DEF_TYPE_METRIC_ANOMALY",
    "ALERT_DEF_TYPE_TRACING_IMMEDIATE",
    "ALERT_DEF_TYPE_TRACING_THRESHOLD",
    "ALERT_DEF_TYPE_FLOW",
    "ALERT_DEF_TYPE_SLO_THRESHOLD",
]

LOG_SEVERITIES = [
    "LOG_SEVERITY_VERBOSE_UNSPECIFIED",
    "LOG_SEVERITY_DEBUG",
    "LOG_SEVERITY_INFO",
    "LOG_SEVERITY_WARNING",
    "LOG_SEVERITY_ERROR",
    "LOG_SEVERITY_CRITICAL",
]

LOGS_TIME_WINDOWS = [
    "LOGS_TIME_WINDOW_VALUE_MINUTES_5_OR_UNSPECIFIED",
    "LOGS_TIME_WINDOW_VALUE_MINUTES_10",
    "LOGS_TIME_WINDOW_VALUE_MINUTES_15",
    "LOGS_TIME_WINDOW_VALUE_MINUTES_30",
    "LOGS_TIME_WINDOW_VALUE_HOURS_1",
    "LOGS_TIME_WINDOW_VALUE_HOURS_2",
    "LOGS_TIME_WINDOW_VALUE_HOURS_6",
    "LOGS_TIME_WINDOW_VALUE_HOURS_12",
    "LOGS_TIME_WINDOW_VALUE_HOURS_24",
]

METRIC_TIME_WINDOWS = [
    "METRIC_TIME_WINDOW_VALUE_MINUTES_1_OR_UNSPECIFIED",
    "METRIC_TIME_WINDOW_VALUE_MINUTES_5",
    "METRIC_TIME_WINDOW_VALUE_MINUTES_10",
    "METRIC_TIME_WINDOW_VALUE_MINUTES_15",
    "METRIC_TIME_WINDOW_VALUE_MINUTES_30",
    "METRIC_TIME_WINDOW_VALUE_HOURS_1",
    "METRIC_TIME_WINDOW_VALUE_HOURS_2",
    "METRIC_TIME_WINDOW_VALUE_HOURS_6",
    "METRIC_TIME_WINDOW_VALUE_HOURS_12",
    "METRIC_TIME_WINDOW_VALUE_HOURS_24",
]

TRACING_TIME_WINDOWS = [
    "TRACING_TIME_WINDOW_VALUE_MINUTES_5_OR_UNSPECIFIED",
    "TRACING_TIME_WINDOW_VALUE_MINUTES_10",
    "TRACING_TIME_WINDOW_VALUE_MINUTES_15",
    "TRACING_TIME_WINDOW_VALUE_MINUTES_30",
    "TRACING_TIME_WINDOW_VALUE_HOURS_1",
]

DEFAULT_RANGE_START = "2020-01-01T00:00:00Z"
EVALUATION_DELAY_MS = 60000

CONFIG_NOTE = "⚠️ MANAGES ALERT CONFIGURATION - NOT ACTUAL LOGS. "
LOGS_HINT = ' If user asks for "logs" or "error logs", use query_dataprime or query_lucene instead.'


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _string_list(description: str, enum: Optional[List[str]] = None) -> Dict[str, Any]:
    items: Dict[str, Any] = {"type": "string"}
    if enum:
        items["enum"] = enum
    return {"type": "array", "items": items, "description": description}


PRIORITY_PROPERTY = {
    "type": "string",
    "enum": PRIORITIES,
    "description": "Alert priority (P1=Critical, P5=Info)",
}

NOTIFICATION_PROPERTIES = {
    "groupByKeys": _string_list('Keys to group alerts by (e.g., ["service", "region"])'),
    "enabled": {"type": "boolean", "description": "Whether to enable the alert immediately (default: true)"},
    "notificationEmails": _string_list("Email addresses for notifications"),
}

ALERT_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "list_alert_definitions",
        "description": (
            CONFIG_NOTE + "List all alert definitions (rules) in your Coralogix account with their IDs, "
            "names, types, enabled status and priority." + LOGS_HINT
        ),
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_alert_definition",
        "description": (
            CONFIG_NOTE + "Get the detailed configuration of a specific alert definition by ID." + LOGS_HINT
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": _string("The unique identifier of the alert definition. Get this from list_alert_definitions."),
            },
            "required": ["id"],
        },
    },
    {
        "name": "create_alert_definition",
        "description": (
            "⚠️ CREATES ALERT CONFIGURATION - NOT FOR VIEWING LOGS. Create a new alert definition to "
            "monitor logs, metrics, or traces." + LOGS_HINT
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": _string('A descriptive name for the alert (e.g., "High Error Rate - Payment Service")'),
                "description": _string("What this alert monitors and when it should trigger"),
                "priority": {
                    "type": "string",
                    "enum": PRIORITIES,
                    "description": "Alert priority level. P1 is highest (critical), P5 is lowest (informational)",
                },
                "enabled": {
                    "type": "boolean",
                    "description": "Whether the alert should be active immediately after creation. Default is true.",
                },
                "type": {
                    "type": "string",
                    "enum": ALERT_TYPES,
                    "description": "Type of alert rule",
                },
                "logsFilter": {"type": "object", "description": "Log filter configuration for log-based alerts"},
                "metricFilter": {"type": "object", "description": "Metric filter configuration for metric-based alerts"},
                "notificationGroup": {"type": "object", "description": "Notification configuration for when the alert triggers"},
            },
            "required": ["name", "priority", "type"],
        },
    },
    {
        "name": "update_alert_definition",
        "description": (
            "⚠️ UPDATES ALERT CONFIGURATION - NOT FOR VIEWING LOGS. Update an existing alert definition. "
            "The given properties are merged over the current configuration." + LOGS_HINT
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": _string("The unique identifier of the alert definition to update"),
                "alertDefProperties": {
                    "type": "object",
                    "description": "Alert definition properties to change. Use get_alert_definition first to see the current config.",
                },
            },
            "required": ["id", "alertDefProperties"],
        },
    },
    {
        "name": "delete_alert_definition",
        "description": (
            "⚠️ DELETES ALERT CONFIGURATION - NOT FOR VIEWING LOGS. Permanently delete an alert definition. "
            "This action cannot be undone." + LOGS_HINT
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": _string("The unique identifier of the alert definition to delete. Get this from list_alert_definitions."),
            },
            "required": ["id"],
        },
    },
    {
        "name": "set_alert_active",
        "description": (
            CONFIG_NOTE + "Enable or disable an alert definition without deleting it." + LOGS_HINT
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "id": _string("The unique identifier of the alert definition to enable/disable"),
                "active": {"type": "boolean", "description": "true to enable the alert, false to disable it"},
            },
            "required": ["id", "active"],
        },
    },
    {
        "name": "create_logs_threshold_alert",
        "description": (
            "🚨 CREATE ADVANCED LOGS THRESHOLD ALERT - Create a log count threshold alert with filtering, "
            "time windows, and notification settings. Triggers when log counts cross a threshold within a time window."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": _string('Alert name (e.g., "High Error Rate - Payment Service")'),
                "description": _string("Detailed description of what this alert monitors"),
                "priority": PRIORITY_PROPERTY,
                "luceneQuery": _string('Lucene query to filter logs (e.g., "level:ERROR AND service:payment")'),
                "applicationName": _string("Application name to filter by"),
                "subsystemName": _string("Subsystem name to filter by"),
                "severities": _string_list("Log severity levels to include", LOG_SEVERITIES),
                "threshold": {"type": "number", "description": "Threshold count for triggering the alert"},
                "conditionType": {
                    "type": "string",
                    "enum": [
                        "LOGS_THRESHOLD_CONDITION_TYPE_MORE_THAN_OR_UNSPECIFIED",
                        "LOGS_THRESHOLD_CONDITION_TYPE_LESS_THAN",
                        "LOGS_THRESHOLD_CONDITION_TYPE_EQUALS",
                        "LOGS_THRESHOLD_CONDITION_TYPE_NOT_EQUALS",
                    ],
                    "description": "Condition type for threshold comparison",
                },
                "timeWindow": {
                    "type": "string",
                    "enum": LOGS_TIME_WINDOWS,
                    "description": "Time window for threshold evaluation",
                },
                **NOTIFICATION_PROPERTIES,
            },
            "required": ["name", "priority", "threshold", "conditionType", "timeWindow"],
        },
    },
    {
        "name": "create_metric_threshold_alert",
        "description": (
            "📊 CREATE ADVANCED METRIC THRESHOLD ALERT - Create a metric threshold alert from a PromQL query "
            "with time windows and conditions."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": _string('Alert name (e.g., "High CPU Usage - Production Cluster")'),
                "description": _string("Detailed description of what this alert monitors"),
                "priority": PRIORITY_PROPERTY,
                "promqlQuery": _string('PromQL query for metric filtering (e.g., "avg_over_time(cpu_usage[5m]) > 80")'),
                "threshold": {"type": "number", "description": "Threshold value for triggering the alert"},
                "conditionType": {
                    "type": "string",
                    "enum": [
                        "METRIC_THRESHOLD_CONDITION_TYPE_MORE_THAN_OR_UNSPECIFIED",
                        "METRIC_THRESHOLD_CONDITION_TYPE_LESS_THAN",
                        "METRIC_THRESHOLD_CONDITION_TYPE_EQUALS",
                        "METRIC_THRESHOLD_CONDITION_TYPE_NOT_EQUALS",
                    ],
                    "description": "Condition type for threshold comparison",
                },
                "timeWindow": {
                    "type": "string",
                    "enum": METRIC_TIME_WINDOWS,
                    "description": "Time window for threshold evaluation",
                },
                "forOverPct": {"type": "number", "description": "Percentage of time the condition must be true (0-100)"},
                **NOTIFICATION_PROPERTIES,
            },
            "required": ["name", "priority", "promqlQuery", "threshold", "conditionType", "timeWindow"],
        },
    },
    {
        "name": "create_tracing_alert",
        "description": (
            "🔍 CREATE ADVANCED TRACING ALERT - Create an immediate or threshold tracing alert for latency "
            "and service performance monitoring."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": _string('Alert name (e.g., "High Latency - Checkout Service")'),
                "description": _string("Detailed description of what this alert monitors"),
                "priority": PRIORITY_PROPERTY,
                "alertType": {
                    "type": "string",
                    "enum": ["ALERT_DEF_TYPE_TRACING_IMMEDIATE", "ALERT_DEF_TYPE_TRACING_THRESHOLD"],
                    "description": "Immediate triggers on any matching span, threshold triggers on span count",
                },
                "applicationName": _string("Application name to filter traces by"),
                "serviceName": _string("Service name to filter traces by"),
                "operationName": _string("Operation name to filter traces by"),
                "latencyThresholdMs": {"type": "number", "description": "Latency threshold in milliseconds for span filtering"},
                "spanAmountThreshold": {"type": "number", "description": "Number of spans threshold (for threshold alerts)"},
                "timeWindow": {
                    "type": "string",
                    "enum": TRACING_TIME_WINDOWS,
                    "description": "Time window for threshold evaluation (for threshold alerts)",
                },
                **NOTIFICATION_PROPERTIES,
            },
            "required": ["name", "priority", "alertType"],
        },
    },
    {
        "name": "get_alert_events",
        "description": (
            "📋 GET ALERT EVENTS - Retrieve a triggered alert event by ID, or alert event statistics "
            "when no event ID is given."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "eventId": _string("Specific alert event ID to retrieve (optional - if not provided, gets statistics)"),
                "startTime": _string('Start time for events query (ISO 8601, e.g., "2024-01-01T00:00:00Z")'),
                "endTime": _string('End time for events query (ISO 8601, e.g., "2024-01-01T23:59:59Z")'),
                "alertDefIds": _string_list("Filter by specific alert definition IDs"),
                "priorities": _string_list("Filter by alert priorities", PRIORITIES),
                "status": _string_list("Filter by alert event status", ["TRIGGERED", "RESOLVED"]),
            },
            "required": [],
        },
    },
    {
        "name": "download_alerts_backup",
        "description": "💾 DOWNLOAD ALERTS BACKUP - Download a complete backup of all alert definitions in your account.",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_alert_by_version",
        "description": "🔄 GET ALERT BY VERSION ID - Retrieve a specific version of an alert definition.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "versionId": _string("The alert version ID to retrieve"),
            },
            "required": ["versionId"],
        },
    },
    {
        "name": "search_alerts",
        "description": (
            "🔍 ADVANCED ALERT SEARCH - Search alerts by name pattern, type, priority, enabled status, "
            "modification and trigger dates, entity labels and SLO."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "namePattern": _string("Search pattern for alert names (supports partial matching)"),
                "nameMatchType": {
                    "type": "string",
                    "enum": ["FILTER_MATCHER_EQUALS", "FILTER_MATCHER_NOT_EQUALS", "FILTER_MATCHER_CONTAINS"],
                    "description": "How to match the name pattern (default: contains)",
                },
                "alertTypes": _string_list("Filter by specific alert types", ALERT_TYPES),
                "priorities": _string_list("Filter by alert priorities", PRIORITIES),
                "enabled": {"type": "boolean", "description": "Filter by enabled status"},
                "modifiedAfter": _string("Show alerts modified after this date (ISO 8601)"),
                "modifiedBefore": _string("Show alerts modified before this date (ISO 8601)"),
                "lastTriggeredAfter": _string("Show alerts last triggered after this date (ISO 8601)"),
                "lastTriggeredBefore": _string("Show alerts last triggered before this date (ISO 8601)"),
                "entityLabels": _string('Filter by entity label key-value pairs (e.g., "environment=production")'),
                "sloIds": _string_list("Filter SLO alerts by specific SLO IDs"),
                "pageSize": {"type": "number", "description": "Number of results per page (max 1000, default 200)"},
                "pageToken": _string("Page token for pagination (from previous response)"),
            },
            "required": [],
        },
    },
    {
        "name": "bulk_manage_alerts",
        "description": (
            "⚙️ BULK ALERT MANAGEMENT - Enable, disable, delete or list many alerts at once, selected by "
            "IDs or by search criteria."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "operation": {
                    "type": "string",
                    "enum": ["enable", "disable", "delete", "list_by_ids"],
                    "description": "Bulk operation to perform on the alerts",
                },
                "alertIds": _string_list("List of alert definition IDs to operate on"),
                "searchCriteria": {
                    "type": "object",
                    "description": "Alternative to alertIds - search criteria to find alerts to operate on",
                    "properties": {
                        "namePattern": {"type": "string"},
                        "alertTypes": {"type": "array", "items": {"type": "string"}},
                        "priorities": {"type": "array", "items": {"type": "string"}},
                        "enabled": {"type": "boolean"},
                    },
                },
                "confirmOperation": {
                    "type": "boolean",
                    "description": "Set to true to confirm destructive operations (required for delete)",
                },
            },
            "required": ["operation"],
        },
    },
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _status_icon(enabled: Any) -> str:
    return "🟢 Enabled" if enabled else "🔴 Disabled"


def _status_word(enabled: Any) -> str:
    return "Enabled" if enabled else "Disabled"


def _alert_def(response: Dict[str, Any]) -> Dict[str, Any]:
    return response.get("alertDef") or {}


def build_notification_group(args: Dict[str, Any]) -> Dict[str, Any]:
    """Notification settings for the guided alert builders (webhook to the default integration)."""
    group: Dict[str, Any] = {}
    if args.get("groupByKeys"):
        group["groupByKeys"] = args["groupByKeys"]
    if args.get("notificationEmails"):
        group["webhooks"] = [
            {
                "minutes": 15,
                "notifyOn": "NOTIFY_ON_TRIGGERED_ONLY_UNSPECIFIED",
                "integration": {
                    "integrationId": 1,
                    "recipients": {"emails": args["notificationEmails"]},
                },
            }
        ]
    return group


def _base_properties(args: Dict[str, Any], alert_type: str) -> Dict[str, Any]:
    properties = {
        "name": args["name"],
        "description": args.get("description"),
        "priority": args["priority"],
        "type": alert_type,
        "enabled": args.get("enabled", True),
    }
    if args.get("groupByKeys") is not None:
        properties["groupByKeys"] = args["groupByKeys"]
    notification_group = build_notification_group(args)
    if notification_group:
        properties["notificationGroup"] = notification_group
    return properties


def build_logs_filter(args: Dict[str, Any]) -> Dict[str, Any]:
    simple_filter: Dict[str, Any] = {}
    if args.get("luceneQuery"):
        simple_filter["luceneQuery"] = args["luceneQuery"]

    if args.get("applicationName") or args.get("subsystemName") or args.get("severities"):
        label_filters: Dict[str, Any] = {}
        for key in ("applicationName", "subsystemName"):
            if args.get(key):
                label_filters[key] = [
                    {"value": args[key], "operation": "LOG_FILTER_OPERATION_TYPE_IS_OR_UNSPECIFIED"}
                ]
        if args.get("severities"):
            label_filters["severities"] = args["severities"]
        simple_filter["labelFilters"] = label_filters

    return {"simpleFilter": simple_filter}


def build_tracing_filter(args: Dict[str, Any]) -> Dict[str, Any]:
    label_filters: Dict[str, Any] = {}
    for key in ("applicationName", "serviceName", "operationName"):
        if args.get(key):
            label_filters[key] = [
                {"values": [args[key]], "operation": "TRACING_FILTER_OPERATION_TYPE_IS_OR_UNSPECIFIED"}
            ]

    simple_filter: Dict[str, Any] = {"tracingLabelFilters": label_filters}
    if args.get("latencyThresholdMs"):
        simple_filter["latencyThresholdMs"] = args["latencyThresholdMs"]
    return {"simpleFilter": simple_filter}


def build_name_filters(criteria: Dict[str, Any], name_matcher: str = "FILTER_MATCHER_CONTAINS") -> Dict[str, Any]:
    """Query filter shared by search_alerts and bulk_manage_alerts."""
    query_filter: Dict[str, Any] = {}
    if criteria.get("namePattern"):
        query_filter["nameFilter"] = {"name": [criteria["namePattern"]], "matcher": name_matcher}
    if criteria.get("alertTypes"):
        query_filter["typeFilter"] = {"type": criteria["alertTypes"], "matcher": "FILTER_MATCHER_EQUALS"}
    if criteria.get("priorities"):
        query_filter["priorityFilter"] = {"priority": criteria["priorities"], "matcher": "FILTER_MATCHER_EQUALS"}
    if criteria.get("enabled") is not None:
        query_filter["enabledFilter"] = {"enabled": criteria["enabled"]}
    return query_filter


def build_search_request(args: Dict[str, Any]) -> Dict[str, Any]:
    query_filter = build_name_filters(args, args.get("nameMatchType") or "FILTER_MATCHER_CONTAINS")

    if args.get("modifiedAfter") or args.get("modifiedBefore"):
        query_filter["modifiedTimeRangeFilter"] = {
            "modifiedAtRange": {
                "startTime": args.get("modifiedAfter") or DEFAULT_RANGE_START,
                "endTime": args.get("modifiedBefore") or _now_iso(),
            }
        }

    if args.get("lastTriggeredAfter") or args.get("lastTriggeredBefore"):
        query_filter["lastTriggeredTimeRangeFilter"] = {
            "lastTriggeredAtRange": {
                "startTime": args.get("lastTriggeredAfter") or DEFAULT_RANGE_START,
                "endTime": args.get("lastTriggeredBefore") or _now_iso(),
            }
        }

    if args.get("entityLabels"):
        query_filter["entityLabelsFilter"] = {
            "entityLabels": args["entityLabels"],
            "valuesOperator": "FILTER_VALUES_OPERATOR_AND",
        }

    if args.get("sloIds"):
        query_filter["typeSpecificFilter"] = {
            "sloFilter": {"sloId": args["sloIds"], "matcher": "FILTER_MATCHER_EQUALS"}
        }

    request: Dict[str, Any] = {"pagination": {"pageSize": int(args.get("pageSize") or 200)}}
    if args.get("pageToken"):
        request["pagination"]["pageToken"] = args["pageToken"]
    if query_filter:
        request["queryFilter"] = query_filter
    return request


# ----------------------------------------------------------------------
# Handlers
# ----------------------------------------------------------------------


async def handle_list_alert_definitions(client, args: Dict[str, Any]) -> str:
    response = await client.list_alert_defs()
    alert_defs = response.get("alertDefs") or []

    if not alert_defs:
        return "No alert definitions found in your Coralogix account."

    result = f"Alert Definitions ({len(alert_defs)} found)\n" + "=" * 50 + "\n\n"

    for i, alert in enumerate(alert_defs, 1):
        props = alert.get("alertDefProperties") or {}
        result += f"{i}. {props.get('name')}\n"
        result += f"   ID: {alert.get('id')}\n"
        result += f"   Status: {_status_icon(props.get('enabled'))}\n"
        result += f"   Priority: {get_priority_label(props.get('priority'))}\n"
        result += f"   Type: {get_type_label(props.get('type'))}\n"
        if props.get("description"):
            result += f"   Description: {props['description']}\n"
        if props.get("groupByKeys"):
            result += f"   Group By: {', '.join(props['groupByKeys'])}\n"
        if alert.get("createdTime"):
            result += f"   Created: {format_timestamp(alert['createdTime'])}\n"
        if alert.get("updatedTime"):
            result += f"   Updated: {format_timestamp(alert['updatedTime'])}\n"
        result += "\n"

    return result


async def handle_get_alert_definition(client, args: Dict[str, Any]) -> str:
    alert = _alert_def(await client.get_alert_def(args["id"]))
    props = alert.get("alertDefProperties") or {}

    result = "Alert Definition Details\n" + "=" * 30 + "\n\n"
    result += f"Name: {props.get('name')}\n"
    result += f"ID: {alert.get('id')}\n"
    result += f"Status: {_status_icon(props.get('enabled'))}\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"Type: {get_type_label(props.get('type'))}\n"

    if props.get("description"):
        result += f"Description: {props['description']}\n"
    if props.get("groupByKeys"):
        result += f"Group By Keys: {', '.join(props['groupByKeys'])}\n"
    if props.get("entityLabels"):
        result += "Labels:\n"
        for key, value in props["entityLabels"].items():
            result += f"  {key}: {value}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"
    if alert.get("updatedTime"):
        result += f"Last Updated: {format_timestamp(alert['updatedTime'])}\n"
    if alert.get("alertVersionId"):
        result += f"Version ID: {alert['alertVersionId']}\n"

    return result


async def handle_create_alert_definition(client, args: Dict[str, Any]) -> str:
    properties = {
        "name": args["name"],
        "description": args.get("description"),
        "priority": args["priority"],
        "type": args["type"],
        "enabled": args.get("enabled", True),
    }
    for key in ("logsFilter", "metricFilter", "notificationGroup"):
        if args.get(key):
            properties[key] = args[key]

    alert = _alert_def(await client.create_alert_def({"alertDefProperties": properties}))
    props = alert.get("alertDefProperties") or properties

    result = "✅ Alert definition created successfully!\n\n"
    result += f"Alert ID: {alert.get('id')}\n"
    result += f"Name: {props.get('name')}\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"Type: {get_type_label(props.get('type'))}\n"
    result += f"Status: {_status_word(props.get('enabled'))}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"

    return result


async def handle_update_alert_definition(client, args: Dict[str, Any]) -> str:
    alert_id = args["id"]
    current = _alert_def(await client.get_alert_def(alert_id)).get("alertDefProperties") or {}
    merged = {**current, **args["alertDefProperties"]}

    alert = _alert_def(await client.update_alert_def(alert_id, merged))
    props = alert.get("alertDefProperties") or merged

    result = "✅ Alert definition updated successfully!\n\n"
    result += f"Alert ID: {alert.get('id', alert_id)}\n"
    result += f"Name: {props.get('name')}\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"Status: {_status_word(props.get('enabled'))}\n"
    if alert.get("updatedTime"):
        result += f"Updated: {format_timestamp(alert['updatedTime'])}\n"

    return result


async def handle_delete_alert_definition(client, args: Dict[str, Any]) -> str:
    alert_id = args["id"]
    alert = _alert_def(await client.get_alert_def(alert_id))
    name = (alert.get("alertDefProperties") or {}).get("name")

    await client.delete_alert_def(alert_id)

    return f'✅ Alert definition "{name}" (ID: {alert_id}) has been deleted successfully.'


async def handle_set_alert_active(client, args: Dict[str, Any]) -> str:
    alert_id = args["id"]
    active = args["active"]
    await client.set_alert_def_active(alert_id, active)

    action = "enabled" if active else "disabled"
    return f"✅ Alert definition (ID: {alert_id}) has been {action} successfully."


async def handle_create_logs_threshold_alert(client, args: Dict[str, Any]) -> str:
    properties = _base_properties(args, "ALERT_DEF_TYPE_LOGS_THRESHOLD")
    properties["logsThreshold"] = {
        "logsFilter": build_logs_filter(args),
        "rules": [
            {
                "condition": {
                    "threshold": args["threshold"],
                    "timeWindow": {"logsTimeWindowSpecificValue": args["timeWindow"]},
                    "conditionType": args["conditionType"],
                }
            }
        ],
        "evaluationDelayMs": EVALUATION_DELAY_MS,
    }

    alert = _alert_def(await client.create_alert_def({"alertDefProperties": properties}))
    props = alert.get("alertDefProperties") or properties

    condition = humanize_enum(args["conditionType"], "LOGS_THRESHOLD_CONDITION_TYPE_")
    window = humanize_enum(args["timeWindow"], "LOGS_TIME_WINDOW_VALUE_")

    result = "✅ Advanced logs threshold alert created successfully!\n\n"
    result += f"Alert ID: {alert.get('id')}\n"
    result += f"Name: {props.get('name')}\n"
    result += "Type: Logs Threshold Alert\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"Threshold: {args['threshold']} logs {condition} within {window}\n"
    result += f"Status: {_status_word(props.get('enabled'))}\n"
    if args.get("luceneQuery"):
        result += f"Query: {args['luceneQuery']}\n"
    if args.get("groupByKeys"):
        result += f"Grouped by: {', '.join(args['groupByKeys'])}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"

    return result


async def handle_create_metric_threshold_alert(client, args: Dict[str, Any]) -> str:
    condition: Dict[str, Any] = {
        "threshold": args["threshold"],
        "ofTheLast": {"metricTimeWindowSpecificValue": args["timeWindow"]},
        "conditionType": args["conditionType"],
    }
    if args.get("forOverPct"):
        condition["forOverPct"] = args["forOverPct"]

    properties = _base_properties(args, "ALERT_DEF_TYPE_METRIC_THRESHOLD")
    properties["metricThreshold"] = {
        "metricFilter": {"promql": args["promqlQuery"]},
        "rules": [{"condition": condition}],
        "evaluationDelayMs": EVALUATION_DELAY_MS,
    }

    alert = _alert_def(await client.create_alert_def({"alertDefProperties": properties}))
    props = alert.get("alertDefProperties") or properties

    result = "✅ Advanced metric threshold alert created successfully!\n\n"
    result += f"Alert ID: {alert.get('id')}\n"
    result += f"Name: {props.get('name')}\n"
    result += "Type: Metric Threshold Alert\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"PromQL Query: {args['promqlQuery']}\n"
    result += f"Threshold: {args['threshold']} {humanize_enum(args['conditionType'], 'METRIC_THRESHOLD_CONDITION_TYPE_')}\n"
    result += f"Time Window: {humanize_enum(args['timeWindow'], 'METRIC_TIME_WINDOW_VALUE_')}\n"
    if args.get("forOverPct"):
        result += f"For Over: {args['forOverPct']}% of the time\n"
    result += f"Status: {_status_word(props.get('enabled'))}\n"
    if args.get("groupByKeys"):
        result += f"Grouped by: {', '.join(args['groupByKeys'])}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"

    return result


async def handle_create_tracing_alert(client, args: Dict[str, Any]) -> str:
    alert_type = args["alertType"]
    tracing_filter = build_tracing_filter(args)
    properties = _base_properties(args, alert_type)

    if alert_type == "ALERT_DEF_TYPE_TRACING_IMMEDIATE":
        properties["tracingImmediate"] = {"tracingFilter": tracing_filter}
    else:
        properties["tracingThreshold"] = {
            "tracingFilter": tracing_filter,
            "rules": [
                {
                    "condition": {
                        "spanAmount": args.get("spanAmountThreshold") or 1,
                        "timeWindow": {
                            "tracingTimeWindowValue": args.get("timeWindow") or TRACING_TIME_WINDOWS[0]
                        },
                        "conditionType": "TRACING_THRESHOLD_CONDITION_TYPE_MORE_THAN_OR_UNSPECIFIED",
                    }
                }
            ],
        }

    alert = _alert_def(await client.create_alert_def({"alertDefProperties": properties}))
    props = alert.get("alertDefProperties") or properties

    result = "✅ Advanced tracing alert created successfully!\n\n"
    result += f"Alert ID: {alert.get('id')}\n"
    result += f"Name: {props.get('name')}\n"
    result += f"Type: {get_type_label(alert_type)}\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    if args.get("applicationName"):
        result += f"Application: {args['applicationName']}\n"
    if args.get("serviceName"):
        result += f"Service: {args['serviceName']}\n"
    if args.get("operationName"):
        result += f"Operation: {args['operationName']}\n"
    if args.get("latencyThresholdMs"):
        result += f"Latency Threshold: {args['latencyThresholdMs']}ms\n"
    if args.get("spanAmountThreshold"):
        result += f"Span Threshold: {args['spanAmountThreshold']}\n"
    if args.get("timeWindow"):
        result += f"Time Window: {humanize_enum(args['timeWindow'], 'TRACING_TIME_WINDOW_VALUE_')}\n"
    result += f"Status: {_status_word(props.get('enabled'))}\n"
    if args.get("groupByKeys"):
        result += f"Grouped by: {', '.join(args['groupByKeys'])}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"

    return result


async def handle_get_alert_events(client, args: Dict[str, Any]) -> str:
    if args.get("eventId"):
        response = await client.get_alert_event(args["eventId"])
        event = response.get("alertEvent") or {}

        status = "🔴 TRIGGERED" if event.get("status") == "TRIGGERED" else "🟢 RESOLVED"
        result = "Alert Event Details\n" + "=" * 25 + "\n\n"
        result += f"Event ID: {event.get('id')}\n"
        result += f"Alert Definition: {event.get('alertDefName')} ({event.get('alertDefId')})\n"
        result += f"Priority: {get_priority_label(event.get('alertDefPriority'))}\n"
        result += f"Type: {get_type_label(event.get('alertDefType'))}\n"
        result += f"Status: {status}\n"
        result += f"Timestamp: {format_timestamp(event.get('timestamp'))}\n"

        for title, key in (("Group By Values", "groupByValues"), ("Entity Labels", "entityLabels")):
            if event.get(key):
                result += f"{title}:\n"
                for label, value in event[key].items():
                    result += f"  {label}: {value}\n"

        return result

    filters = {
        key: args[key]
        for key in ("startTime", "endTime", "alertDefIds", "priorities", "status")
        if args.get(key)
    }
    response = await client.get_alert_events_statistics(filters)
    time_range = response.get("timeRange") or {}

    result = "Alert Events Statistics\n" + "=" * 30 + "\n\n"
    result += f"Total Events: {response.get('totalCount', 0)}\n"
    result += f"🔴 Triggered: {response.get('triggeredCount', 0)}\n"
    result += f"🟢 Resolved: {response.get('resolvedCount', 0)}\n"
    result += (
        f"Time Range: {format_timestamp(time_range.get('startTime'))} - "
        f"{format_timestamp(time_range.get('endTime'))}\n"
    )
    return result


async def handle_download_alerts_backup(client, args: Dict[str, Any]) -> str:
    response = await client.download_alerts()
    alert_defs = (response.get("alertDefs") if isinstance(response, dict) else None) or []

    result = "✅ Alert definitions backup downloaded successfully!\n\n"

    if not alert_defs:
        return result + "No alert definitions found to backup.\n"

    type_counts = Counter(
        get_type_label((alert.get("alertDefProperties") or {}).get("type")) for alert in alert_defs
    )

    result += f"Total Alert Definitions: {len(alert_defs)}\n\n"
    result += "Summary by Type:\n"
    for alert_type, count in type_counts.items():
        result += f"  {alert_type}: {count}\n"

    result += "\nBackup includes full configuration for all alert definitions including:\n"
    result += "- Alert filters and conditions\n"
    result += "- Notification settings\n"
    result += "- Time windows and thresholds\n"
    result += "- Group by configurations\n"
    result += "- Entity labels and metadata\n"
    return result


async def handle_get_alert_by_version(client, args: Dict[str, Any]) -> str:
    version_id = args["versionId"]
    alert = _alert_def(await client.get_alert_def_by_version_id(version_id))
    props = alert.get("alertDefProperties") or {}

    result = f"Alert Definition (Version {version_id})\n" + "=" * 40 + "\n\n"
    result += f"Name: {props.get('name')}\n"
    result += f"Alert ID: {alert.get('id')}\n"
    result += f"Version ID: {version_id}\n"
    result += f"Status: {_status_icon(props.get('enabled'))}\n"
    result += f"Priority: {get_priority_label(props.get('priority'))}\n"
    result += f"Type: {get_type_label(props.get('type'))}\n"
    if props.get("description"):
        result += f"Description: {props['description']}\n"
    if props.get("groupByKeys"):
        result += f"Group By Keys: {', '.join(props['groupByKeys'])}\n"
    if alert.get("createdTime"):
        result += f"Created: {format_timestamp(alert['createdTime'])}\n"
    if alert.get("updatedTime"):
        result += f"Last Updated: {format_timestamp(alert['updatedTime'])}\n"
    if alert.get("lastTriggeredTime"):
        result += f"Last Triggered: {format_timestamp(alert['lastTriggeredTime'])}\n"

    return result


async def handle_search_alerts(client, args: Dict[str, Any]) -> str:
    response = await client.list_alert_defs_with_filter(build_search_request(args))
    alert_defs = response.get("alertDefs") or []
    pagination = response.get("pagination") or {}

    result = "🔍 Alert Search Results\n" + "=" * 30 + "\n\n"

    if not alert_defs:
        return result + "No alerts found matching the search criteria.\n"

    result += f"Found {len(alert_defs)} alerts"
    if pagination.get("totalSize"):
        result += f" ({pagination['totalSize']} total)"
    result += "\n\n"

    all_props = [alert.get("alertDefProperties") or {} for alert in alert_defs]
    enabled = sum(1 for props in all_props if props.get("enabled"))
    type_counts = Counter(get_type_label(props.get("type")) for props in all_props)
    priority_counts = Counter(get_priority_label(props.get("priority")) for props in all_props)

    result += "Summary:\n"
    result += f"  🟢 Enabled: {enabled}\n"
    result += f"  🔴 Disabled: {len(all_props) - enabled}\n\n"

    result += "By Type:\n"
    for alert_type, count in type_counts.items():
        result += f"  {alert_type}: {count}\n"
    result += "\nBy Priority:\n"
    for priority, count in priority_counts.items():
        result += f"  {priority}: {count}\n"
    result += "\n"

    result += "Alert Details:\n" + "-" * 20 + "\n"
    for i, (alert, props) in enumerate(zip(alert_defs, all_props), 1):
        result += f"{i}. {props.get('name')}\n"
        result += f"   ID: {alert.get('id')}\n"
        result += f"   Status: {_status_icon(props.get('enabled'))}\n"
        result += f"   Priority: {get_priority_label(props.get('priority'))}\n"
        result += f"   Type: {get_type_label(props.get('type'))}\n"
        if alert.get("createdTime"):
            result += f"   Created: {format_timestamp(alert['createdTime'])}\n"
        if alert.get("updatedTime"):
            result += f"   Modified: {format_timestamp(alert['updatedTime'])}\n"
        if alert.get("lastTriggeredTime"):
            result += f"   Last Triggered: {format_timestamp(alert['lastTriggeredTime'])}\n"
        result += "\n"

    if pagination.get("nextPageToken"):
        result += (
            f'\n📄 More results available. Use pageToken: "{pagination["nextPageToken"]}" '
            "to get next page.\n"
        )

    return result


async def _resolve_bulk_targets(client, args: Dict[str, Any]) -> List[str]:
    if args.get("alertIds"):
        return list(args["alertIds"])
    if args.get("searchCriteria"):
        response = await client.list_alert_defs_with_filter(
            {"queryFilter": build_name_filters(args["searchCriteria"])}
        )
        return [alert.get("id") for alert in response.get("alertDefs") or []]
    raise ValueError("Either alertIds or searchCriteria must be provided")


async def handle_bulk_manage_alerts(client, args: Dict[str, Any]) -> str:
    operation = args["operation"]
    targets = await _resolve_bulk_targets(client, args)

    if not targets:
        return "No alerts found to operate on."

    result = f"⚙️ Bulk Alert Management - {operation.upper()}\n" + "=" * 40 + "\n\n"
    result += f"Target alerts: {len(targets)}\n\n"

    if operation == "delete" and not args.get("confirmOperation"):
        result += "⚠️ DELETE OPERATION REQUIRES CONFIRMATION\n"
        result += "This operation will permanently delete the following alerts:\n\n"
        for alert_id in targets:
            try:
                name = (_alert_def(await client.get_alert_def(alert_id)).get("alertDefProperties") or {}).get("name")
                result += f"- {name} ({alert_id})\n"
            except Exception:
                result += f"- Alert ID: {alert_id} (unable to fetch name)\n"
        result += "\nTo proceed, set confirmOperation: true\n"
        return result

    succeeded: List[str] = []
    failed: List[Tuple[str, str]] = []

    for alert_id in targets:
        try:
            if operation == "enable":
                await client.set_alert_def_active(alert_id, True)
            elif operation == "disable":
                await client.set_alert_def_active(alert_id, False)
            elif operation == "delete":
                await client.delete_alert_def(alert_id)
            else:
                props = _alert_def(await client.get_alert_def(alert_id)).get("alertDefProperties") or {}
                result += f"{props.get('name')} ({alert_id})\n"
                result += f"  Status: {_status_icon(props.get('enabled'))}\n"
                result += f"  Priority: {get_priority_label(props.get('priority'))}\n"
                result += f"  Type: {get_type_label(props.get('type'))}\n\n"
            succeeded.append(alert_id)
        except Exception as e:
            failed.append((alert_id, str(e) or "Unknown error"))

    if operation != "list_by_ids":
        result += "Results:\n"
        result += f"✅ Successful: {len(succeeded)}\n"
        result += f"❌ Failed: {len(failed)}\n\n"
        if failed:
            result += "Failed Operations:\n"
            for alert_id, error in failed:
                result += f"- {alert_id}: {error}\n"

    return result


AlertHandler = Callable[[Any, Dict[str, Any]], Awaitable[str]]

ALERT_HANDLERS: Dict[str, Tuple[AlertHandler, str]] = {
    "list_alert_definitions": (handle_list_alert_definitions, "Failed to list alerts"),
    "get_alert_definition": (handle_get_alert_definition, "Failed to get alert"),
    "create_alert_definition": (handle_create_alert_definition, "Failed to create alert"),
    "update_alert_definition": (handle_update_alert_definition, "Failed to update alert"),
    "delete_alert_definition": (handle_delete_alert_definition, "Failed to delete alert"),
    "set_alert_active": (handle_set_alert_active, "Failed to enable/disable alert"),
    "create_logs_threshold_alert": (handle_create_logs_threshold_alert, "Failed to create logs threshold alert"),
    "create_metric_threshold_alert": (handle_create_metric_threshold_alert, "Failed to create metric threshold alert"),
    "create_tracing_alert": (handle_create_tracing_alert, "Failed to create tracing alert"),
    "get_alert_events": (handle_get_alert_events, "Failed to get alert events"),
    "download_alerts_backup": (handle_download_alerts_backup, "Failed to download alerts backup"),
    "get_alert_by_version": (handle_get_alert_by_version, "Failed to get alert by version"),
    "search_alerts": (handle_search_alerts, "Failed to search alerts"),
    "bulk_manage_alerts": (handle_bulk_manage_alerts, "Failed to perform bulk operation"),
}


async def handle_alert_tool(name: str, args: Dict[str, Any]) -> str:
    entry = ALERT_HANDLERS.get(name)
    if entry is None:
        raise ValueError(f"Unknown alert tool: {name}")

    handler, failure = entry
    client = config.get_coralogix_client()
    try:
        return await handler(client, args)
    except Exception as e:
        raise RuntimeError(f"{failure}: {e}") from e

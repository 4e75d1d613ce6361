"""
Formatting utilities for Coralogix MCP server responses
"""

import json
import random
import string
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

PRIORITY_LABELS = {
    "ALERT_DEF_PRIORITY_P1": "P1 (Critical)",
    "ALERT_DEF_PRIORITY_P2": "P2 (High)",
    "ALERT_DEF_PRIORITY_P3": "P3 (Medium)",
    "ALERT_DEF_PRIORITY_P4": "P4 (Low)",
    "ALERT_DEF_PRIORITY_P5_OR_UNSPECIFIED": "P5 (Info)",
}

TYPE_LABELS = {
    "ALERT_DEF_TYPE_LOGS_IMMEDIATE_OR_UNSPECIFIED": "Logs Immediate",
    "ALERT_DEF_TYPE_LOGS_THRESHOLD": "Logs Threshold",
    "ALERT_DEF_TYPE_LOGS_ANOMALY": "Logs Anomaly",
    "ALERT_DEF_TYPE_LOGS_RATIO_THRESHOLD": "Logs Ratio Threshold",
    "ALERT_DEF_TYPE_LOGS_NEW_VALUE": "Logs New Value",
    "ALERT_DEF_TYPE_LOGS_UNIQUE_COUNT": "Logs Unique Count",
    "ALERT_DEF_TYPE_LOGS_TIME_RELATIVE_THRESHOLD": "Logs Time Relative",
    "ALERT_DEF_TYPE_METRIC_THRESHOLD": "Metric Threshold",
    "ALERT_DEF_TYPE_METRIC_ANOMALY": "Metric Anomaly",
    "ALERT_DEF_TYPE_TRACING_IMMEDIATE": "Trace Immediate",
    "ALERT_DEF_TYPE_TRACING_THRESHOLD": "Trace Threshold",
    "ALERT_DEF_TYPE_FLOW": "Flow Alert",
    "ALERT_DEF_TYPE_SLO_THRESHOLD": "SLO Threshold",
}

REQUEST_ID_ALPHABET = string.digits + string.ascii_lowercase


def get_priority_label(priority: Optional[str]) -> str:
    """Map an alert priority enum to e.g. "P1 (Critical)"; unknown values pass through."""
    return PRIORITY_LABELS.get(priority, priority or "Unknown")


def get_type_label(alert_type: Optional[str]) -> str:
    """Map an alert type enum to a short label; unknown values pass through."""
    return TYPE_LABELS.get(alert_type, alert_type or "Unknown")


def format_timestamp(value: Optional[str]) -> str:
    """
    Render an ISO 8601 timestamp as "YYYY-MM-DD HH:MM:SS".

    Args:
        value: ISO timestamp, possibly with a trailing "Z" and fractional seconds

    Returns:
        Readable timestamp, or the input unchanged if it cannot be parsed
    """
    if not value:
        return "N/A"
    try:
        text = value.replace("Z", "+00:00")
        # fromisoformat on older interpreters rejects nanosecond precision
        if "." in text:
            head, _, tail = text.partition(".")
            digits = "".join(ch for ch in tail if ch.isdigit())
            zone = tail[len(digits):]
            text = f"{head}.{digits[:6].ljust(6, '0')}{zone}"
        return datetime.fromisoformat(text).strftime("%Y-%m-%d %H:%M:%S")
    except (AttributeError, TypeError, ValueError):
        return str(value)


def humanize_enum(value: Optional[str], prefix: str) -> str:
    """Turn e.g. LOGS_TIME_WINDOW_VALUE_MINUTES_5_OR_UNSPECIFIED into "minutes_5"."""
    if not value:
        return ""
    return value.replace(prefix, "").lower().replace("_or_unspecified", "")


def generate_request_id() -> str:
    """Return a request id of the form req_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(random.choices(REQUEST_ID_ALPHABET, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def format_json(data: Any) -> str:
    """Pretty-print a raw API response for tools that return it unchanged."""
    if data is None or data == {}:
        return "Operation completed successfully."
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2)


def format_warning(warning: Dict[str, Any]) -> str:
    """Describe a single DataPrime query warning."""
    if "compileWarning" in warning:
        return f"Compile Warning: {warning['compileWarning'].get('warningMessage')}"
    if "timeRangeWarning" in warning:
        return f"Time Range Warning: {warning['timeRangeWarning'].get('warningMessage')}"
    if "numberOfResultsLimitWarning" in warning:
        limit = warning["numberOfResultsLimitWarning"].get("numberOfResultsLimit")
        return f"Results Limit Warning: Limited to {limit} results"
    if "bytesScannedLimitWarning" in warning:
        return "Bytes Scanned Limit Warning: Reached bytes scanning limit"
    if "deprecationWarning" in warning:
        return f"Deprecation Warning: {warning['deprecationWarning'].get('warningMessage')}"
    if "blocksLimitWarning" in warning:
        return "Blocks Limit Warning: Reached maximum number of parquet blocks"
    if "aggregationBucketsLimitWarning" in warning:
        limit = warning["aggregationBucketsLimitWarning"].get("aggregationBucketsLimit")
        return f"Aggregation Buckets Limit Warning: Limited to {limit} buckets"
    if "archiveWarning" in warning:
        archive = warning["archiveWarning"] or {}
        if "noMetastoreData" in archive:
            return "Archive Warning: No metastore data available"
        if "bucketAccessDenied" in archive:
            return "Archive Warning: Bucket access denied"
        if "bucketReadFailed" in archive:
            return "Archive Warning: Bucket read failed"
        if "missingData" in archive:
            return "Archive Warning: Missing data"
    if "scrollTimeoutWarning" in warning:
        return "Scroll Timeout Warning: OpenSearch scroll timeout reached"
    if "fieldCountLimitWarning" in warning:
        return "Field Count Limit Warning: Number of fields truncated"
    if "shuffleFileSizeLimitReachedWarning" in warning:
        return "Shuffle File Size Limit Warning: Limit reached during join operation"
    if "filesReadLimitWarning" in warning:
        return "Files Read Limit Warning: Maximum number of parquet files reached"
    if "sidebarFilterCardinalityLimitWarning" in warning:
        sidebar = warning["sidebarFilterCardinalityLimitWarning"]
        fields = ", ".join(sidebar.get("fields", []))
        return (
            f"Sidebar Filter Cardinality Warning: Fields {fields} "
            f"reached cardinality limit of {sidebar.get('cardinalityLimit')}"
        )
    return "Unknown warning type"


def format_warnings(warnings: List[Dict[str, Any]]) -> str:
    return "".join(f"{i}. {format_warning(w)}\n" for i, w in enumerate(warnings, 1))


def _format_user_data(user_data: str) -> str:
    try:
        parsed = json.loads(user_data)
    except (TypeError, ValueError):
        return f"    {user_data}\n"
    pretty = json.dumps(parsed, indent=4)
    return "\n".join(f"    {line}" for line in pretty.splitlines()) + "\n"


def format_query_results(result: Dict[str, Any]) -> str:
    """Render the records of one query result block."""
    records = result.get("results") or []
    output = f"📊 Results ({len(records)} records):\n\n"

    if not records:
        return output + "No results found.\n"

    for i, record in enumerate(records, 1):
        output += f"Record {i}:\n"

        if record.get("metadata"):
            output += "  Metadata:\n"
            for meta in record["metadata"]:
                output += f"    {meta.get('key')}: {meta.get('value')}\n"

        if record.get("labels"):
            output += "  Labels:\n"
            for label in record["labels"]:
                output += f"    {label.get('key')}: {label.get('value')}\n"

        if record.get("userData"):
            output += "  Data:\n"
            output += _format_user_data(record["userData"])

        output += "\n"

    return output


def format_query_response(responses: Any, query_type: str) -> str:
    """
    Render the NDJSON stream returned by the DataPrime query endpoint.

    Args:
        responses: List of response objects (query id, error, warning and
            result blocks), or a single object for non-streaming replies
        query_type: "DataPrime" or "Lucene", used in the heading

    Returns:
        Formatted results text
    """
    title = f"{query_type} Query Results"
    output = f"{title}\n{'=' * len(title)}\n\n"

    if not isinstance(responses, list):
        if isinstance(responses, dict) and responses.get("result"):
            return output + format_query_results(responses["result"])
        if isinstance(responses, dict) and "results" in responses:
            return output + format_query_results(responses)
        return output + f"Unexpected response structure: {json.dumps(responses)}\n"

    for response in responses:
        if response.get("queryId"):
            output += f"Query ID: {response['queryId'].get('queryId')}\n\n"

        error = response.get("error")
        if error:
            output += f"❌ Error: {error.get('message')}\n"
            if (error.get("code") or {}).get("rateLimitReached"):
                output += "Rate limit reached. Please wait before making more requests.\n"
            continue

        if response.get("warning"):
            output += f"⚠️  Warning: {format_warning(response['warning'])}\n\n"

        if response.get("result"):
            output += format_query_results(response["result"])

    return output


def format_background_query_status(query_id: str, response: Dict[str, Any]) -> str:
    """Render the state of a background query."""
    output = "Background Query Status\n"
    output += f"Query ID: {query_id}\n"
    output += f"Submitted: {response.get('submittedAt')}\n\n"

    running = response.get("running")
    terminated = response.get("terminated")

    if running is not None:
        output += "Status: RUNNING\n"
        output += f"Running since: {running.get('runningSince')}\n"
    elif terminated is not None:
        output += "Status: TERMINATED\n"
        output += f"Running since: {terminated.get('runningSince')}\n"
        output += f"Terminated at: {terminated.get('terminatedAt')}\n"

        error = terminated.get("error")
        if "success" in terminated:
            output += "Result: SUCCESS - Query completed successfully\n"
        elif error:
            if "failed" in error:
                output += f"Result: FAILED - {(error['failed'] or {}).get('reason')}\n"
            elif "cancelled" in error:
                output += "Result: CANCELLED\n"
            elif "timedOut" in error:
                output += "Result: TIMED OUT\n"
    elif "waitingForExecution" in response:
        output += "Status: WAITING FOR EXECUTION\n"

    metadata = response.get("metadata") or []
    if metadata:
        output += "\nStatistics:\n"
        for meta in metadata:
            if meta.get("statistics"):
                output += f"Bytes scanned: {meta['statistics'].get('bytesScanned')}\n"

    if response.get("warnings"):
        output += "\nWarnings:\n" + format_warnings(response["warnings"])

    return output

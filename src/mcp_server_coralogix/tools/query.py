"""DataPrime and Lucene log queries, including background queries."""

from typing import Any, Dict, List

from .. import config
from ..formatters import (
    format_background_query_status,
    format_query_response,
    format_query_results,
    format_warnings,
)

TIERS = ["TIER_ARCHIVE", "TIER_FREQUENT_SEARCH"]

QUERY_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "query_dataprime",
        "description": (
            "Execute DataPrime queries to search and analyze ACTUAL LOG DATA, traces, and spans. "
            'Use this tool when the user asks for "logs", "error logs" or "recent logs". '
            "Returns log entries with timestamps, messages, severity levels, and metadata."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        "DataPrime query string, e.g. "
                        '"source logs | filter severity == \\"ERROR\\" | limit 5"'
                    ),
                },
                "startDate": {
                    "type": "string",
                    "description": "Start time in ISO format (e.g., \"2025-06-19T21:00:00.000Z\"). Defaults to 24 hours ago.",
                },
                "endDate": {
                    "type": "string",
                    "description": "End time in ISO format. Defaults to the current time.",
                },
                "tier": {
                    "type": "string",
                    "enum": TIERS,
                    "description": "Data tier to search (default: TIER_FREQUENT_SEARCH)",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of log entries to return (1-10000)",
                },
                "defaultSource": {
                    "type": "string",
                    "description": 'Source used when the query omits one (e.g., "logs")',
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "query_lucene",
        "description": (
            "Execute Lucene queries to search ACTUAL LOG DATA with traditional search syntax. "
            "Best for simple text searches, field-based filtering and boolean queries."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": 'Lucene query string, e.g. "severity:ERROR AND applicationName:myapp"',
                },
                "startDate": {
                    "type": "string",
                    "description": "Start time in ISO format. Defaults to 24 hours ago.",
                },
                "endDate": {
                    "type": "string",
                    "description": "End time in ISO format. Defaults to the current time.",
                },
                "tier": {
                    "type": "string",
                    "enum": TIERS,
                    "description": "Data tier to search (default: TIER_FREQUENT_SEARCH)",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of log entries to return (1-10000)",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "submit_background_query",
        "description": (
            "Submit a long-running query over a large dataset. Returns a query ID used to check "
            "status and retrieve results later."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Query string for background execution",
                },
                "startDate": {
                    "type": "string",
                    "description": "Start time in ISO format",
                },
                "endDate": {
                    "type": "string",
                    "description": "End time in ISO format",
                },
                "syntax": {
                    "type": "string",
                    "enum": ["QUERY_SYNTAX_DATAPRIME", "QUERY_SYNTAX_LUCENE"],
                    "description": "Query syntax type (default: QUERY_SYNTAX_DATAPRIME)",
                },
                "nowDate": {
                    "type": "string",
                    "description": "Reference time for relative expressions such as now(), in ISO format",
                },
            },
            "required": ["query", "startDate", "endDate"],
        },
    },
    {
        "name": "get_background_query_status",
        "description": "Check the execution status of a previously submitted background query",
        "inputSchema": {
            "type": "object",
            "properties": {
                "queryId": {
                    "type": "string",
                    "description": "The query ID returned from submit_background_query",
                },
            },
            "required": ["queryId"],
        },
    },
    {
        "name": "get_background_query_data",
        "description": "Retrieve the log data produced by a completed background query",
        "inputSchema": {
            "type": "object",
            "properties": {
                "queryId": {
                    "type": "string",
                    "description": "The query ID of the completed background query",
                },
            },
            "required": ["queryId"],
        },
    },
    {
        "name": "cancel_background_query",
        "description": "Cancel a running background query",
        "inputSchema": {
            "type": "object",
            "properties": {
                "queryId": {
                    "type": "string",
                    "description": "The query ID of the background query to cancel",
                },
            },
            "required": ["queryId"],
        },
    },
]


def build_query_metadata(args: Dict[str, Any], syntax: str) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "syntax": syntax,
        "tier": args.get("tier") or "TIER_FREQUENT_SEARCH",
    }
    for key in ("limit", "startDate", "endDate", "defaultSource"):
        if args.get(key):
            metadata[key] = args[key]
    return metadata


async def handle_query_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "query_dataprime":
        return await run_query(client, args, "QUERY_SYNTAX_DATAPRIME", "DataPrime")
    if name == "query_lucene":
        lucene_args = {k: v for k, v in args.items() if k != "defaultSource"}
        return await run_query(client, lucene_args, "QUERY_SYNTAX_LUCENE", "Lucene")
    if name == "submit_background_query":
        return await handle_submit_background_query(client, args)
    if name == "get_background_query_status":
        return await handle_get_background_query_status(client, args)
    if name == "get_background_query_data":
        return await handle_get_background_query_data(client, args)
    if name == "cancel_background_query":
        return await handle_cancel_background_query(client, args)
    raise ValueError(f"Unknown query tool: {name}")


async def run_query(client, args: Dict[str, Any], syntax: str, query_type: str) -> str:
    request = {"query": args["query"], "metadata": build_query_metadata(args, syntax)}
    try:
        responses = await client.query(request)
    except Exception as e:
        raise RuntimeError(f"{query_type} query failed: {e}") from e
    return format_query_response(responses, query_type)


async def handle_submit_background_query(client, args: Dict[str, Any]) -> str:
    request = {
        "query": args["query"],
        "syntax": args.get("syntax") or "QUERY_SYNTAX_DATAPRIME",
        "startDate": args["startDate"],
        "endDate": args["endDate"],
    }
    if args.get("nowDate"):
        request["nowDate"] = args["nowDate"]
    try:
        response = await client.submit_background_query(request)
    except Exception as e:
        raise RuntimeError(f"Failed to submit background query: {e}") from e

    result = "Background query submitted successfully!\n\n"
    result += f"Query ID: {response.get('queryId')}\n"
    result += "Use this ID to check status and retrieve results.\n\n"

    if response.get("warnings"):
        result += "Warnings:\n" + format_warnings(response["warnings"])

    return result


async def handle_get_background_query_status(client, args: Dict[str, Any]) -> str:
    query_id = args["queryId"]
    try:
        response = await client.get_background_query_status(query_id)
    except Exception as e:
        raise RuntimeError(f"Failed to get background query status: {e}") from e
    return format_background_query_status(query_id, response)


def _extract_background_results(response: Any) -> Any:
    # the data endpoint may stream several NDJSON blocks
    blocks = response if isinstance(response, list) else [response]
    for block in blocks:
        if isinstance(block, dict):
            results = (block.get("response") or {}).get("results")
            if results:
                return results
    return None


async def handle_get_background_query_data(client, args: Dict[str, Any]) -> str:
    query_id = args["queryId"]
    try:
        response = await client.get_background_query_data(query_id)
    except Exception as e:
        raise RuntimeError(f"Failed to get background query data: {e}") from e

    results = _extract_background_results(response)
    if not results:
        return (
            f"No data available for query ID: {query_id}\n"
            "The query may still be running or may have failed."
        )
    if isinstance(results, list):
        results = {"results": results}
    return format_query_results(results)


async def handle_cancel_background_query(client, args: Dict[str, Any]) -> str:
    query_id = args["queryId"]
    try:
        await client.cancel_background_query(query_id)
    except Exception as e:
        raise RuntimeError(f"Failed to cancel background query: {e}") from e
    return f"Background query {query_id} has been cancelled successfully."

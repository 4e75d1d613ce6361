"""Data enrichment tools (GeoIP, suspicious IP, AWS and custom lookups)."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_json

NO_ARGUMENTS = {"type": "object", "properties": {}, "required": []}

ENRICHMENT_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "list_enrichments",
        "description": "List all configured data enrichments with their types, status and field mappings",
        "inputSchema": NO_ARGUMENTS,
    },
    {
        "name": "get_enrichment_limits",
        "description": "Get enrichment usage limits and current consumption for your account",
        "inputSchema": NO_ARGUMENTS,
    },
    {
        "name": "get_enrichment_settings",
        "description": "Get company enrichment settings and configuration",
        "inputSchema": NO_ARGUMENTS,
    },
    {
        "name": "get_custom_enrichments",
        "description": "List all custom enrichment configurations and their lookup tables",
        "inputSchema": NO_ARGUMENTS,
    },
    {
        "name": "create_custom_enrichment",
        "description": "Create a custom enrichment that adds fields to logs from a lookup table",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": 'A descriptive name (e.g., "User ID to Department Mapping")',
                },
                "description": {
                    "type": "string",
                    "description": "What this enrichment adds to logs",
                },
                "file": {
                    "type": "object",
                    "description": "CSV file configuration containing the lookup data",
                },
                "lookupKey": {
                    "type": "string",
                    "description": 'The log field to use as lookup key (e.g., "user_id")',
                },
                "outputFields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Field names added to logs when the enrichment matches",
                },
            },
            "required": ["name", "file", "lookupKey"],
        },
    },
    {
        "name": "update_custom_enrichment",
        "description": "Update an existing custom enrichment configuration or data",
        "inputSchema": {
            "type": "object",
            "properties": {
                "enrichmentId": {
                    "type": "string",
                    "description": "The unique identifier of the custom enrichment to update",
                },
                "enrichment": {
                    "type": "object",
                    "description": "Complete custom enrichment configuration. Use get_custom_enrichments first.",
                },
            },
            "required": ["enrichmentId", "enrichment"],
        },
    },
    {
        "name": "delete_custom_enrichment",
        "description": "Permanently delete a custom enrichment configuration",
        "inputSchema": {
            "type": "object",
            "properties": {
                "enrichmentId": {
                    "type": "string",
                    "description": "The unique identifier of the custom enrichment to delete",
                },
            },
            "required": ["enrichmentId"],
        },
    },
]


async def handle_enrichment_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "list_enrichments":
        return format_json(await client.list_enrichments())
    if name == "get_enrichment_limits":
        return format_json(await client.get_enrichment_limits())
    if name == "get_enrichment_settings":
        return format_json(await client.get_enrichment_settings())
    if name == "get_custom_enrichments":
        return format_json(await client.list_custom_enrichments())
    if name == "create_custom_enrichment":
        request = {
            "name": args["name"],
            "description": args.get("description") or "",
            "file": args["file"],
            "lookupKey": args["lookupKey"],
        }
        if args.get("outputFields"):
            request["outputFields"] = args["outputFields"]
        return format_json(await client.create_custom_enrichment(request))
    if name == "update_custom_enrichment":
        return format_json(await client.update_custom_enrichment(args["enrichmentId"], args["enrichment"]))
    if name == "delete_custom_enrichment":
        return format_json(await client.delete_custom_enrichment(args["enrichmentId"]))
    raise ValueError(f"Unknown Enrichments tool: {name}")

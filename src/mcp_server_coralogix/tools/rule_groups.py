"""Parsing rule group tools."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_json

GROUP_ID = {
    "type": "string",
    "description": "The unique identifier of the rule group. Get this from list_rule_groups.",
}

RULE_GROUP_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "list_rule_groups",
        "description": "List all parsing rule groups that process and transform incoming logs",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_rule_group",
        "description": "Get the detailed configuration of a parsing rule group by ID",
        "inputSchema": {
            "type": "object",
            "properties": {"groupId": GROUP_ID},
            "required": ["groupId"],
        },
    },
    {
        "name": "create_rule_group",
        "description": (
            "Create a new parsing rule group. Basic rule groups can start with empty "
            "ruleMatchers and ruleSubgroups arrays."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": 'Rule group name (e.g., "Apache Access Log Parser")'},
                "description": {"type": "string", "description": "What this rule group parses and extracts"},
                "enabled": {"type": "boolean", "description": "Whether the rule group is active on creation (default: true)"},
                "hidden": {"type": "boolean", "description": "Whether to hide the rule group in the UI (default: false)"},
                "creator": {"type": "string", "description": 'Creator identifier (default: "MCP Server")'},
                "order": {"type": "number", "description": "Processing order, lower runs first (default: 1)"},
                "ruleMatchers": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Conditions deciding which logs the rules apply to",
                },
                "ruleSubgroups": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Groups of parsing rules with their patterns and field extractions",
                },
                "teamId": {
                    "type": "object",
                    "description": "Team ID object with an id field. Defaults to the company of the API key.",
                },
            },
            "required": ["name"],
        },
    },
    {
        "name": "update_rule_group",
        "description": (
            "Update an existing parsing rule group, for example to add masking rules for passwords "
            "or tokens. Use get_rule_group first to obtain the current configuration."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "groupId": GROUP_ID,
                "ruleGroup": {"type": "object", "description": "Complete rule group configuration"},
            },
            "required": ["groupId", "ruleGroup"],
        },
    },
    {
        "name": "delete_rule_group",
        "description": "Permanently delete a parsing rule group",
        "inputSchema": {
            "type": "object",
            "properties": {"groupId": GROUP_ID},
            "required": ["groupId"],
        },
    },
    {
        "name": "set_rule_group_active",
        "description": "Enable or disable a parsing rule group without deleting it",
        "inputSchema": {
            "type": "object",
            "properties": {
                "groupId": GROUP_ID,
                "active": {"type": "boolean", "description": "true to enable the rule group, false to disable it"},
            },
            "required": ["groupId", "active"],
        },
    },
    {
        "name": "get_rule_group_limits",
        "description": "Get company usage limits for rule groups",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
]


async def build_rule_group(client, args: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in creation defaults, taking the team from the company limits when not given."""
    team_id = args.get("teamId")
    if not team_id:
        limits = await client.get_rule_group_limits()
        company_id = limits.get("companyId") if isinstance(limits, dict) else None
        if company_id:
            team_id = {"id": int(company_id)}

    rule_group = {
        "name": args["name"],
        "description": args.get("description") or "",
        "enabled": args.get("enabled", True),
        "hidden": args.get("hidden") or False,
        "creator": args.get("creator") or "MCP Server",
        "order": args.get("order") or 1,
        "ruleMatchers": args.get("ruleMatchers") or [],
        "ruleSubgroups": args.get("ruleSubgroups") or [],
    }
    if team_id:
        rule_group["teamId"] = team_id
    return rule_group


async def handle_rule_group_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "list_rule_groups":
        return format_json(await client.list_rule_groups())
    if name == "get_rule_group":
        return format_json(await client.get_rule_group(args["groupId"]))
    if name == "create_rule_group":
        try:
            rule_group = await build_rule_group(client, args)
            return format_json(await client.create_rule_group(rule_group))
        except Exception as e:
            raise RuntimeError(
                f"Failed to create rule group: {e}. Note: Rule group creation may have API limitations. "
                "You can list existing rule groups and update them instead."
            ) from e
    if name == "update_rule_group":
        return format_json(await client.update_rule_group(args["groupId"], args["ruleGroup"]))
    if name == "delete_rule_group":
        return format_json(await client.delete_rule_group(args["groupId"]))
    if name == "set_rule_group_active":
        return format_json(await client.set_rule_group_active(args["groupId"], args["active"]))
    if name == "get_rule_group_limits":
        return format_json(await client.get_rule_group_limits())
    raise ValueError(f"Unknown Rule Groups tool: {name}")

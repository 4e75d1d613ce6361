"""Dashboard catalog and management tools."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_timestamp, generate_request_id

DEFAULT_TIME_FRAME = "24h"

DASHBOARD_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_dashboard_catalog",
        "description": "List all dashboards in your Coralogix account with their IDs, folders and descriptions",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "get_dashboard",
        "description": "Get the configuration and layout summary of a specific dashboard by ID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dashboardId": {
                    "type": "string",
                    "description": "The unique identifier of the dashboard. Get this from get_dashboard_catalog.",
                },
            },
            "required": ["dashboardId"],
        },
    },
    {
        "name": "create_dashboard",
        "description": "Create a new dashboard. Widgets can be added later through the Coralogix UI.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": 'A descriptive name for the dashboard (e.g., "Application Performance Overview")',
                },
                "description": {
                    "type": "string",
                    "description": "Purpose and contents of the dashboard",
                },
                "layout": {
                    "type": "object",
                    "description": "Dashboard layout configuration including sections and widget positions",
                },
                "variables": {
                    "type": "array",
                    "description": "Dashboard variables for dynamic filtering",
                },
                "filters": {
                    "type": "array",
                    "description": "Global dashboard filters that apply to all widgets",
                },
                "folder": {
                    "type": "object",
                    "description": 'Folder to place the dashboard in, e.g. {"id": "<folder id>"}',
                },
            },
            "required": ["name"],
        },
    },
    {
        "name": "update_dashboard",
        "description": "Update an existing dashboard. The given fields are merged over the current configuration.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dashboardId": {
                    "type": "string",
                    "description": "The unique identifier of the dashboard to update",
                },
                "dashboard": {
                    "type": "object",
                    "description": "Dashboard fields to change. Use get_dashboard first to see the current config.",
                },
            },
            "required": ["dashboardId", "dashboard"],
        },
    },
    {
        "name": "delete_dashboard",
        "description": "Permanently delete a dashboard. This action cannot be undone.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "dashboardId": {
                    "type": "string",
                    "description": "The unique identifier of the dashboard to delete",
                },
            },
            "required": ["dashboardId"],
        },
    },
]


def count_widgets(layout: Dict[str, Any]) -> int:
    total = 0
    for section in layout.get("sections") or []:
        for row in section.get("rows") or []:
            total += len(row.get("widgets") or [])
    return total


async def handle_dashboard_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_coralogix_client()

    if name == "get_dashboard_catalog":
        return await handle_get_dashboard_catalog(client)
    if name == "get_dashboard":
        return await handle_get_dashboard(client, args)
    if name == "create_dashboard":
        return await handle_create_dashboard(client, args)
    if name == "update_dashboard":
        return await handle_update_dashboard(client, args)
    if name == "delete_dashboard":
        return await handle_delete_dashboard(client, args)
    raise ValueError(f"Unknown dashboard tool: {name}")


async def handle_get_dashboard_catalog(client) -> str:
    try:
        response = await client.get_dashboard_catalog()
    except Exception as e:
        raise RuntimeError(f"Failed to list dashboards: {e}") from e

    items = response.get("items") or []
    if not items:
        return "No dashboards found in your Coralogix account."

    folders: Dict[str, List[Dict[str, Any]]] = {}
    for dashboard in items:
        folder_id = dashboard.get("folderId") or "root"
        if isinstance(folder_id, dict):
            folder_id = folder_id.get("id") or "root"
        folders.setdefault(folder_id, []).append(dashboard)

    result = f"Dashboard Catalog ({len(items)} found)\n" + "=" * 50 + "\n\n"
    for folder_id, dashboards in folders.items():
        result += "📁 Root Folder:\n" if folder_id == "root" else f"📁 Folder ID: {folder_id}:\n"
        for i, dashboard in enumerate(dashboards, 1):
            pinned = "📌 " if dashboard.get("isPinned") else ""
            result += f"  {i}. {pinned}{dashboard.get('name')}\n"
            result += f"     ID: {dashboard.get('id')}\n"
            if dashboard.get("description"):
                result += f"     Description: {dashboard['description']}\n"
            result += "\n"

    return result


async def handle_get_dashboard(client, args: Dict[str, Any]) -> str:
    try:
        response = await client.get_dashboard(args["dashboardId"])
    except Exception as e:
        raise RuntimeError(f"Failed to get dashboard: {e}") from e

    dashboard = response.get("dashboard") or {}

    result = "Dashboard Details\n" + "=" * 25 + "\n\n"
    result += f"Name: {dashboard.get('name')}\n"
    result += f"ID: {dashboard.get('id')}\n"
    if dashboard.get("description"):
        result += f"Description: {dashboard['description']}\n"
    if dashboard.get("relativeTimeFrame"):
        result += f"Time Frame: {dashboard['relativeTimeFrame']}\n"
    if dashboard.get("folderId"):
        result += f"Folder ID: {dashboard['folderId']}\n"
    result += f"Locked: {'Yes' if response.get('isLocked') else 'No'}\n"
    if response.get("createdAt"):
        result += f"Created: {format_timestamp(response['createdAt'])}\n"
    if response.get("updatedAt"):
        result += f"Last Updated: {format_timestamp(response['updatedAt'])}\n"
    if response.get("authorName"):
        result += f"Created By: {response['authorName']}\n"
    if response.get("updaterName"):
        result += f"Last Updated By: {response['updaterName']}\n"
    if isinstance(dashboard.get("layout"), dict) and "sections" in dashboard["layout"]:
        result += f"Widgets: {count_widgets(dashboard['layout'])}\n"
    if isinstance(dashboard.get("variables"), list):
        result += f"Variables: {len(dashboard['variables'])}\n"
    if isinstance(dashboard.get("filters"), list):
        result += f"Filters: {len(dashboard['filters'])}\n"

    return result


async def handle_create_dashboard(client, args: Dict[str, Any]) -> str:
    dashboard: Dict[str, Any] = {
        "name": args["name"],
        "description": args.get("description") or "",
        "relativeTimeFrame": DEFAULT_TIME_FRAME,
        "layout": args.get("layout") or {"sections": []},
        "variables": args.get("variables") or [],
        "filters": args.get("filters") or [],
        "annotations": [],
    }
    folder = args.get("folder")
    if folder:
        dashboard["folderId"] = {"id": folder.get("id")}

    request = {"requestId": generate_request_id(), "dashboard": dashboard, "isLocked": False}
    try:
        response = await client.create_dashboard(request)
    except Exception as e:
        raise RuntimeError(f"Failed to create dashboard: {e}") from e

    result = "✅ Dashboard created successfully!\n\n"
    result += f"Dashboard ID: {response.get('dashboardId')}\n"
    result += f"Name: {args['name']}\n"
    result += f"Time Frame: {DEFAULT_TIME_FRAME}\n"
    result += "Locked: No\n"
    if args.get("description"):
        result += f"Description: {args['description']}\n"
    if folder:
        result += f"Folder ID: {folder.get('id')}\n"
    result += "\n📝 Note: You can now add widgets and configure the dashboard through the Coralogix UI."

    return result


async def handle_update_dashboard(client, args: Dict[str, Any]) -> str:
    dashboard_id = args["dashboardId"]
    try:
        current = await client.get_dashboard(dashboard_id)
        updated = {**(current.get("dashboard") or {}), **args["dashboard"], "id": dashboard_id}
        await client.update_dashboard(
            {
                "requestId": generate_request_id(),
                "dashboard": updated,
                "isLocked": bool(current.get("isLocked")),
            }
        )
    except Exception as e:
        raise RuntimeError(f"Failed to update dashboard: {e}") from e

    result = "✅ Dashboard updated successfully!\n\n"
    result += f"Dashboard ID: {dashboard_id}\n"
    result += f"Name: {updated.get('name')}\n"
    if updated.get("description"):
        result += f"Description: {updated['description']}\n"
    if updated.get("relativeTimeFrame"):
        result += f"Time Frame: {updated['relativeTimeFrame']}\n"

    return result


async def handle_delete_dashboard(client, args: Dict[str, Any]) -> str:
    dashboard_id = args["dashboardId"]
    try:
        current = await client.get_dashboard(dashboard_id)
        name = (current.get("dashboard") or {}).get("name")
        await client.delete_dashboard(dashboard_id, generate_request_id())
    except Exception as e:
        raise RuntimeError(f"Failed to delete dashboard: {e}") from e

    return f'✅ Dashboard "{name}" (ID: {dashboard_id}) has been deleted successfully.'

"""Amadeus tool registry.

Routes are tried in order, so the more specific name fragments come first
(e.g. get_flight_booking must reach the advanced flight tools, not the plain
flight search tools).
"""

from mcp_server_common import ToolRegistry, ToolRoute, name_contains

from .activities_analytics import ACTIVITIES_ANALYTICS_TOOLS, handle_activities_analytics_tool
from .flight_advanced import FLIGHT_ADVANCED_TOOLS, handle_flight_advanced_tool
from .flights import FLIGHT_TOOLS, handle_flight_tool
from .hotel_advanced import HOTEL_ADVANCED_TOOLS, handle_hotel_advanced_tool
from .hotels import HOTEL_TOOLS, handle_hotel_tool
from .locations import LOCATION_TOOLS, handle_location_tool


def create_registry() -> ToolRegistry:
    return ToolRegistry(
        [
            ToolRoute(
                name_contains("seat_map", "delay", "booking", "pricing"),
                FLIGHT_ADVANCED_TOOLS,
                handle_flight_advanced_tool,
            ),
            ToolRoute(name_contains("flight", "cheapest"), FLIGHT_TOOLS, handle_flight_tool),
            ToolRoute(name_contains("sentiment", "autocomplete"), HOTEL_ADVANCED_TOOLS, handle_hotel_advanced_tool),
            ToolRoute(name_contains("hotel"), HOTEL_TOOLS, handle_hotel_tool),
            ToolRoute(
                name_contains("activit", "points_of_interest", "analytics", "trip_purpose"),
                ACTIVITIES_ANALYTICS_TOOLS,
                handle_activities_analytics_tool,
            ),
            ToolRoute(name_contains("airport", "airline", "location"), LOCATION_TOOLS, handle_location_tool),
        ],
        log_prefix="Amadeus",
    )


registry = create_registry()

__all__ = ["create_registry", "registry"]

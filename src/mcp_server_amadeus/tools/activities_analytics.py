"""Activities, points of interest, travel analytics and trip purpose tools."""

from typing import Any, Dict, List

from .. import config
from ..services import ActivitiesService, AnalyticsService

ACTIVITIES_ANALYTICS_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "search_activities",
        "description": "Search for activities and tours near a location",
        "inputSchema": {
            "type": "object",
            "properties": {
                "latitude": {"type": "number", "description": "Latitude of the location"},
                "longitude": {"type": "number", "description": "Longitude of the location"},
                "radius": {
                    "type": "number",
                    "description": "Search radius in kilometers (default: 1)",
                    "default": 1,
                },
            },
            "required": ["latitude", "longitude"],
        },
    },
    {
        "name": "search_points_of_interest",
        "description": "Search for points of interest near a location",
        "inputSchema": {
            "type": "object",
            "properties": {
                "latitude": {"type": "number", "description": "Latitude of the location"},
                "longitude": {"type": "number", "description": "Longitude of the location"},
                "radius": {
                    "type": "number",
                    "description": "Search radius in kilometers (default: 1)",
                    "default": 1,
                },
                "categories": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Categories to filter by (e.g., ["SIGHTS", "RESTAURANT", "SHOPPING"])',
                },
            },
            "required": ["latitude", "longitude"],
        },
    },
    {
        "name": "get_travel_analytics",
        "description": "Get travel analytics and air traffic data between cities",
        "inputSchema": {
            "type": "object",
            "properties": {
                "originCityCode": {"type": "string", "description": 'Origin city IATA code (e.g., "NYC")'},
                "destinationCityCode": {"type": "string", "description": 'Destination city IATA code (e.g., "LAX")'},
                "searchDate": {"type": "string", "description": "Search date in YYYY-MM-DD format"},
                "marketCountryCode": {"type": "string", "description": 'Market country code (e.g., "US")'},
                "sourceCountry": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Source countries to analyze (e.g., ["US", "CA"])',
                },
            },
            "required": ["originCityCode", "destinationCityCode", "searchDate"],
        },
    },
    {
        "name": "predict_trip_purpose",
        "description": "Predict the purpose of a trip (business or leisure)",
        "inputSchema": {
            "type": "object",
            "properties": {
                "originLocationCode": {"type": "string", "description": 'Origin airport IATA code (e.g., "JFK")'},
                "destinationLocationCode": {"type": "string", "description": 'Destination airport IATA code (e.g., "LAX")'},
                "departureDate": {"type": "string", "description": "Departure date in YYYY-MM-DD format"},
                "returnDate": {"type": "string", "description": "Return date in YYYY-MM-DD format (optional for one-way)"},
                "searchDate": {"type": "string", "description": "Search date in YYYY-MM-DD format"},
            },
            "required": ["originLocationCode", "destinationLocationCode", "departureDate", "searchDate"],
        },
    },
]


async def handle_activities_analytics_tool(name: str, args: Dict[str, Any]) -> str:
    client = config.get_amadeus_client()

    if name == "search_activities":
        return await handle_search_activities(ActivitiesService(client), args)
    if name == "search_points_of_interest":
        return await handle_search_points_of_interest(ActivitiesService(client), args)
    if name == "get_travel_analytics":
        return await handle_travel_analytics(AnalyticsService(client), args)
    if name == "predict_trip_purpose":
        return await handle_trip_purpose_prediction(AnalyticsService(client), args)
    raise ValueError(f"Unknown activities/analytics tool: {name}")


async def handle_search_activities(service: ActivitiesService, args: Dict[str, Any]) -> str:
    latitude, longitude = args["latitude"], args["longitude"]
    activities = await service.search_activities(latitude, longitude, args.get("radius"))

    if not activities:
        return f"No activities found near coordinates {latitude}, {longitude}."

    results = []
    for i, activity in enumerate(activities[:10], 1):
        price = activity.get("price") or {}
        price_text = f"{price['amount']} {price.get('currencyCode', '')}".strip() if price.get("amount") else "Price not available"
        categories = ", ".join(activity.get("categories") or []) or "No categories"
        coords = activity.get("geoCode", {})

        lines = [
            f"{i}. {activity.get('name')}",
            f"   Description: {activity.get('shortDescription') or 'No description'}",
            f"   Price: {price_text}",
            f"   Rating: {activity.get('rating') or 'No rating'}",
        ]
        if activity.get("minimumDuration"):
            lines.append(f"   Duration: {activity['minimumDuration']}")
        lines.extend([
            f"   Categories: {categories}",
            f"   Location: {coords.get('latitude')}, {coords.get('longitude')}",
        ])
        if activity.get("bookingLink"):
            lines.append(f"   Booking: {activity['bookingLink']}")
        results.append("\n".join(lines))

    return f"Activities near {latitude}, {longitude}:\n\n" + "\n\n".join(results)


async def handle_search_points_of_interest(service: ActivitiesService, args: Dict[str, Any]) -> str:
    latitude, longitude = args["latitude"], args["longitude"]
    pois = await service.search_points_of_interest(latitude, longitude, args.get("radius"), args.get("categories"))

    if not pois:
        return f"No points of interest found near coordinates {latitude}, {longitude}."

    results = []
    for i, poi in enumerate(pois[:15], 1):
        coords = poi.get("geoCode", {})
        score = poi.get("analytics", {}).get("travelers", {}).get("score") or "N/A"
        tags = ", ".join(poi.get("tags") or []) or "No tags"
        results.append(
            f"{i}. {poi.get('name')}\n"
            f"   Category: {poi.get('category')}\n"
            f"   Rank: {poi.get('rank', 'N/A')}\n"
            f"   Traveler Score: {score}\n"
            f"   Tags: {tags}\n"
            f"   Location: {coords.get('latitude')}, {coords.get('longitude')}"
        )

    return f"Points of Interest near {latitude}, {longitude}:\n\n" + "\n\n".join(results)


async def handle_travel_analytics(service: AnalyticsService, args: Dict[str, Any]) -> str:
    origin, destination = args["originCityCode"], args["destinationCityCode"]
    analytics = await service.get_travel_analytics(args)

    if not analytics:
        return f"No travel analytics data found for {origin} to {destination}."

    results = []
    for i, entry in enumerate(analytics, 1):
        scores = entry.get("analytics", {})
        marker = " ⭐" if entry.get("destination") == destination else ""
        results.append(
            f"{i}. Destination: {entry.get('destination')}{marker}\n"
            f"   Type: {entry.get('subType')}\n"
            f"   Flight Score: {scores.get('flights', {}).get('score', 'N/A')}\n"
            f"   Traveler Score: {scores.get('travelers', {}).get('score', 'N/A')}"
        )

    return f"Travel Analytics for {origin} → {destination} ({args['searchDate']}):\n\n" + "\n\n".join(results)


async def handle_trip_purpose_prediction(service: AnalyticsService, args: Dict[str, Any]) -> str:
    prediction = await service.get_trip_purpose_prediction(args)

    if not prediction:
        return "No trip purpose prediction available for the specified route."

    try:
        confidence = f"{float(prediction.get('probability')) * 100:.1f}%"
    except (TypeError, ValueError):
        confidence = "N/A"

    lines = [
        f"Trip Purpose Prediction for {args['originLocationCode']} → {args['destinationLocationCode']}:",
        "",
        f"Trip Type: {'Round-trip' if args.get('returnDate') else 'One-way'}",
        f"Departure: {args['departureDate']}",
    ]
    if args.get("returnDate"):
        lines.append(f"Return: {args['returnDate']}")
    lines.extend([
        f"Search Date: {args['searchDate']}",
        "",
        f"Predicted Purpose: {prediction.get('result')}",
        f"Confidence: {confidence}",
        f"Prediction Type: {prediction.get('subType')}",
    ])
    return "\n".join(lines)

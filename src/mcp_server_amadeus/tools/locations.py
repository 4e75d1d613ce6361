"""Location-related tools: airports, cities and airlines."""

from typing import Any, Dict, List

from .. import config
from ..formatters import calculate_distance, format_airport_code, format_distance
from ..services import LocationService

LOCATION_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "search_locations",
        "description": "Search for airports, cities, and other travel locations",
        "inputSchema": {
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "Search keyword (city name, airport name, or IATA code)",
                },
                "subType": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": ["AIRPORT", "CITY", "POINT_OF_INTEREST", "DISTRICT"],
                    },
                    "description": "Types of locations to search for (default: AIRPORT,CITY)",
                },
            },
            "required": ["keyword"],
        },
    },
    {
        "name": "get_airport_info",
        "description": "Get detailed information about a specific airport",
        "inputSchema": {
            "type": "object",
            "properties": {
                "iataCode": {
                    "type": "string",
                    "description": 'IATA airport code (e.g., "JFK", "LAX")',
                },
            },
            "required": ["iataCode"],
        },
    },
    {
        "name": "get_nearby_airports",
        "description": "Find airports near a specific location",
        "inputSchema": {
            "type": "object",
            "properties": {
                "latitude": {
                    "type": "number",
                    "description": "Latitude of the location",
                },
                "longitude": {
                    "type": "number",
                    "description": "Longitude of the location",
                },
                "radius": {
                    "type": "number",
                    "description": "Search radius in kilometers (default: 500)",
                    "default": 500,
                },
            },
            "required": ["latitude", "longitude"],
        },
    },
    {
        "name": "get_airline_info",
        "description": "Get information about airlines",
        "inputSchema": {
            "type": "object",
            "properties": {
                "airlineCodes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'IATA airline codes (e.g., ["AA", "DL", "UA"])',
                },
            },
            "required": ["airlineCodes"],
        },
    },
]


def get_location_service() -> LocationService:
    return LocationService(config.get_amadeus_client())


async def handle_location_tool(name: str, args: Dict[str, Any]) -> str:
    service = get_location_service()

    if name == "search_locations":
        return await handle_search_locations(service, args)
    if name == "get_airport_info":
        return await handle_get_airport_info(service, args)
    if name == "get_nearby_airports":
        return await handle_get_nearby_airports(service, args)
    if name == "get_airline_info":
        return await handle_get_airline_info(service, args)
    raise ValueError(f"Unknown location tool: {name}")


async def handle_search_locations(service: LocationService, args: Dict[str, Any]) -> str:
    keyword = args["keyword"]
    locations = await service.search_locations(keyword, args.get("subType"))

    if not locations:
        return f'No locations found for "{keyword}".'

    results = []
    for i, location in enumerate(locations[:15], 1):
        address = location.get("address", {})
        coords = location.get("geoCode", {})
        results.append(
            f"{i}. {location.get('name')} ({location.get('iataCode')})\n"
            f"   Type: {location.get('subType')}\n"
            f"   Location: {address.get('cityName')}, {address.get('countryName')}\n"
            f"   Coordinates: {coords.get('latitude')}, {coords.get('longitude')}\n"
            f"   Timezone: {location.get('timeZoneOffset', 'N/A')}"
        )

    return f'Found {len(locations)} locations for "{keyword}":\n\n' + "\n\n".join(results)


async def handle_get_airport_info(service: LocationService, args: Dict[str, Any]) -> str:
    iata_code = format_airport_code(args["iataCode"])
    airport = await service.get_airport_info(iata_code)

    if not airport:
        return f'No airport found with IATA code "{iata_code}".'

    address = airport.get("address", {})
    coords = airport.get("geoCode", {})
    score = airport.get("analytics", {}).get("travelers", {}).get("score") or "N/A"

    return f"""Airport Information for {iata_code}:

Name: {airport.get('name')}
Detailed Name: {airport.get('detailedName')}
Type: {airport.get('subType')}
Location: {address.get('cityName')}, {address.get('countryName')}
Region: {address.get('regionCode', 'N/A')}
Coordinates: {coords.get('latitude')}, {coords.get('longitude')}
Timezone Offset: {airport.get('timeZoneOffset', 'N/A')}
Traveler Score: {score}"""


async def handle_get_nearby_airports(service: LocationService, args: Dict[str, Any]) -> str:
    latitude = args["latitude"]
    longitude = args["longitude"]
    radius = args.get("radius") or 500
    airports = await service.get_nearby_airports(latitude, longitude, radius)

    if not airports:
        return f"No airports found within {radius}km of coordinates {latitude}, {longitude}."

    results = []
    for i, airport in enumerate(airports[:10], 1):
        address = airport.get("address", {})
        coords = airport.get("geoCode")
        if coords:
            distance = format_distance(
                calculate_distance(latitude, longitude, coords["latitude"], coords["longitude"]), "KM"
            )
        else:
            distance = "N/A"
        results.append(
            f"{i}. {airport.get('name')} ({airport.get('iataCode')})\n"
            f"   Location: {address.get('cityName')}, {address.get('countryName')}\n"
            f"   Distance: {distance}"
        )

    return f"Found {len(airports)} airports within {radius}km:\n\n" + "\n\n".join(results)


async def handle_get_airline_info(service: LocationService, args: Dict[str, Any]) -> str:
    airlines = await service.get_airline_info(args["airlineCodes"])

    if not airlines:
        return "No airline information found for the specified codes."

    results = []
    for i, airline in enumerate(airlines, 1):
        results.append(
            f"{i}. {airline.get('businessName') or airline.get('commonName')} ({airline.get('iataCode')})\n"
            f"   Type: {airline.get('type')}\n"
            f"   ICAO Code: {airline.get('icaoCode', 'N/A')}"
        )

    return "Airline Information:\n\n" + "\n\n".join(results)

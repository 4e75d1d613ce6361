"""Flight search tools: offers, inspiration and cheapest dates."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_date_time, format_duration, format_price, format_stops, format_travel_class
from ..services import FlightService

FLIGHT_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "search_flights",
        "description": (
            "Search for flight offers between two locations. Results include offer IDs "
            "and ticketing deadlines for use with get_flight_pricing and create_flight_booking."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "originLocationCode": {
                    "type": "string",
                    "description": 'IATA airport code for departure (e.g., "NYC", "LAX")',
                },
                "destinationLocationCode": {
                    "type": "string",
                    "description": 'IATA airport code for arrival (e.g., "LON", "PAR")',
                },
                "departureDate": {
                    "type": "string",
                    "description": "Departure date in YYYY-MM-DD format",
                },
                "returnDate": {
                    "type": "string",
                    "description": "Return date in YYYY-MM-DD format (optional for one-way)",
                },
                "adults": {
                    "type": "number",
                    "description": "Number of adult passengers (default: 1)",
                    "default": 1,
                },
                "children": {
                    "type": "number",
                    "description": "Number of child passengers (default: 0)",
                    "default": 0,
                },
                "infants": {
                    "type": "number",
                    "description": "Number of infant passengers (default: 0)",
                    "default": 0,
                },
                "travelClass": {
                    "type": "string",
                    "enum": ["ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"],
                    "description": "Travel class preference",
                },
                "nonStop": {
                    "type": "boolean",
                    "description": "Search for non-stop flights only",
                },
                "currencyCode": {
                    "type": "string",
                    "description": 'Currency code for pricing (e.g., "USD", "EUR")',
                },
                "maxPrice": {
                    "type": "number",
                    "description": "Maximum price filter",
                },
                "max": {
                    "type": "number",
                    "description": "Maximum number of results (default: 50)",
                    "default": 50,
                },
                "includedAirlineCodes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Only include these airlines (IATA codes, e.g., ["AA", "DL"])',
                },
                "excludedAirlineCodes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Exclude these airlines (IATA codes)",
                },
            },
            "required": ["originLocationCode", "destinationLocationCode", "departureDate"],
        },
    },
    {
        "name": "get_flight_inspiration",
        "description": "Get flight inspiration - cheapest destinations from an origin",
        "inputSchema": {
            "type": "object",
            "properties": {
                "origin": {
                    "type": "string",
                    "description": 'IATA airport code for departure (e.g., "NYC")',
                },
                "maxPrice": {
                    "type": "number",
                    "description": "Maximum price filter",
                },
            },
            "required": ["origin"],
        },
    },
    {
        "name": "get_cheapest_dates",
        "description": "Find the cheapest dates to fly between two destinations",
        "inputSchema": {
            "type": "object",
            "properties": {
                "origin": {
                    "type": "string",
                    "description": "IATA airport code for departure",
                },
                "destination": {
                    "type": "string",
                    "description": "IATA airport code for arrival",
                },
                "departureDate": {
                    "type": "string",
                    "description": "Preferred departure date in YYYY-MM-DD format (optional)",
                },
                "oneWay": {
                    "type": "boolean",
                    "description": "Search for one-way flights only",
                },
                "duration": {
                    "type": "string",
                    "description": 'Trip length in days ("1,15") or as an ISO 8601 duration ("PT72H")',
                },
            },
            "required": ["origin", "destination"],
        },
    },
]

BOOKING_INSTRUCTIONS = """💡 Booking Instructions:
1. Pick an offer and confirm its current price with get_flight_pricing (pass the full offer object).
2. Book it with create_flight_booking, passing the priced offer and the traveler details.
3. Look up the order afterwards with get_flight_booking and the returned booking ID."""


def get_flight_service() -> FlightService:
    return FlightService(config.get_amadeus_client())


async def handle_flight_tool(name: str, args: Dict[str, Any]) -> str:
    service = get_flight_service()

    if name == "search_flights":
        return await handle_search_flights(service, args)
    if name == "get_flight_inspiration":
        return await handle_flight_inspiration(service, args)
    if name == "get_cheapest_dates":
        return await handle_cheapest_dates(service, args)
    raise ValueError(f"Unknown flight tool: {name}")


def format_flight_offer(index: int, offer: Dict[str, Any]) -> str:
    """Render one flight offer, its return leg (if any) and booking details."""
    itineraries = offer.get("itineraries") or [{}]
    itinerary = itineraries[0]
    segments = itinerary.get("segments") or [{}]
    outbound = segments[0]
    last_segment = segments[-1]
    price = offer.get("price", {})
    fare_details = ((offer.get("travelerPricings") or [{}])[0].get("fareDetailsBySegment") or [{}])[0]
    cabin = fare_details.get("cabin")

    lines = [
        f"{index}. {outbound.get('carrierCode', '')}{outbound.get('number', '')}",
        f"   Route: {outbound.get('departure', {}).get('iataCode')} → {last_segment.get('arrival', {}).get('iataCode')}",
        f"   Departure: {format_date_time(outbound.get('departure', {}).get('at'))}",
        f"   Arrival: {format_date_time(last_segment.get('arrival', {}).get('at'))}",
        f"   Duration: {format_duration(itinerary.get('duration', 'N/A'))}",
        f"   Price: {format_price(price['total'], price.get('currency', '')) if price.get('total') else 'N/A'}",
        f"   Stops: {format_stops(len(segments))}",
        f"   Class: {format_travel_class(cabin) if cabin else 'N/A'}",
        f"   Seats Available: {offer.get('numberOfBookableSeats', 'N/A')}",
    ]

    if len(itineraries) > 1:
        back = itineraries[1].get("segments") or [{}]
        lines.append(
            f"   Return: {back[0].get('departure', {}).get('iataCode')} → "
            f"{back[-1].get('arrival', {}).get('iataCode')} "
            f"({format_date_time(back[0].get('departure', {}).get('at'))})"
        )

    lines.extend([
        "   🔗 Booking Options:",
        f"   Offer ID: {offer.get('id', 'N/A')}",
        f"   Last Ticketing Date: {offer.get('lastTicketingDate', 'N/A')}",
    ])
    return "\n".join(lines)


async def handle_search_flights(service: FlightService, args: Dict[str, Any]) -> str:
    offers = await service.search_flights(args)

    if not offers:
        return "No flights found for the specified criteria."

    results = [format_flight_offer(i, offer) for i, offer in enumerate(offers[:10], 1)]
    return f"Found {len(offers)} flight offers:\n\n" + "\n\n".join(results) + f"\n\n{BOOKING_INSTRUCTIONS}"


async def handle_flight_inspiration(service: FlightService, args: Dict[str, Any]) -> str:
    destinations = await service.get_flight_inspiration(args["origin"], args.get("maxPrice"))

    if not destinations:
        return "No flight destinations found."

    results = []
    for i, dest in enumerate(destinations[:15], 1):
        total = (dest.get("price") or {}).get("total") or "N/A"
        dates = f" ({dest['departureDate']})" if dest.get("departureDate") else ""
        results.append(f"{i}. {dest.get('destination')} - {total}{dates}")

    return f"Flight inspiration from {args['origin']}:\n\n" + "\n".join(results)


async def handle_cheapest_dates(service: FlightService, args: Dict[str, Any]) -> str:
    dates = await service.get_cheapest_dates(
        args["origin"],
        args["destination"],
        args.get("departureDate"),
        args.get("oneWay"),
        args.get("duration"),
    )

    if not dates:
        return "No date options found."

    results = []
    for i, option in enumerate(dates[:10], 1):
        total = (option.get("price") or {}).get("total") or "N/A"
        results.append(f"{i}. {option.get('departureDate')} - {total}")

    return f"Cheapest dates for {args['origin']} → {args['destination']}:\n\n" + "\n".join(results)

"""Seat maps, delay prediction, pricing and flight order tools."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_date_time, format_duration
from ..services import FlightAdvancedService

DELAY_PREDICTION_FIELDS = [
    "originLocationCode",
    "destinationLocationCode",
    "departureDate",
    "departureTime",
    "arrivalDate",
    "arrivalTime",
    "aircraftCode",
    "carrierCode",
    "flightNumber",
    "duration",
]

FLIGHT_ADVANCED_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_flight_seat_maps",
        "description": "Get seat maps for a specific flight order",
        "inputSchema": {
            "type": "object",
            "properties": {
                "flightOrderId": {
                    "type": "string",
                    "description": "Flight order ID to get seat maps for",
                },
            },
            "required": ["flightOrderId"],
        },
    },
    {
        "name": "predict_flight_delay",
        "description": "Predict flight delay probability based on flight details",
        "inputSchema": {
            "type": "object",
            "properties": {
                "originLocationCode": {"type": "string", "description": 'Origin airport IATA code (e.g., "JFK")'},
                "destinationLocationCode": {"type": "string", "description": 'Destination airport IATA code (e.g., "LAX")'},
                "departureDate": {"type": "string", "description": "Departure date in YYYY-MM-DD format"},
                "departureTime": {"type": "string", "description": "Departure time in HH:MM:SS format"},
                "arrivalDate": {"type": "string", "description": "Arrival date in YYYY-MM-DD format"},
                "arrivalTime": {"type": "string", "description": "Arrival time in HH:MM:SS format"},
                "aircraftCode": {"type": "string", "description": 'Aircraft type code (e.g., "320")'},
                "carrierCode": {"type": "string", "description": 'Airline IATA code (e.g., "AA")'},
                "flightNumber": {"type": "string", "description": 'Flight number (e.g., "100")'},
                "duration": {"type": "string", "description": 'Flight duration in ISO 8601 format (e.g., "PT5H30M")'},
            },
            "required": DELAY_PREDICTION_FIELDS,
        },
    },
    {
        "name": "get_flight_pricing",
        "description": (
            "Confirm the current price and availability of flight offers returned by "
            "search_flights before booking them"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "flightOffers": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Complete flight offer objects exactly as returned by the flight search",
                },
            },
            "required": ["flightOffers"],
        },
    },
    {
        "name": "create_flight_booking",
        "description": (
            "Create a flight booking (flight order) from a priced flight offer and traveler details"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "flightOffers": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Priced flight offers to book (output of get_flight_pricing)",
                },
                "travelers": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Traveler records: id, dateOfBirth, name, gender, contact, documents",
                },
                "ticketingAgreement": {
                    "type": "object",
                    "description": 'Ticketing agreement (e.g., {"option": "DELAY_TO_CANCEL", "delay": "6D"})',
                },
                "remarks": {
                    "type": "object",
                    "description": "General remarks attached to the order",
                },
                "contacts": {
                    "type": "array",
                    "items": {"type": "object"},
                    "description": "Agency or point-of-contact details",
                },
            },
            "required": ["flightOffers", "travelers"],
        },
    },
    {
        "name": "get_flight_booking",
        "description": "Retrieve an existing flight booking (flight order) by its ID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "bookingId": {
                    "type": "string",
                    "description": "Flight order ID returned by create_flight_booking",
                },
            },
            "required": ["bookingId"],
        },
    },
]


def get_flight_advanced_service() -> FlightAdvancedService:
    return FlightAdvancedService(config.get_amadeus_client())


async def handle_flight_advanced_tool(name: str, args: Dict[str, Any]) -> str:
    service = get_flight_advanced_service()

    if name == "get_flight_seat_maps":
        return await handle_get_seat_maps(service, args)
    if name == "predict_flight_delay":
        return await handle_flight_delay_prediction(service, args)
    if name == "get_flight_pricing":
        return await handle_flight_pricing(service, args)
    if name == "create_flight_booking":
        return await handle_create_flight_booking(service, args)
    if name == "get_flight_booking":
        return await handle_get_flight_booking(service, args)
    raise ValueError(f"Unknown advanced flight tool: {name}")


async def handle_get_seat_maps(service: FlightAdvancedService, args: Dict[str, Any]) -> str:
    seat_maps = await service.get_seat_maps(args["flightOrderId"])

    if not seat_maps:
        return "No seat maps found for the specified flight order."

    results = []
    for i, seat_map in enumerate(seat_maps, 1):
        decks = seat_map.get("decks", [])
        total_seats = sum(len(deck.get("seats", [])) for deck in decks)
        departure = seat_map.get("departure", {})
        arrival = seat_map.get("arrival", {})
        results.append(
            f"{i}. Flight {seat_map.get('carrierCode', '')}{seat_map.get('number', '')}\n"
            f"   Route: {departure.get('iataCode')} → {arrival.get('iataCode')}\n"
            f"   Aircraft: {seat_map.get('aircraft', {}).get('code', 'N/A')}\n"
            f"   Decks: {len(decks)}\n"
            f"   Total Seats: {total_seats}\n"
            f"   Departure: {format_date_time(departure.get('at'))}\n"
            f"   Arrival: {format_date_time(arrival.get('at'))}"
        )

    return f"Seat Maps for Flight Order {args['flightOrderId']}:\n\n" + "\n\n".join(results)


def _percent(probability: Any) -> str:
    try:
        return f"{float(probability) * 100:.1f}%"
    except (TypeError, ValueError):
        return "N/A"


async def handle_flight_delay_prediction(service: FlightAdvancedService, args: Dict[str, Any]) -> str:
    prediction = await service.get_flight_delay_prediction(args)

    if not prediction:
        return "No delay prediction available for the specified flight."

    return f"""Flight Delay Prediction for {args['carrierCode']}{args['flightNumber']}:

Route: {args['originLocationCode']} → {args['destinationLocationCode']}
Departure: {args['departureDate']} {args['departureTime']}
Arrival: {args['arrivalDate']} {args['arrivalTime']}
Aircraft: {args['aircraftCode']}
Duration: {format_duration(args['duration'])}

Prediction Result: {prediction.get('result')}
Delay Probability: {_percent(prediction.get('probability'))}
Prediction Type: {prediction.get('subType')}"""


async def handle_flight_pricing(service: FlightAdvancedService, args: Dict[str, Any]) -> str:
    pricing = await service.get_flight_pricing(args["flightOffers"])
    offers = (pricing or {}).get("flightOffers") or []

    if not offers:
        return "No pricing information returned for the specified flight offers."

    results = []
    for i, offer in enumerate(offers, 1):
        price = offer.get("price", {})
        results.append(
            f"{i}. Offer ID: {offer.get('id', 'N/A')}\n"
            f"   Total Price: {price.get('currency')} {price.get('grandTotal') or price.get('total')}\n"
            f"   Base Fare: {price.get('currency')} {price.get('base', 'N/A')}\n"
            f"   Last Ticketing Date: {offer.get('lastTicketingDate', 'N/A')}\n"
            f"   Instant Ticketing Required: {'Yes' if offer.get('instantTicketingRequired') else 'No'}"
        )

    return (
        "Flight Pricing Confirmation:\n\n"
        + "\n\n".join(results)
        + "\n\nPrices are confirmed. Pass these offers to create_flight_booking to book."
    )


def _traveler_names(order: Dict[str, Any]) -> str:
    names = []
    for traveler in order.get("travelers", []):
        name = traveler.get("name", {})
        names.append(f"{name.get('firstName', '')} {name.get('lastName', '')}".strip())
    return ", ".join(n for n in names if n) or "N/A"


def format_flight_order(order: Dict[str, Any]) -> str:
    records = order.get("associatedRecords") or [{}]
    lines = [
        f"Booking ID: {order.get('id', 'N/A')}",
        f"Booking Reference: {records[0].get('reference', 'N/A')}",
        f"Travelers: {_traveler_names(order)}",
    ]

    for offer in order.get("flightOffers", []):
        price = offer.get("price", {})
        for itinerary in offer.get("itineraries", []):
            for segment in itinerary.get("segments", []):
                lines.append(
                    f"  ✈️  {segment.get('carrierCode', '')}{segment.get('number', '')} "
                    f"{segment.get('departure', {}).get('iataCode')} → {segment.get('arrival', {}).get('iataCode')} "
                    f"({format_date_time(segment.get('departure', {}).get('at'))})"
                )
        lines.append(f"Total Price: {price.get('currency')} {price.get('grandTotal') or price.get('total')}")

    agreement = order.get("ticketingAgreement")
    if agreement:
        lines.append(f"Ticketing: {agreement.get('option')} {agreement.get('delay', '')}".rstrip())
    return "\n".join(lines)


async def handle_create_flight_booking(service: FlightAdvancedService, args: Dict[str, Any]) -> str:
    order = await service.create_flight_booking(args)
    if not order:
        return "Flight booking request was accepted but no order details were returned."

    return "✅ Flight booking created successfully!\n\n" + format_flight_order(order)


async def handle_get_flight_booking(service: FlightAdvancedService, args: Dict[str, Any]) -> str:
    order = await service.get_flight_booking(args["bookingId"])
    if not order:
        return f"No flight booking found with ID \"{args['bookingId']}\"."

    return f"Flight Booking {args['bookingId']}:\n\n" + format_flight_order(order)

"""Hotel search and hotel offer tools."""

from typing import Any, Dict, List

from .. import config
from ..formatters import format_date, format_distance
from ..services import HotelService

HOTEL_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "search_hotels",
        "description": "Search for hotels by city or location",
        "inputSchema": {
            "type": "object",
            "properties": {
                "cityCode": {
                    "type": "string",
                    "description": 'IATA city code (e.g., "NYC", "PAR")',
                },
                "latitude": {
                    "type": "number",
                    "description": "Latitude for location-based search",
                },
                "longitude": {
                    "type": "number",
                    "description": "Longitude for location-based search",
                },
                "radius": {
                    "type": "number",
                    "description": "Search radius in kilometers (default: 5)",
                    "default": 5,
                },
                "radiusUnit": {
                    "type": "string",
                    "enum": ["KM", "MILE"],
                    "description": "Unit for radius (default: KM)",
                    "default": "KM",
                },
                "chainCodes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Hotel chain codes to filter by",
                },
                "amenities": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Required amenities",
                },
                "ratings": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "Hotel star ratings to filter by",
                },
            },
            "required": [],
            "anyOf": [
                {"required": ["cityCode"]},
                {"required": ["latitude", "longitude"]},
            ],
        },
    },
    {
        "name": "search_hotel_offers",
        "description": "Search for hotel offers with pricing and availability",
        "inputSchema": {
            "type": "object",
            "properties": {
                "hotelIds": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Hotel IDs to search for offers",
                },
                "adults": {
                    "type": "number",
                    "description": "Number of adult guests",
                },
                "checkInDate": {
                    "type": "string",
                    "description": "Check-in date in YYYY-MM-DD format",
                },
                "checkOutDate": {
                    "type": "string",
                    "description": "Check-out date in YYYY-MM-DD format",
                },
                "childAges": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "Ages of children",
                },
                "roomQuantity": {
                    "type": "number",
                    "description": "Number of rooms (default: 1)",
                    "default": 1,
                },
                "priceRange": {
                    "type": "string",
                    "description": 'Price range per night (e.g., "100-300"); requires currency',
                },
                "currency": {
                    "type": "string",
                    "description": "Currency code for pricing",
                },
                "paymentPolicy": {
                    "type": "string",
                    "enum": ["NONE", "GUARANTEE", "DEPOSIT"],
                    "description": "Payment policy filter",
                },
                "boardType": {
                    "type": "string",
                    "enum": ["ROOM_ONLY", "BREAKFAST", "HALF_BOARD", "FULL_BOARD", "ALL_INCLUSIVE"],
                    "description": "Board type filter",
                },
            },
            "required": ["hotelIds", "adults", "checkInDate", "checkOutDate"],
        },
    },
]


def get_hotel_service() -> HotelService:
    return HotelService(config.get_amadeus_client())


async def handle_hotel_tool(name: str, args: Dict[str, Any]) -> str:
    service = get_hotel_service()

    if name == "search_hotels":
        return await handle_search_hotels(service, args)
    if name == "search_hotel_offers":
        return await handle_search_hotel_offers(service, args)
    raise ValueError(f"Unknown hotel tool: {name}")


async def handle_search_hotels(service: HotelService, args: Dict[str, Any]) -> str:
    hotels = await service.search_hotels(args)

    if not hotels:
        return "No hotels found for the specified criteria."

    results = []
    for i, hotel in enumerate(hotels[:20], 1):
        address = hotel.get("address", {})
        street = ", ".join(address.get("lines", []))
        place = ", ".join(part for part in (street, address.get("cityName"), address.get("countryCode")) if part)
        rating = f"{hotel['rating']}⭐" if hotel.get("rating") else "No rating"
        distance = hotel.get("distance")
        if distance and distance.get("value") is not None:
            distance_text = format_distance(distance["value"], distance.get("unit", "KM"))
        else:
            distance_text = "N/A"

        results.append(
            f"{i}. {hotel.get('name')} ({hotel.get('hotelId')})\n"
            f"   {rating} | {hotel.get('chainCode') or 'Independent'}\n"
            f"   {place or 'Address not available'}\n"
            f"   Distance: {distance_text}"
        )

    return f"Found {len(hotels)} hotels:\n\n" + "\n\n".join(results)


async def handle_search_hotel_offers(service: HotelService, args: Dict[str, Any]) -> str:
    offers = await service.search_hotel_offers(args)

    if not offers:
        return "No hotel offers found for the specified criteria."

    results = []
    for i, hotel_offer in enumerate(offers[:10], 1):
        hotel = hotel_offer.get("hotel", {})
        hotel_offers = hotel_offer.get("offers") or []

        if not hotel_offers:
            results.append(f"{i}. {hotel.get('name')} - No offers available")
            continue

        offer = hotel_offers[0]
        guests = offer.get("guests", {})
        children = f", {len(guests['childAges'])} children" if guests.get("childAges") else ""
        room = offer.get("room", {}).get("description", {}).get("text", "No description")
        price = offer.get("price", {})
        payment = offer.get("policies", {}).get("paymentType", "N/A")

        results.append(
            f"{i}. {hotel.get('name')}\n"
            f"   Offer ID: {offer.get('id', 'N/A')}\n"
            f"   Check-in: {format_date(offer.get('checkInDate'))} | Check-out: {format_date(offer.get('checkOutDate'))}\n"
            f"   Room: {room}\n"
            f"   Guests: {guests.get('adults', 'N/A')} adults{children}\n"
            f"   Price: {price.get('currency')} {price.get('total')}\n"
            f"   Payment: {payment}"
        )

    return f"Found {len(offers)} hotel offers:\n\n" + "\n\n".join(results)

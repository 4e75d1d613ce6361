"""Hotel sentiment and hotel name autocomplete tools."""

from typing import Any, Dict, List

from .. import config
from ..services import HotelAdvancedService

SENTIMENT_LABELS = [
    ("sleepQuality", "Sleep Quality"),
    ("service", "Service"),
    ("facilities", "Facilities"),
    ("roomComforts", "Room Comfort"),
    ("valueForMoney", "Value for Money"),
    ("location", "Location"),
    ("staff", "Staff"),
]

HOTEL_ADVANCED_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_hotel_sentiments",
        "description": "Get hotel ratings and sentiment analysis from reviews",
        "inputSchema": {
            "type": "object",
            "properties": {
                "hotelIds": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of hotel IDs to get sentiments for",
                },
            },
            "required": ["hotelIds"],
        },
    },
    {
        "name": "search_hotel_autocomplete",
        "description": "Hotel name autocomplete search for finding hotels by name",
        "inputSchema": {
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "Hotel name or partial name to search for",
                },
            },
            "required": ["keyword"],
        },
    },
]


def get_hotel_advanced_service() -> HotelAdvancedService:
    return HotelAdvancedService(config.get_amadeus_client())


async def handle_hotel_advanced_tool(name: str, args: Dict[str, Any]) -> str:
    service = get_hotel_advanced_service()

    if name == "get_hotel_sentiments":
        return await handle_get_hotel_sentiments(service, args)
    if name == "search_hotel_autocomplete":
        return await handle_hotel_autocomplete(service, args)
    raise ValueError(f"Unknown advanced hotel tool: {name}")


def format_sentiment_scores(scores: Dict[str, Any]) -> List[str]:
    lines = []
    for key, label in SENTIMENT_LABELS:
        score = scores.get(key)
        if score is None:
            continue
        # the API returns bare numbers; some payloads nest {score, description}
        if isinstance(score, dict):
            lines.append(f"{label}: {score.get('score')}/100 ({score.get('description', '')})")
        else:
            lines.append(f"{label}: {score}/100")
    return lines


async def handle_get_hotel_sentiments(service: HotelAdvancedService, args: Dict[str, Any]) -> str:
    sentiments = await service.get_hotel_sentiments(args["hotelIds"])

    if not sentiments:
        return "No sentiment data found for the specified hotels."

    results = []
    for i, sentiment in enumerate(sentiments, 1):
        scores = format_sentiment_scores(sentiment.get("sentiments", {}))
        detail = "\n   ".join(scores) if scores else "No category scores available"
        results.append(
            f"{i}. Hotel ID: {sentiment.get('hotelId')}\n"
            f"   Overall Rating: {sentiment.get('overallRating', 'N/A')}/100\n"
            f"   Reviews: {sentiment.get('numberOfReviews', 0)} | Ratings: {sentiment.get('numberOfRatings', 0)}\n"
            f"\n"
            f"   Detailed Sentiments:\n"
            f"   {detail}"
        )

    return "Hotel Sentiment Analysis:\n\n" + "\n\n".join(results)


async def handle_hotel_autocomplete(service: HotelAdvancedService, args: Dict[str, Any]) -> str:
    keyword = args["keyword"]
    hotels = await service.search_hotel_autocomplete(keyword)

    if not hotels:
        return f'No hotels found matching "{keyword}".'

    results = []
    for i, hotel in enumerate(hotels[:15], 1):
        address = hotel.get("address", {})
        coords = hotel.get("geoCode", {})
        hotel_ids = ", ".join(hotel.get("hotelIds", [])) or "N/A"
        results.append(
            f"{i}. {hotel.get('name')}\n"
            f"   Type: {hotel.get('subType')}\n"
            f"   Hotel IDs: {hotel_ids}\n"
            f"   Location: {address.get('cityName', 'N/A')}, {address.get('countryCode', 'N/A')}\n"
            f"   Coordinates: {coords.get('latitude')}, {coords.get('longitude')}"
        )

    return f'Hotel Autocomplete Results for "{keyword}":\n\n' + "\n\n".join(results)

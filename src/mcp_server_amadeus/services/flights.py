"""Flight shopping, pricing and booking services."""

import math
import re
from typing import Any, Dict, List, Optional

from ..client import handle_error
from .base import AmadeusService, first_record, join_list

IATA_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


def normalize_iata_code(code: str, label: str) -> str:
    """Upper-case and validate a three letter IATA code."""
    normalized = (code or "").upper().strip()
    if not IATA_CODE_PATTERN.match(normalized):
        raise ValueError(f"Invalid {label} IATA code: {normalized}. Must be 3 letters.")
    return normalized


def duration_to_day_range(duration: Optional[str]) -> Optional[str]:
    """
    Convert an ISO 8601 hour duration ("PT8H") to the day range the
    flight-dates endpoint accepts ("1,7"). Other values pass through.
    """
    if not duration or not duration.startswith("PT"):
        return duration
    match = re.search(r"(\d+)H", duration)
    hours = int(match.group(1)) if match else 24
    days = math.ceil(hours / 24)
    return f"1,{max(days, 7)}"


class FlightService(AmadeusService):
    """Flight offers search, inspiration and cheapest dates."""

    async def search_flights(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        search_params = {
            "originLocationCode": params.get("originLocationCode"),
            "destinationLocationCode": params.get("destinationLocationCode"),
            "departureDate": params.get("departureDate"),
            "returnDate": params.get("returnDate"),
            "adults": params.get("adults") or 1,
            "children": params.get("children") or 0,
            "infants": params.get("infants") or 0,
            "travelClass": params.get("travelClass"),
            "includedAirlineCodes": join_list(params.get("includedAirlineCodes")),
            "excludedAirlineCodes": join_list(params.get("excludedAirlineCodes")),
            "nonStop": params.get("nonStop"),
            "currencyCode": params.get("currencyCode"),
            "maxPrice": params.get("maxPrice"),
            "max": params.get("max") or 50,
        }
        return await self._fetch_list("Flight search", "/v2/shopping/flight-offers", search_params)

    async def get_flight_inspiration(self, origin: str, max_price: Optional[float] = None) -> List[Dict[str, Any]]:
        return await self._fetch_list(
            "Flight inspiration search",
            "/v1/shopping/flight-destinations",
            {"origin": origin, "maxPrice": max_price},
        )

    async def get_cheapest_dates(
        self,
        origin: str,
        destination: str,
        departure_date: Optional[str] = None,
        one_way: Optional[bool] = None,
        duration: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        try:
            search_params = {
                "origin": normalize_iata_code(origin, "origin"),
                "destination": normalize_iata_code(destination, "destination"),
                "departureDate": departure_date,
                "oneWay": one_way,
                "duration": duration_to_day_range(duration),
            }
        except ValueError as e:
            raise handle_error(e, "Cheapest dates search") from e

        return await self._fetch_list("Cheapest dates search", "/v1/shopping/flight-dates", search_params)


class FlightAdvancedService(AmadeusService):
    """Seat maps, delay prediction, pricing and flight orders."""

    async def get_seat_maps(self, flight_order_id: str) -> List[Dict[str, Any]]:
        return await self._fetch_list(
            "Seat maps search",
            "/v1/shopping/seatmaps",
            {"flight-orderId": flight_order_id},
        )

    async def get_flight_delay_prediction(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        keys = (
            "originLocationCode", "destinationLocationCode",
            "departureDate", "departureTime", "arrivalDate", "arrivalTime",
            "aircraftCode", "carrierCode", "flightNumber", "duration",
        )
        search_params = {key: params.get(key) for key in keys}
        data = await self._fetch("Flight delay prediction", "/v1/travel/predictions/flight-delay", search_params)
        return first_record(data)

    async def get_flight_pricing(self, flight_offers: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        body = {
            "data": {
                "type": "flight-offers-pricing",
                "flightOffers": flight_offers
            }
        }
        data = await self._fetch("Flight pricing", "/v1/shopping/flight-offers/pricing", body=body)
        return data or None

    async def create_flight_booking(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        order = {
            "type": "flight-order",
            "flightOffers": params.get("flightOffers"),
            "travelers": params.get("travelers"),
        }
        for key in ("remarks", "ticketingAgreement", "contacts"):
            if params.get(key):
                order[key] = params[key]

        data = await self._fetch("Flight booking", "/v1/booking/flight-orders", body={"data": order})
        return data or None

    async def get_flight_booking(self, booking_id: str) -> Optional[Dict[str, Any]]:
        data = await self._fetch("Flight booking retrieval", f"/v1/booking/flight-orders/{booking_id}")
        return data or None

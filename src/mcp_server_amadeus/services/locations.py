"""Airport, city and airline reference data."""

from typing import Any, Dict, List, Optional

from .base import AmadeusService, first_record, join_list


class LocationService(AmadeusService):

    async def search_locations(self, keyword: str, sub_types: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        params = {
            "keyword": keyword,
            "subType": join_list(sub_types) or "AIRPORT,CITY",
            "page[limit]": 10,
        }
        return await self._fetch_list("Location search", "/v1/reference-data/locations", params)

    async def get_airport_info(self, iata_code: str) -> Optional[Dict[str, Any]]:
        """Return the best match for an airport code, or None."""
        airports = await self._fetch_list(
            "Airport info search",
            "/v1/reference-data/locations",
            {"keyword": iata_code.upper(), "subType": "AIRPORT"},
        )
        for airport in airports:
            if (airport.get("iataCode") or "").upper() == iata_code.upper():
                return airport
        return first_record(airports)

    async def get_nearby_airports(self, latitude: float, longitude: float, radius: Optional[float] = None) -> List[Dict[str, Any]]:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "radius": radius or 500,
            "page[limit]": 10,
            "sort": "relevance",
        }
        return await self._fetch_list("Nearby airports search", "/v1/reference-data/locations/airports", params)

    async def get_airline_info(self, airline_codes: List[str]) -> List[Dict[str, Any]]:
        return await self._fetch_list(
            "Airline info search",
            "/v1/reference-data/airlines",
            {"airlineCodes": join_list(airline_codes)},
        )

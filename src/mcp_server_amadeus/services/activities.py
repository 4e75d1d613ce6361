"""Tours and activities, points of interest, and travel analytics."""

from typing import Any, Dict, List, Optional

from .base import AmadeusService, first_record, join_list


class ActivitiesService(AmadeusService):

    async def search_activities(self, latitude: float, longitude: float, radius: Optional[float] = None) -> List[Dict[str, Any]]:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "radius": radius or 1,
        }
        return await self._fetch_list("Activities search", "/v1/shopping/activities", params)

    async def search_points_of_interest(
        self,
        latitude: float,
        longitude: float,
        radius: Optional[float] = None,
        categories: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "radius": radius or 1,
            "categories": join_list(categories),
        }
        return await self._fetch_list("Points of interest search", "/v1/reference-data/locations/pois", params)


class AnalyticsService(AmadeusService):

    async def get_travel_analytics(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Most traveled destinations from the origin city for the month of
        searchDate (air-traffic/traveled takes a YYYY-MM period).
        """
        search_params = {
            "originCityCode": params.get("originCityCode"),
            "period": (params.get("searchDate") or "")[:7],
            "max": params.get("max") or 10,
        }
        return await self._fetch_list("Travel analytics", "/v1/travel/analytics/air-traffic/traveled", search_params)

    async def get_trip_purpose_prediction(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        keys = ("originLocationCode", "destinationLocationCode", "departureDate", "returnDate", "searchDate")
        data = await self._fetch(
            "Trip purpose prediction",
            "/v1/travel/predictions/trip-purpose",
            {key: params.get(key) for key in keys},
        )
        return first_record(data)

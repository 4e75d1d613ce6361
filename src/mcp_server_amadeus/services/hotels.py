"""Hotel list, offers, sentiment and autocomplete services."""

from typing import Any, Dict, List

from ..client import handle_error
from .base import AmadeusService, join_list

# hotel-sentiments accepts at most three hotel ids per request
SENTIMENT_BATCH_SIZE = 3


class HotelService(AmadeusService):
    """Hotel search by city or coordinates, and hotel offers."""

    async def search_hotels(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        filters = {
            "chainCodes": join_list(params.get("chainCodes")),
            "amenities": join_list(params.get("amenities")),
            "ratings": join_list(params.get("ratings")),
            "hotelSource": params.get("hotelSource"),
        }

        if params.get("cityCode"):
            endpoint = "/v1/reference-data/locations/hotels/by-city"
            search_params = {"cityCode": params["cityCode"], **filters}
        elif params.get("latitude") is not None and params.get("longitude") is not None:
            endpoint = "/v1/reference-data/locations/hotels/by-geocode"
            search_params = {
                "latitude": params["latitude"],
                "longitude": params["longitude"],
                "radius": params.get("radius") or 5,
                "radiusUnit": params.get("radiusUnit") or "KM",
                **filters,
            }
        else:
            raise handle_error(
                ValueError("Either cityCode or latitude/longitude coordinates are required"),
                "Hotel search",
            )

        return await self._fetch_list("Hotel search", endpoint, search_params)

    async def search_hotel_offers(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        search_params = {
            "hotelIds": join_list(params.get("hotelIds")),
            "adults": params.get("adults"),
            "checkInDate": params.get("checkInDate"),
            "checkOutDate": params.get("checkOutDate"),
            "childAges": join_list(params.get("childAges")),
            "roomQuantity": params.get("roomQuantity") or 1,
            "priceRange": params.get("priceRange"),
            "currency": params.get("currency"),
            "paymentPolicy": params.get("paymentPolicy"),
            "boardType": params.get("boardType"),
        }
        return await self._fetch_list("Hotel offers search", "/v3/shopping/hotel-offers", search_params)


class HotelAdvancedService(AmadeusService):
    """Review sentiment scores and hotel name autocomplete."""

    async def get_hotel_sentiments(self, hotel_ids: List[str]) -> List[Dict[str, Any]]:
        sentiments = []
        for start in range(0, len(hotel_ids), SENTIMENT_BATCH_SIZE):
            batch = hotel_ids[start:start + SENTIMENT_BATCH_SIZE]
            sentiments.extend(
                await self._fetch_list(
                    "Hotel sentiments search",
                    "/v2/e-reputation/hotel-sentiments",
                    {"hotelIds": join_list(batch)},
                )
            )
        return sentiments

    async def search_hotel_autocomplete(self, keyword: str) -> List[Dict[str, Any]]:
        return await self._fetch_list(
            "Hotel autocomplete search",
            "/v1/reference-data/locations/hotel",
            {"keyword": keyword, "subType": "HOTEL_LEISURE,HOTEL_GDS"},
        )

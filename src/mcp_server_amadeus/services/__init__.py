from .activities import ActivitiesService, AnalyticsService
from .base import AmadeusService
from .flights import FlightAdvancedService, FlightService
from .hotels import HotelAdvancedService, HotelService
from .locations import LocationService

__all__ = [
    "AmadeusService",
    "ActivitiesService",
    "AnalyticsService",
    "FlightService",
    "FlightAdvancedService",
    "HotelService",
    "HotelAdvancedService",
    "LocationService",
]

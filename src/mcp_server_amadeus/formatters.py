"""Helpers for rendering Amadeus data as readable text."""

import math
import re
from datetime import datetime
from typing import Union

EARTH_RADIUS_KM = 6371

DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")


def _parse_iso(value: str) -> datetime:
    # fromisoformat before 3.11 rejects a trailing Z
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_date_time(value: str) -> str:
    """'2025-01-05T14:30:00' -> 'Jan 05, 2025 14:30'. Unparseable input is returned unchanged."""
    try:
        return _parse_iso(value).strftime("%b %d, %Y %H:%M")
    except (AttributeError, TypeError, ValueError):
        return value


def format_date(value: str) -> str:
    """'2025-01-05' -> 'Jan 05, 2025'. Unparseable input is returned unchanged."""
    try:
        return _parse_iso(value).strftime("%b %d, %Y")
    except (AttributeError, TypeError, ValueError):
        return value


def format_duration(duration: str) -> str:
    """ISO 8601 duration (PT2H30M) to '2h 30m'."""
    match = DURATION_PATTERN.match(duration or "")
    if not match:
        return duration

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)

    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    if minutes:
        return f"{minutes}m"
    return duration


def format_price(amount: Union[str, float], currency: str) -> str:
    return f"{currency} {float(amount):,.2f}"


def format_distance(distance: float, unit: str) -> str:
    return f"{float(distance):.1f} {unit.lower()}"


def format_airport_code(code: str) -> str:
    return code.upper()


def format_travel_class(travel_class: str) -> str:
    """PREMIUM_ECONOMY -> Premium Economy"""
    return " ".join(word.capitalize() for word in travel_class.split("_"))


def format_stops(segment_count: int) -> str:
    stops = segment_count - 1
    if stops <= 0:
        return "Non-stop"
    if stops == 1:
        return "1 stop"
    return f"{stops} stops"


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

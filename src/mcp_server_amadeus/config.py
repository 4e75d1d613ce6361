"""Amadeus credentials and the shared client instance."""

import os
from typing import Optional

from .client import BASE_URLS, AmadeusClient

_client: Optional[AmadeusClient] = None


def get_environment() -> str:
    """Return "production" or "test" (the default)."""
    environment = os.getenv("AMADEUS_ENVIRONMENT") or os.getenv("AMADEUS_ENV") or "test"
    return "production" if environment.lower() == "production" else "test"


def get_base_url() -> str:
    return BASE_URLS[get_environment()]


def get_client_id() -> str:
    return os.getenv("AMADEUS_CLIENT_ID", "")


def credentials_configured() -> bool:
    return bool(os.getenv("AMADEUS_CLIENT_ID") and os.getenv("AMADEUS_CLIENT_SECRET"))


def get_amadeus_client() -> AmadeusClient:
    """
    Return the process-wide Amadeus client, creating it on first use.

    Raises:
        ValueError: If AMADEUS_CLIENT_ID or AMADEUS_CLIENT_SECRET is not set
    """
    global _client

    if _client is None:
        client_id = os.getenv("AMADEUS_CLIENT_ID")
        client_secret = os.getenv("AMADEUS_CLIENT_SECRET")

        if not client_id or not client_secret:
            raise ValueError(
                "Amadeus API credentials are required. "
                "Please set AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET environment variables."
            )

        _client = AmadeusClient(client_id, client_secret, environment=get_environment())

    return _client


def reset_amadeus_client():
    """Forget the cached client (used by tests and after credential changes)."""
    global _client
    _client = None

"""Coralogix credentials and the shared client instance."""

import os
from typing import Optional

from .client import CoralogixClient

SERVER_NAME = "coralogix-mcp"
SERVER_VERSION = "1.0.0"

_client: Optional[CoralogixClient] = None


def get_domain() -> str:
    return os.getenv("CORALOGIX_DOMAIN", "")


def credentials_configured() -> bool:
    return bool(os.getenv("CORALOGIX_API_KEY") and os.getenv("CORALOGIX_DOMAIN"))


def get_coralogix_client() -> CoralogixClient:
    """
    Return the process-wide Coralogix client, creating it on first use.

    Raises:
        ValueError: If CORALOGIX_API_KEY or CORALOGIX_DOMAIN is not set, or
            the domain is not a supported Coralogix region
    """
    global _client

    if _client is None:
        api_key = os.getenv("CORALOGIX_API_KEY")
        domain = os.getenv("CORALOGIX_DOMAIN")

        if not api_key or not domain:
            raise ValueError("CORALOGIX_API_KEY and CORALOGIX_DOMAIN environment variables are required")

        _client = CoralogixClient(api_key, domain)

    return _client


def reset_coralogix_client():
    """Forget the cached client (used by tests and after credential changes)."""
    global _client
    _client = None

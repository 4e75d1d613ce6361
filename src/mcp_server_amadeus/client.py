"""
Amadeus Self-Service API client.

Handles the OAuth2 client_credentials exchange (with a cached token that is
refreshed one minute before it expires) and authenticated JSON requests
against the test or production host.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

BASE_URLS = {
    "test": "https://test.api.amadeus.com",
    "production": "https://api.amadeus.com"
}

TOKEN_ENDPOINT = "/v1/security/oauth2/token"
TOKEN_EXPIRY_BUFFER = 60

TOO_GENERIC_MESSAGE = (
    "Search too generic - need more request parameters to filter results. "
    "Try adding parameters like: maxPrice, nonStop=true, includedAirlineCodes, excludedAirlineCodes, "
    "travelClass, or more specific dates. The Amadeus API times out when searches are too broad."
)


class AmadeusError(Exception):
    """Base class for Amadeus client errors."""


class AmadeusResponseError(AmadeusError):
    """The API answered with an HTTP error status."""

    def __init__(self, status: int, body: Any = None):
        self.status = status
        self.body = body
        self.errors: List[Dict[str, Any]] = []
        if isinstance(body, dict) and isinstance(body.get("errors"), list):
            self.errors = body["errors"]
        super().__init__(f"API request failed ({status})")


class AmadeusNetworkError(AmadeusError):
    """The request never produced an HTTP response."""


class AmadeusServiceError(AmadeusError):
    """An operation failed; the message names the operation."""


def handle_error(error: Exception, operation: str) -> AmadeusServiceError:
    """
    Turn a client failure into an error whose message names the operation.

    Args:
        error: The exception raised while talking to the API
        operation: Human-readable operation name (e.g., "Flight search")

    Returns:
        AmadeusServiceError ready to be raised
    """
    if isinstance(error, AmadeusServiceError):
        return error

    if isinstance(error, AmadeusResponseError):
        if error.status == 500:
            return AmadeusServiceError(f"{operation} failed: {TOO_GENERIC_MESSAGE}")

        if error.errors:
            messages = "; ".join(
                f"{err.get('code')}: {err.get('title')} - {err.get('detail') or ''}"
                for err in error.errors
            )
            return AmadeusServiceError(f"{operation} failed ({error.status}): {messages}")

        message = None
        if isinstance(error.body, dict):
            message = error.body.get("message") or error.body.get("error_description")
        return AmadeusServiceError(f"{operation} failed ({error.status}): {message or 'Unknown error'}")

    return AmadeusServiceError(f"{operation} failed: {error or 'Unknown error'}")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop unset query parameters and render the rest as strings."""
    if not params:
        return {}
    return {key: _query_value(value) for key, value in params.items() if value is not None}


class AmadeusClient:
    """Authenticated access to the Amadeus REST endpoints."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        environment: str = "test",
        timeout: int = 30
    ):
        if not client_id or not client_secret:
            raise ValueError("Amadeus client_id and client_secret are required")

        self.client_id = client_id
        self.client_secret = client_secret
        self.environment = environment if environment in BASE_URLS else "test"
        self.base_url = BASE_URLS[self.environment]
        self.timeout = aiohttp.ClientTimeout(total=timeout)

        self._access_token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None

    async def get_access_token(self) -> str:
        """
        Get a valid OAuth2 access token, refreshing if necessary.

        Returns:
            str: Valid access token

        Raises:
            AmadeusResponseError: If the token endpoint rejects the credentials
            AmadeusNetworkError: If the token endpoint cannot be reached
        """
        if self._access_token and self._token_expiry and datetime.now() < self._token_expiry:
            return self._access_token

        url = f"{self.base_url}{TOKEN_ENDPOINT}"
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, data=data) as response:
                    body = await self._read_body(response)
                    if response.status != 200:
                        logger.error(f"Token request failed ({response.status})")
                        raise AmadeusResponseError(response.status, body)

        except aiohttp.ClientError as e:
            raise AmadeusNetworkError(f"Network error: {e}") from e

        self._access_token = body["access_token"]
        expires_in = int(body.get("expires_in", 1799))
        self._token_expiry = datetime.now() + timedelta(seconds=expires_in - TOKEN_EXPIRY_BUFFER)

        logger.info(f"Access token obtained, expires in {expires_in}s")
        return self._access_token

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text:
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Make an authenticated request to the Amadeus API.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: API endpoint path (e.g., "/v2/shopping/flight-offers")
            params: Query parameters; None values are dropped
            data: JSON body data

        Returns:
            Parsed JSON response body

        Raises:
            AmadeusResponseError: For HTTP status >= 400
            AmadeusNetworkError: For connection failures or unparseable bodies
        """
        token = await self.get_access_token()
        url = f"{self.base_url}{endpoint}"

        request_kwargs: Dict[str, Any] = {
            "headers": {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json"
            },
            "params": clean_params(params)
        }
        if data is not None:
            request_kwargs["json"] = data

        logger.debug(f"{method} {endpoint}")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, **request_kwargs) as response:
                    body = await self._read_body(response)

                    if response.status >= 400:
                        logger.error(f"{method} {endpoint} -> HTTP {response.status}")
                        raise AmadeusResponseError(response.status, body)

        except aiohttp.ClientError as e:
            raise AmadeusNetworkError(f"Network error: {e}") from e

        if isinstance(body, str):
            raise AmadeusNetworkError(f"Failed to parse response: {body[:200]}")
        return body

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: Dict[str, Any], params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("POST", endpoint, params=params, data=data)

    async def delete(self, endpoint: str) -> Dict[str, Any]:
        return await self.request("DELETE", endpoint)

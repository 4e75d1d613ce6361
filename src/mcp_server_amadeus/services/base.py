from typing import Any, Dict, List, Optional

from ..client import AmadeusClient, handle_error


def join_list(values: Optional[List[Any]]) -> Optional[str]:
    """Render a list parameter the way Amadeus expects it (comma separated)."""
    if not values:
        return None
    return ",".join(str(value) for value in values)


def first_record(data: Any) -> Optional[Dict[str, Any]]:
    """Some endpoints return one record, others a one-element list."""
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


class AmadeusService:
    """Base class: every call goes through the shared client and error mapping."""

    def __init__(self, client: AmadeusClient):
        self.client = client

    async def _fetch(
        self,
        operation: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            if body is not None:
                response = await self.client.post(endpoint, body, params=params)
            else:
                response = await self.client.get(endpoint, params=params)
        except Exception as e:
            raise handle_error(e, operation) from e
        return response.get("data")

    async def _fetch_list(self, operation: str, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self._fetch(operation, endpoint, params) or []

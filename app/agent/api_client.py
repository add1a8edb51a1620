"""HTTP client for the reservation API, used by the agent tools."""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """The API answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CourtsApiClient:
    """Client for one tenant of the reservation API."""

    def __init__(
        self,
        tenant_id: str,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            tenant_id: Sent as ``X-Tenant-ID`` on every request
            base_url: API root, defaults to ``API_BASE_URL``
            transport: Optional httpx transport (tests, ASGI)
        """
        self.tenant_id = tenant_id
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.request_delay = settings.REQUEST_DELAY_SECONDS
        self.max_retries = max(settings.MAX_RETRIES, 1)
        self.transport = transport
        self._last_request_time = 0.0

    async def _rate_limit(self):
        """Keep at least ``request_delay`` seconds between requests."""
        if self.request_delay <= 0:
            return
        current_time = asyncio.get_event_loop().time()
        time_since_last_request = current_time - self._last_request_time

        if time_since_last_request < self.request_delay:
            await asyncio.sleep(self.request_delay - time_since_last_request)

        self._last_request_time = asyncio.get_event_loop().time()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a request, retrying transport failures with exponential backoff.

        HTTP error responses are not retried; they raise ``ApiClientError``
        with the API's ``error`` message.

        Returns:
            Decoded JSON body, or None for 204 responses
        """
        await self._rate_limit()
        headers = {"X-Tenant-ID": self.tenant_id}

        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            for attempt in range(self.max_retries):
                try:
                    logger.info(f"Making {method} request to {path} (attempt {attempt + 1}/{self.max_retries})")
                    response = await client.request(
                        method=method,
                        url=path,
                        json=json_data,
                        headers=headers,
                        timeout=30.0,
                    )
                    break
                except httpx.TransportError as e:
                    logger.warning(f"Request failed (attempt {attempt + 1}/{self.max_retries}): {e}")

                    if attempt == self.max_retries - 1:
                        raise ApiClientError("API server not reachable") from e

                    await asyncio.sleep(2 ** attempt)

        if response.is_error:
            try:
                message = response.json().get("error") or f"HTTP {response.status_code}"
            except ValueError:
                message = f"HTTP {response.status_code}"
            raise ApiClientError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def list_courts(self) -> Any:
        return await self._request("GET", "/courts")

    async def list_available_slots(self, date: str) -> Any:
        return await self._request("GET", f"/time-slots/date/{date}")

    async def list_reservations(self) -> Any:
        return await self._request("GET", "/reservations")

    async def get_reservation(self, reservation_id: str) -> Any:
        return await self._request("GET", f"/reservations/{reservation_id}")

    async def create_reservation(self, data: Dict[str, Any]) -> Any:
        return await self._request("POST", "/reservations", data)

    async def update_reservation(self, reservation_id: str, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", f"/reservations/{reservation_id}", data)

    async def join_open_play(self, reservation_id: str, participant: Dict[str, Any]) -> Any:
        return await self._request("POST", f"/reservations/{reservation_id}/join", participant)

    async def delete_reservation(self, reservation_id: str) -> Any:
        return await self._request("DELETE", f"/reservations/{reservation_id}")

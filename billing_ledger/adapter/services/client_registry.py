"""Client Registry Implementations"""

import logging
from typing import Optional
import httpx
from billing_ledger.app.services.client_registry import ClientRegistry

logger = logging.getLogger(__name__)


class AllowAllClientRegistry(ClientRegistry):
    """Accepts every non-empty client id. Used when no registry is configured."""

    async def exists(self, client_id: str) -> bool:
        return bool(client_id)


class HttpClientRegistry(ClientRegistry):
    """
    Looks clients up in an external registry over HTTP

    GET {base_url}/clients/{client_id}: 2xx means the client exists, 404
    means it does not. Any other failure propagates, so an unreachable
    registry fails the calling use case rather than passing silently.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def exists(self, client_id: str) -> bool:
        if not client_id:
            return False

        url = f"{self.base_url}/clients/{client_id}"
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)

        if response.status_code == 404:
            logger.info(f"Client {client_id} not found in registry")
            return False
        response.raise_for_status()
        return True


def create_client_registry(base_url: Optional[str] = None, timeout: float = 5.0) -> ClientRegistry:
    if base_url:
        return HttpClientRegistry(base_url, timeout=timeout)
    return AllowAllClientRegistry()

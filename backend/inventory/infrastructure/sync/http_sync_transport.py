"""HTTP sync transport — implements the SyncTransport interface over httpx.

Posts the whole dirty batch to ``{base_url}/sync`` and decodes the
accepted-identity list from the response.
"""

import logging

import httpx
from pydantic import ValidationError

from inventory.application.interfaces import SyncTransport
from inventory.application.schemas.sync import (
    AssetPayload,
    ServerAssetResponse,
    SyncRequest,
    SyncResponse,
)
from inventory.domain.entities import AssetRecord, BatchOutcome
from inventory.domain.exceptions import SyncTransportError

logger = logging.getLogger(__name__)


class HttpSyncTransport(SyncTransport):
    """Infrastructure adapter — talks to the reconciliation server.

    An injected ``http_client`` is reused and left open; otherwise a client
    is created per call with the configured timeout. A timeout is reported
    like any other transport failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._http_client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def send_batch(self, records: list[AssetRecord]) -> BatchOutcome:
        try:
            payload = SyncRequest(assets=[AssetPayload.from_entity(r) for r in records])
        except ValidationError as exc:
            raise SyncTransportError(f"Batch cannot be encoded: {exc}") from exc
        body = payload.model_dump(mode="json", by_alias=True)
        data = await self._request("POST", "/sync", json=body)

        try:
            response = SyncResponse.model_validate(data)
        except ValidationError as exc:
            raise SyncTransportError(f"Malformed sync response: {exc}") from exc
        return response.to_outcome()

    async def fetch_server_assets(self) -> list[AssetRecord]:
        data = await self._request("GET", "/server-assets")
        try:
            return [ServerAssetResponse.model_validate(item).to_entity() for item in data]
        except (TypeError, ValidationError) as exc:
            raise SyncTransportError(f"Malformed server asset list: {exc}") from exc

    async def _request(self, method: str, path: str, **kwargs) -> object:
        url = f"{self._base_url}{path}"
        client = self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.request(method, url, timeout=self._timeout, **kwargs)
        except httpx.TimeoutException as exc:
            raise SyncTransportError(f"Request timed out after {self._timeout}s: {exc}") from exc
        except httpx.HTTPError as exc:
            raise SyncTransportError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise SyncTransportError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise SyncTransportError(f"Response is not JSON: {exc}") from exc

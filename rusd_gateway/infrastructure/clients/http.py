"""httpx transport for the stellar-sdk async RPC server"""

import httpx
from typing import Any, AsyncGenerator, Dict
from stellar_sdk.client.base_async_client import BaseAsyncClient
from stellar_sdk.client.response import Response
from rusd_gateway.config import settings


class HttpxAsyncClient(BaseAsyncClient):
    """
    Async HTTP client backing SorobanServerAsync with a shared httpx pool.

    Soroban RPC is plain JSON-RPC over POST with no server-sent event
    endpoints, so `stream` is unsupported and raises NotImplementedError.
    """

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout or settings.http_timeout_seconds
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    async def get(self, url: str, params: Dict[str, str] | None = None) -> Response:
        response = await self._client.get(url, params=params)
        return _to_sdk_response(response)

    async def post(
        self,
        url: str,
        data: Dict[str, str] | None = None,
        json_data: Dict[str, Any] | None = None,
    ) -> Response:
        response = await self._client.post(url, data=data, json=json_data)
        return _to_sdk_response(response)

    async def stream(self, url: str, params: Dict[str, str] | None = None) -> AsyncGenerator[Dict[str, Any], None]:
        raise NotImplementedError("Streaming is not supported by the Soroban RPC transport")

    async def close(self) -> None:
        await self._client.aclose()


def _to_sdk_response(response: httpx.Response) -> Response:
    return Response(
        status_code=response.status_code,
        text=response.text,
        headers=dict(response.headers),
        url=str(response.url),
    )

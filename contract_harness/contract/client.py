from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import HarnessConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    status: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)
    error: bool = False


class ApiClient:
    """Async JSON client for calling the service under test.

    Non-2xx responses come back as ``ApiResponse(error=True)`` so tests can
    validate error bodies; transport failures propagate as ``httpx`` errors.
    """

    def __init__(
        self,
        config: HarnessConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            follow_redirects=True,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            event_hooks={"response": [_log_response]},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("get", path, **kwargs)

    async def post(self, path: str, data: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("post", path, json=data if data is not None else {}, **kwargs)

    async def put(self, path: str, data: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("put", path, json=data if data is not None else {}, **kwargs)

    async def patch(self, path: str, data: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("patch", path, json=data if data is not None else {}, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> ApiResponse:
        return await self.request("delete", path, **kwargs)

    async def request(self, method: str, path: str, **kwargs: Any) -> ApiResponse:
        response = await self._client.request(method.upper(), path, **kwargs)
        return ApiResponse(
            status=response.status_code,
            data=_parse_response_body(response),
            headers=dict(response.headers),
            error=not response.is_success,
        )


async def _log_response(response: httpx.Response) -> None:
    marker = "ok" if response.is_success else "fail"
    logger.info("%s %s %s -> %s", marker, response.request.method, response.request.url, response.status_code)


def _parse_response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text

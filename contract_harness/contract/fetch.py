from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from typing import Any, cast

import httpx
import yaml
from openapi_spec_validator import validate
from openapi_spec_validator.validation.exceptions import OpenAPIValidationError
from openapi_spec_validator.versions.exceptions import OpenAPIVersionNotFound
from referencing.exceptions import Unresolvable

from .config import HarnessConfig
from .document import OpenAPIDocument
from .errors import MalformedSpec, SpecAcquisitionError, UnreachableService, UpstreamError

logger = logging.getLogger(__name__)


class SpecFetcher:
    """Fetches the live OpenAPI document after a health probe.

    The probe runs first so a dead server and a broken spec endpoint surface
    as different errors. There are no retries: one failed attempt ends the run.
    """

    def __init__(self, config: HarnessConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client

    async def fetch(self) -> OpenAPIDocument:
        if self._client is not None:
            return await self._fetch_with(self._client)
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds, follow_redirects=True) as client:
            return await self._fetch_with(client)

    async def _fetch_with(self, client: httpx.AsyncClient) -> OpenAPIDocument:
        await self._check_health(client)

        url = self.config.url_for(self.config.openapi_endpoint)
        response = await self._get(client, url, headers={"Accept": "application/json"})
        if not response.is_success:
            raise UpstreamError(url, response.status_code, response.reason_phrase)

        raw = _parse_body(response, url)
        document = OpenAPIDocument(raw)
        if self.config.strict:
            _validate_structure(document.raw)
        logger.info(
            "Fetched OpenAPI spec %s (version: %s)",
            document.title or "<untitled>",
            document.version or "unknown",
        )
        return document

    async def _check_health(self, client: httpx.AsyncClient) -> None:
        url = self.config.url_for(self.config.health_endpoint)
        response = await self._get(client, url)
        if response.status_code != 200:
            raise UpstreamError(url, response.status_code, response.reason_phrase)
        logger.info("Server health check passed (%s)", url)

    async def _get(
        self, client: httpx.AsyncClient, url: str, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        try:
            return await client.get(
                url, headers=headers, timeout=self.config.timeout_seconds, follow_redirects=True
            )
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise UnreachableService(
                f"Cannot connect to server at {self.config.base_url}. "
                "Please ensure the server is running before executing tests."
            ) from exc
        except httpx.HTTPError as exc:
            raise SpecAcquisitionError(f"Request to {url} failed: {exc}") from exc


async def fetch_document(config: HarnessConfig, client: httpx.AsyncClient | None = None) -> OpenAPIDocument:
    return await SpecFetcher(config, client=client).fetch()


def _parse_body(response: httpx.Response, url: str) -> Any:
    content_type = response.headers.get("content-type", "")
    is_yaml = "yaml" in content_type or url.lower().endswith((".yaml", ".yml"))
    try:
        if is_yaml:
            raw = yaml.safe_load(response.text)
        else:
            raw = response.json()
    except (ValueError, yaml.YAMLError) as exc:
        raise MalformedSpec(f"Invalid OpenAPI specification received from {url}: {exc}") from exc
    if not isinstance(raw, dict):
        raise MalformedSpec("Invalid OpenAPI specification received - not a valid JSON object")
    return raw


def _validate_structure(raw: dict[str, Any]) -> None:
    try:
        validate(cast(Mapping[Hashable, Any], raw))
    except OpenAPIVersionNotFound as exc:
        raise MalformedSpec(f"OpenAPI document has no supported version field: {exc}") from exc
    except (OpenAPIValidationError, Unresolvable) as exc:
        message = str(exc).strip() or exc.__class__.__name__
        raise MalformedSpec(f"OpenAPI document failed structural validation: {message}") from exc

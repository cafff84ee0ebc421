from __future__ import annotations

import logging
from typing import Any

import httpx

from .client import ApiClient
from .compiler import SchemaCompiler
from .config import HarnessConfig
from .document import OpenAPIDocument
from .fetch import SpecFetcher
from .index import SpecIndex
from .model import ContractCheck, Verdict
from .samples import sample_request_body
from .validate import ContractValidator

logger = logging.getLogger(__name__)


class ContractContext:
    """Everything one test run needs, built once from a freshly fetched document.

    Pass the context to consumers instead of keeping the spec in module globals.
    """

    def __init__(self, config: HarnessConfig, document: OpenAPIDocument) -> None:
        self.config = config
        self.document = document
        self.index = SpecIndex(document)
        self.compiler = SchemaCompiler.for_document(document)
        self.validator = ContractValidator(self.index, self.compiler)
        logger.info(
            "Contract context ready: %s v%s (%d paths, %d component schemas)",
            document.title or "<untitled>",
            document.version or "unknown",
            len(self.index.list_paths()),
            len(self.compiler.registered),
        )

    @classmethod
    async def acquire(
        cls, config: HarnessConfig, client: httpx.AsyncClient | None = None
    ) -> "ContractContext":
        document = await SpecFetcher(config, client=client).fetch()
        return cls(config, document)

    def api_client(self, transport: httpx.AsyncBaseTransport | None = None) -> ApiClient:
        return ApiClient(self.config, transport=transport)

    def validate_response(self, path: str, method: str, status_code: int, body: Any) -> Verdict:
        return self.validator.validate_response(path, method, status_code, body)

    def validate_request(self, path: str, method: str, body: Any) -> Verdict:
        return self.validator.validate_request(path, method, body)

    def check_response(self, path: str, method: str, status_code: int, body: Any) -> ContractCheck:
        return self.validator.check_response(path, method, status_code, body)

    def check_request(self, path: str, method: str, body: Any) -> ContractCheck:
        return self.validator.check_request(path, method, body)

    def expected_status_codes(self, path: str, method: str) -> set[int]:
        return self.index.declared_status_codes(path, method)

    def operation_id(self, path: str, method: str) -> str | None:
        return self.index.operation_id(path, method)

    def sample_request(self, path: str, method: str, overrides: dict[str, Any] | None = None) -> Any:
        return sample_request_body(self.index, path, method, overrides)

from __future__ import annotations

import logging
from typing import Any

from .compiler import SchemaCompiler
from .errors import UndocumentedOperation
from .index import SpecIndex
from .model import ContractCheck, SchemaError, Verdict
from .render import render_failure

logger = logging.getLogger(__name__)


class ContractValidator:
    """Checks live request and response payloads against the indexed document."""

    def __init__(self, index: SpecIndex, compiler: SchemaCompiler | None = None) -> None:
        self.index = index
        self.compiler = compiler or SchemaCompiler.for_document(index.document)

    def validate_response(self, path: str, method: str, status_code: int, body: Any) -> Verdict:
        if self.index.find_operation(path, method) is None:
            raise UndocumentedOperation(path, method)

        schema = self.index.response_schema(path, method, status_code)
        if schema is None:
            return Verdict(valid=True, note=f"No schema defined for {status_code} response")

        return self._run(schema, body)

    def validate_request(self, path: str, method: str, body: Any) -> Verdict:
        schema = self.index.request_schema(path, method)
        if schema is None:
            return Verdict(valid=True, note="No request schema defined")

        if body is None:
            if self.index.request_body_required(path, method):
                return Verdict(
                    valid=False,
                    errors=(SchemaError(path="", message="Request body is required", keyword="required"),),
                    schema=schema,
                )
            return Verdict(valid=True, schema=schema, note="No request body sent")

        return self._run(schema, body)

    def check_response(self, path: str, method: str, status_code: int, body: Any) -> ContractCheck:
        verdict = self.validate_response(path, method, status_code, body)
        if verdict.valid:
            return ContractCheck(verdict)
        return ContractCheck(verdict, render_failure("Response", path, method, verdict, status_code))

    def check_request(self, path: str, method: str, body: Any) -> ContractCheck:
        verdict = self.validate_request(path, method, body)
        if verdict.valid:
            return ContractCheck(verdict)
        return ContractCheck(verdict, render_failure("Request", path, method, verdict))

    def _run(self, schema: dict[str, Any], body: Any) -> Verdict:
        errors = self.compiler.compile(schema).errors(body)
        if errors:
            logger.debug("Payload failed schema validation with %d error(s)", len(errors))
        return Verdict(valid=not errors, errors=errors, schema=schema)

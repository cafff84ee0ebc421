from __future__ import annotations

from typing import Any

from .index import SpecIndex
from .model import Operation, Verdict


def _sorted_dict(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _sorted_dict(value[k]) for k in sorted(value, key=str)}
    if isinstance(value, list):
        return [_sorted_dict(item) for item in value]
    return value


def render_failure(
    kind: str,
    path: str,
    method: str,
    verdict: Verdict,
    status_code: int | None = None,
) -> str:
    target = f"{method.upper()} {path}"
    if status_code is not None:
        target = f"{target} ({status_code})"
    details = "\n".join(f"  - {error.location}: {error.message}" for error in verdict.errors)
    return f"{kind} validation failed for {target}:\n{details}"


def render_catalog(index: SpecIndex) -> dict[str, Any]:
    document = index.document
    return {
        "title": document.title,
        "version": document.version,
        "openapi": document.openapi_version,
        "operations": [
            {
                "method": operation.method,
                "path": operation.path,
                "operationId": operation.operation_id,
                "summary": operation.summary,
                "statusCodes": sorted(index.declared_status_codes(operation.path, operation.method)),
            }
            for operation in index.operations()
        ],
    }


def render_operation(operation: Operation, index: SpecIndex, full: bool = True) -> dict[str, Any]:
    op = operation.operation
    request_body = op.get("requestBody") if isinstance(op.get("requestBody"), dict) else None
    responses = op.get("responses") if isinstance(op.get("responses"), dict) else None
    if full:
        if request_body:
            request_body = index.document.inline_refs(request_body)
        if responses:
            responses = index.document.inline_refs(responses)
    else:
        request_body = None
        responses = None

    return {
        "operationId": operation.operation_id,
        "method": operation.method,
        "path": operation.path,
        "summary": operation.summary,
        "tags": list(operation.tags),
        "statusCodes": sorted(index.declared_status_codes(operation.path, operation.method)),
        "requestBody": _sorted_dict(request_body) if request_body else None,
        "responses": _sorted_dict(responses) if responses else None,
    }

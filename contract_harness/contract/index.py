from __future__ import annotations

from typing import Any, Iterable

from .document import OpenAPIDocument
from .model import Operation

JSON_CONTENT_TYPE = "application/json"


def list_http_methods() -> Iterable[str]:
    return (
        "get",
        "post",
        "put",
        "patch",
        "delete",
        "head",
        "options",
    )


class SpecIndex:
    """Structural queries over one OpenAPI document.

    Every lookup is read-only. Undocumented paths, methods or sections give
    empty results rather than errors.
    """

    def __init__(self, document: OpenAPIDocument) -> None:
        self.document = document

    def list_paths(self) -> list[str]:
        return list(self.document.paths())

    def list_methods(self, path: str) -> list[str]:
        path_item = self.document.path_item(path)
        if path_item is None:
            return []
        return [method for method in list_http_methods() if isinstance(path_item.get(method), dict)]

    def find_operation(self, path: str, method: str) -> Operation | None:
        path_item = self.document.path_item(path)
        if path_item is None:
            return None
        method = method.lower()
        if method not in list_http_methods():
            return None
        operation = path_item.get(method)
        if not isinstance(operation, dict):
            return None
        return _to_operation(path, method, operation)

    def operation_id(self, path: str, method: str) -> str | None:
        operation = self.find_operation(path, method)
        return operation.operation_id if operation else None

    def operations(self) -> list[Operation]:
        operations: list[Operation] = []
        for path in self.list_paths():
            for method in self.list_methods(path):
                operation = self.find_operation(path, method)
                if operation is not None:
                    operations.append(operation)
        return operations

    def find_by_operation_id(self, operation_id: str) -> Operation | None:
        for operation in self.operations():
            if operation.operation_id == operation_id:
                return operation
        return None

    def declared_status_codes(self, path: str, method: str) -> set[int]:
        codes: set[int] = set()
        for code in self._responses(path, method):
            # YAML documents may carry integer keys.
            if isinstance(code, int) and not isinstance(code, bool):
                codes.add(code)
            elif isinstance(code, str) and code.isdigit():
                codes.add(int(code))
        return codes

    def response_schema(
        self,
        path: str,
        method: str,
        status_code: int | str,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> dict[str, Any] | None:
        responses = self._responses(path, method)
        if not responses:
            return None

        # Exact status first, then the ``default`` response.
        response = responses.get(str(status_code))
        if response is None and isinstance(status_code, int):
            response = responses.get(status_code)
        if response is None:
            response = responses.get("default")
        if response is None:
            return None
        return self._media_schema(self._deref(response), content_type)

    def request_schema(
        self, path: str, method: str, content_type: str = JSON_CONTENT_TYPE
    ) -> dict[str, Any] | None:
        request_body = self._request_body(path, method)
        if request_body is None:
            return None
        return self._media_schema(request_body, content_type)

    def request_body_required(self, path: str, method: str) -> bool:
        request_body = self._request_body(path, method)
        return bool(request_body.get("required", False)) if request_body else False

    def _responses(self, path: str, method: str) -> dict[Any, Any]:
        operation = self.find_operation(path, method)
        if operation is None:
            return {}
        responses = operation.operation.get("responses")
        return responses if isinstance(responses, dict) else {}

    def _request_body(self, path: str, method: str) -> dict[str, Any] | None:
        operation = self.find_operation(path, method)
        if operation is None:
            return None
        return self._deref(operation.operation.get("requestBody"))

    def _media_schema(self, holder: dict[str, Any] | None, content_type: str) -> dict[str, Any] | None:
        if holder is None:
            return None
        content = holder.get("content")
        if not isinstance(content, dict):
            return None
        media = content.get(content_type)
        if not isinstance(media, dict):
            return None
        schema = media.get("schema")
        return schema if isinstance(schema, dict) else None

    def _deref(self, value: Any) -> dict[str, Any] | None:
        # Response and request-body objects may themselves be ``$ref`` pointers.
        if isinstance(value, dict) and isinstance(value.get("$ref"), str):
            value = self.document.resolve(value["$ref"])
        return value if isinstance(value, dict) else None


def _to_operation(path: str, method: str, operation: dict[str, Any]) -> Operation:
    operation_id = operation.get("operationId")
    if not isinstance(operation_id, str):
        operation_id = None
    summary = operation.get("summary")
    tags = operation.get("tags")
    tags_list = sorted([tag for tag in tags if isinstance(tag, str)]) if isinstance(tags, list) else []
    return Operation(
        method=method,
        path=path,
        operation_id=operation_id,
        summary=summary if isinstance(summary, str) else None,
        tags=tags_list,
        operation=operation,
    )

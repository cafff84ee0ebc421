from __future__ import annotations

import logging
from typing import Any

from jsonschema.exceptions import SchemaError as MetaSchemaError
from openapi_schema_validator import (
    OAS30Validator,
    OAS31Validator,
    oas30_format_checker,
    oas31_format_checker,
)
from referencing.exceptions import Unresolvable

from .document import OpenAPIDocument
from .model import SchemaError

logger = logging.getLogger(__name__)

COMPONENT_REF_PREFIX = "#/components/schemas/"


def component_ref(name: str) -> str:
    return f"{COMPONENT_REF_PREFIX}{name}"


class CompiledSchema:
    def __init__(self, schema: dict[str, Any], validator: Any) -> None:
        self.schema = schema
        self._validator = validator

    def is_valid(self, instance: Any) -> bool:
        return not self.errors(instance)

    def errors(self, instance: Any) -> tuple[SchemaError, ...]:
        try:
            found = [
                SchemaError(
                    path=_format_error_path(error.absolute_path),
                    message=error.message,
                    keyword=str(error.validator) if error.validator is not None else None,
                    schema_path=_format_error_path(error.relative_schema_path),
                )
                for error in self._validator.iter_errors(instance)
            ]
        except Unresolvable as exc:
            return (SchemaError(path="", message=f"Unresolvable reference: {exc}", keyword="$ref"),)
        found.sort(key=lambda item: (item.path, item.message))
        return tuple(found)


class SchemaCompiler:
    """Compiles OpenAPI schema objects into reusable validators.

    Component schemas are registered under ``#/components/schemas/<name>`` so
    local ``$ref`` pointers inside compiled schemas resolve against them.
    """

    def __init__(self, oas31: bool = False) -> None:
        self._validator_cls = OAS31Validator if oas31 else OAS30Validator
        self._format_checker = oas31_format_checker if oas31 else oas30_format_checker
        self._schemas: dict[str, dict[str, Any]] = {}
        self._compiled: dict[int, tuple[dict[str, Any], CompiledSchema]] = {}

    @classmethod
    def for_document(cls, document: OpenAPIDocument) -> "SchemaCompiler":
        compiler = cls(oas31=document.is_oas31)
        compiler.register_components(document)
        return compiler

    @property
    def registered(self) -> list[str]:
        return [component_ref(name) for name in self._schemas]

    def register_components(self, document: OpenAPIDocument) -> int:
        added = 0
        for name, schema in document.iter_component_schemas():
            if self.add_schema(component_ref(name), schema):
                added += 1
        return added

    def add_schema(self, ref: str, schema: dict[str, Any]) -> bool:
        name = ref[len(COMPONENT_REF_PREFIX):] if ref.startswith(COMPONENT_REF_PREFIX) else ref
        if name in self._schemas:
            logger.warning("Schema %s is already registered; skipping", ref)
            return False
        sanitized = _sanitize_for_validation(schema)
        try:
            self._validator_cls.check_schema(sanitized)
        except MetaSchemaError as exc:
            logger.warning("Could not add schema %s: %s", ref, exc.message)
            return False
        self._schemas[name] = sanitized
        # Compiled validators embed the component set they were built with.
        self._compiled.clear()
        return True

    def compile(self, schema: dict[str, Any]) -> CompiledSchema:
        key = id(schema)
        cached = self._compiled.get(key)
        if cached is not None and cached[0] is schema:
            return cached[1]

        root = _sanitize_for_validation(schema)
        if isinstance(root, dict):
            root = dict(root)
            root["components"] = {"schemas": self._schemas}
        validator = self._validator_cls(root, format_checker=self._format_checker)
        compiled = CompiledSchema(schema, validator)
        # A concurrent caller may have compiled the same schema; keep the first.
        return self._compiled.setdefault(key, (schema, compiled))[1]


def _format_error_path(path: Any) -> str:
    if not path:
        return ""
    return "/" + "/".join(str(item) for item in path)


def _sanitize_for_validation(value: Any) -> Any:
    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for key, val in value.items():
            if key == "discriminator":
                continue
            sanitized[key] = _sanitize_for_validation(val)
        return sanitized
    if isinstance(value, list):
        return [_sanitize_for_validation(item) for item in value]
    return value

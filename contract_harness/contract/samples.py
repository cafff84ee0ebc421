from __future__ import annotations

import hashlib
from datetime import timezone
from typing import Any

from faker import Faker

from .document import OpenAPIDocument
from .index import SpecIndex

MAX_DEPTH = 3


def sample_request_body(
    index: SpecIndex,
    path: str,
    method: str,
    overrides: dict[str, Any] | None = None,
) -> Any:
    """Build a deterministic request body for an operation from its JSON request schema.

    Only required properties are generated; ``overrides`` are merged in on top
    and may add optional fields. Returns ``None`` when no request schema exists.
    """
    schema = index.request_schema(path, method)
    if schema is None:
        return None
    return sample_from_schema(schema, index.document, overrides)


def sample_from_schema(
    schema: dict[str, Any],
    document: OpenAPIDocument | None = None,
    overrides: Any = None,
) -> Any:
    resolved = document.inline_refs(schema) if document is not None else schema
    return _generate_from_schema(resolved, overrides, depth=0, field_name="body")


def _generate_from_schema(
    schema: dict[str, Any],
    provided: Any,
    depth: int,
    field_name: str | None = None,
) -> Any:
    if depth > MAX_DEPTH:
        return "<recursion_limit>"

    schema = _normalize_schema(_select_union_schema(schema))

    if provided is not None:
        if isinstance(provided, dict) and schema.get("type") == "object":
            return _generate_object(schema, provided, depth)
        return provided

    if "const" in schema:
        return schema["const"]

    if "default" in schema:
        return schema["default"]

    if "enum" in schema and isinstance(schema["enum"], list) and schema["enum"]:
        return schema["enum"][0]

    schema_type = schema.get("type")
    if schema_type == "object":
        return _generate_object(schema, {}, depth)
    if schema_type == "array":
        items_raw = schema.get("items")
        items_schema: dict[str, Any] = items_raw if isinstance(items_raw, dict) else {}
        count = max(int(schema.get("minItems", 1) or 1), 1)
        return [
            _generate_from_schema(items_schema, None, depth=depth + 1, field_name=field_name)
            for _ in range(count)
        ]
    guess = _guess_value(field_name or "", schema)
    if guess is not None:
        return guess
    return "<string>"


def _generate_object(schema: dict[str, Any], provided: dict[str, Any], depth: int) -> dict[str, Any]:
    properties_raw = schema.get("properties")
    properties: dict[str, Any] = properties_raw if isinstance(properties_raw, dict) else {}
    required_raw = schema.get("required")
    required = {item for item in required_raw if isinstance(item, str)} if isinstance(required_raw, list) else set()
    output: dict[str, Any] = {}

    for prop_name in properties:
        prop_schema = properties[prop_name]
        if not isinstance(prop_schema, dict):
            continue
        prop_provided = provided.get(prop_name)
        if prop_name in required or prop_provided is not None:
            output[prop_name] = _generate_from_schema(
                prop_schema,
                prop_provided,
                depth=depth + 1,
                field_name=prop_name,
            )

    for key, value in provided.items():
        output.setdefault(key, value)
    return output


def _normalize_schema(schema: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(schema, dict):
        return {}

    if "allOf" in schema and isinstance(schema["allOf"], list):
        merged: dict[str, Any] = {}
        properties: dict[str, Any] = {}
        required: set[str] = set()
        for sub in schema["allOf"]:
            if not isinstance(sub, dict):
                continue
            sub_schema = _normalize_schema(sub)
            sub_props = sub_schema.get("properties")
            if isinstance(sub_props, dict):
                properties.update(sub_props)
            sub_required = sub_schema.get("required")
            if isinstance(sub_required, list):
                required.update([item for item in sub_required if isinstance(item, str)])
            for key, value in sub_schema.items():
                if key not in ("properties", "required"):
                    merged.setdefault(key, value)
        if properties:
            merged["properties"] = properties
            merged["type"] = merged.get("type", "object")
        if required:
            merged["required"] = sorted(required)
        schema = {key: value for key, value in schema.items() if key != "allOf"}
        schema.update(merged)

    if "type" not in schema:
        if isinstance(schema.get("properties"), dict):
            schema = {**schema, "type": "object"}
        elif isinstance(schema.get("items"), dict):
            schema = {**schema, "type": "array"}

    return schema


def _select_union_schema(schema: dict[str, Any] | None) -> dict[str, Any]:
    if not isinstance(schema, dict):
        return {}
    for key in ("oneOf", "anyOf"):
        options = schema.get(key)
        if isinstance(options, list) and options and isinstance(options[0], dict):
            return options[0]
    return schema


def _guess_value(field_name: str, schema: dict[str, Any]) -> Any | None:
    schema_type = schema.get("type")
    schema_format = schema.get("format")
    name = field_name.lower()

    if schema_type == "string" or (schema_type is None and schema_format):
        return _fit_length(_guess_string(field_name, name, schema_format), schema)

    if schema_type in ("integer", "number"):
        if "age" in name:
            value: float = 30
        elif "count" in name:
            value = 1
        elif "limit" in name:
            value = 10
        elif any(key in name for key in ("amount", "price", "total", "cost")):
            value = 100
        elif name.endswith("id"):
            value = 1
        else:
            value = 0
        value = _clamp(value, schema)
        return int(value) if schema_type == "integer" else float(value)

    if schema_type == "boolean":
        return False

    return None


def _guess_string(field_name: str, name: str, schema_format: Any) -> str:
    faker = _faker_for_key(field_name)
    if schema_format in {"date-time", "datetime"}:
        return faker.date_time(tzinfo=timezone.utc).isoformat()
    if schema_format == "date":
        return faker.date()
    if schema_format == "email" or "email" in name:
        return faker.email()
    if schema_format in {"uuid", "uuid4"} or "uuid" in name:
        return faker.uuid4()
    if schema_format in {"uri", "url"} or "url" in name:
        return faker.url()
    if "date" in name or "time" in name:
        return faker.date_time(tzinfo=timezone.utc).isoformat()
    if "name" in name or "title" in name:
        return faker.sentence(nb_words=3).rstrip(".")
    if "description" in name:
        return faker.sentence()
    if "phone" in name:
        return faker.phone_number()
    if "city" in name or "location" in name:
        return faker.city()
    if "address" in name:
        return faker.street_address()
    if name.endswith("id"):
        return faker.uuid4()
    return faker.word()


def _fit_length(value: str, schema: dict[str, Any]) -> str:
    max_length = schema.get("maxLength")
    min_length = schema.get("minLength")
    if isinstance(max_length, int) and len(value) > max_length:
        value = value[:max_length]
    if isinstance(min_length, int) and len(value) < min_length:
        value = value + "x" * (min_length - len(value))
    return value


def _clamp(value: float, schema: dict[str, Any]) -> float:
    minimum = schema.get("minimum")
    maximum = schema.get("maximum")
    if isinstance(minimum, (int, float)) and value < minimum:
        value = minimum
    if isinstance(maximum, (int, float)) and value > maximum:
        value = maximum
    return value


def _faker_for_key(key: str) -> Faker:
    faker = Faker()
    seed = int(hashlib.sha256(key.encode("utf-8")).hexdigest()[:8], 16)
    faker.seed_instance(seed)
    return faker

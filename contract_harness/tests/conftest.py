from __future__ import annotations

import copy
from typing import Any

import pytest

from contract_harness.contract.document import OpenAPIDocument
from contract_harness.contract.index import SpecIndex
from contract_harness.contract.validate import ContractValidator


def _json(schema: dict[str, Any], description: str = "ok") -> dict[str, Any]:
    return {"description": description, "content": {"application/json": {"schema": schema}}}


CALENDAR_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Calendar App API", "version": "1.0.0"},
    "paths": {
        "/": {
            "get": {
                "operationId": "getApiInfo",
                "responses": {"200": {"description": "API info", "content": {}}},
            }
        },
        "/health": {
            "get": {
                "operationId": "getHealthStatus",
                "tags": ["ops"],
                "responses": {"200": _json({"$ref": "#/components/schemas/HealthStatus"})},
            }
        },
        "/api/events": {
            "get": {
                "operationId": "getCalendarEvents",
                "summary": "List events",
                "responses": {
                    "200": _json(
                        {
                            "type": "object",
                            "required": ["events", "message"],
                            "properties": {
                                "events": {"type": "array", "items": {"$ref": "#/components/schemas/Event"}},
                                "message": {"type": "string"},
                            },
                        }
                    )
                },
            },
            "post": {
                "operationId": "createCalendarEvent",
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/CreateEventRequest"}}},
                },
                "responses": {
                    "201": _json(
                        {
                            "type": "object",
                            "required": ["id", "message", "event"],
                            "properties": {
                                "id": {"type": "string"},
                                "message": {"type": "string"},
                                "event": {"$ref": "#/components/schemas/Event"},
                            },
                        },
                        "created",
                    ),
                    "400": {"$ref": "#/components/responses/BadRequest"},
                    "default": _json({"$ref": "#/components/schemas/Error"}, "error"),
                },
            },
        },
        "/api/events/{id}": {
            "parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}],
            "delete": {
                "operationId": "deleteCalendarEvent",
                "responses": {
                    "204": {"description": "deleted"},
                    "2XX": {"description": "other success"},
                },
            },
        },
        "/api/status": {
            "get": {
                "responses": {
                    "200": _json(
                        {"type": "object", "required": ["code"], "properties": {"code": {"type": "integer"}}}
                    ),
                    "default": _json(
                        {"type": "object", "required": ["code"], "properties": {"code": {"type": "string"}}},
                        "error",
                    ),
                }
            }
        },
    },
    "components": {
        "schemas": {
            "HealthStatus": {
                "type": "object",
                "required": ["status", "timestamp"],
                "properties": {
                    "status": {"type": "string"},
                    "timestamp": {"type": "string", "format": "date-time"},
                },
            },
            "Event": {
                "type": "object",
                "required": ["id", "title", "startDate", "endDate"],
                "properties": {
                    "id": {"type": "string"},
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                    "startDate": {"type": "string", "format": "date-time"},
                    "endDate": {"type": "string", "format": "date-time"},
                    "location": {"type": "string"},
                },
            },
            "CreateEventRequest": {
                "type": "object",
                "required": ["title", "startDate", "endDate"],
                "properties": {
                    "title": {"type": "string", "minLength": 1, "maxLength": 100},
                    "description": {"type": "string"},
                    "startDate": {"type": "string", "format": "date-time"},
                    "endDate": {"type": "string", "format": "date-time"},
                    "location": {"type": "string"},
                },
            },
            "Error": {
                "type": "object",
                "required": ["error"],
                "properties": {"error": {"type": "string"}},
            },
        },
        "responses": {
            "BadRequest": _json({"$ref": "#/components/schemas/Error"}, "bad request"),
        },
    },
}


@pytest.fixture()
def calendar_spec() -> dict[str, Any]:
    return copy.deepcopy(CALENDAR_SPEC)


@pytest.fixture()
def document(calendar_spec: dict[str, Any]) -> OpenAPIDocument:
    return OpenAPIDocument(calendar_spec)


@pytest.fixture()
def index(document: OpenAPIDocument) -> SpecIndex:
    return SpecIndex(document)


@pytest.fixture()
def validator(index: SpecIndex) -> ContractValidator:
    return ContractValidator(index)

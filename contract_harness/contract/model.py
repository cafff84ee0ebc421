from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Operation:
    method: str
    path: str
    operation_id: str | None
    summary: str | None
    tags: list[str]
    operation: dict[str, Any]

    @property
    def op_key(self) -> str:
        if self.operation_id:
            return self.operation_id
        return f"{self.method}:{self.path}"


@dataclass(frozen=True)
class SchemaError:
    path: str
    message: str
    keyword: str | None = None
    schema_path: str = ""

    @property
    def location(self) -> str:
        return self.path or "root"


@dataclass(frozen=True)
class Verdict:
    valid: bool
    errors: tuple[SchemaError, ...] = ()
    schema: dict[str, Any] | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [
                {
                    "path": error.path,
                    "message": error.message,
                    "keyword": error.keyword,
                    "schemaPath": error.schema_path,
                }
                for error in self.errors
            ],
            "schema": self.schema,
            "note": self.note,
        }


@dataclass(frozen=True)
class ContractCheck:
    """Truthy when the exchange matched its contract; ``message`` explains why not."""

    verdict: Verdict
    message: str = field(default="")

    def __bool__(self) -> bool:
        return self.verdict.valid

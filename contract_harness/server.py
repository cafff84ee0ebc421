from __future__ import annotations

import asyncio
import os
import sys
from typing import Any

from fastmcp import FastMCP

from .contract import ContractContext, HarnessConfig, SpecAcquisitionError, UndocumentedOperation
from .contract.render import render_catalog, render_operation


def build_server(context: ContractContext) -> FastMCP:
    mcp = FastMCP("contract-harness-mcp")

    @mcp.tool(name="contract_catalog")
    def contract_catalog() -> dict[str, Any]:
        """List every documented operation with its declared status codes."""
        return render_catalog(context.index)

    @mcp.tool(name="contract_operation")
    def contract_operation(path: str, method: str, full: bool = True) -> dict[str, Any]:
        """Return the contract of one operation by exact path and method."""
        operation = context.index.find_operation(path, method)
        if operation is None:
            return {}
        return render_operation(operation, context.index, full=full)

    @mcp.tool(name="contract_sample_request")
    def contract_sample_request(path: str, method: str, fields: dict[str, Any] | None = None) -> dict[str, Any]:
        """Generate a deterministic request body that satisfies the operation's request schema."""
        body = context.sample_request(path, method, fields)
        return {"body": body, "verdict": context.validate_request(path, method, body).to_dict()}

    @mcp.tool(name="contract_validate_response")
    def contract_validate_response(path: str, method: str, status_code: int, body: Any = None) -> dict[str, Any]:
        """Validate a captured response body against the documented schema."""
        try:
            verdict = context.validate_response(path, method, status_code, body)
        except UndocumentedOperation as exc:
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "verdict": verdict.to_dict()}

    @mcp.tool(name="contract_validate_request")
    def contract_validate_request(path: str, method: str, body: Any = None) -> dict[str, Any]:
        """Validate a request body against the documented request schema."""
        return {"ok": True, "verdict": context.validate_request(path, method, body).to_dict()}

    return mcp


def main() -> None:
    config = HarnessConfig.from_env()
    try:
        context = asyncio.run(ContractContext.acquire(config))
    except SpecAcquisitionError as exc:
        sys.stderr.write(f"Could not load OpenAPI document: {exc}\n")
        raise SystemExit(1) from exc

    mcp = build_server(context)
    mode = os.getenv("MCP_TRANSPORT", "stdio")
    if mode == "http":
        mcp.run(
            transport="http",
            host=os.getenv("MCP_HOST", "0.0.0.0"),  # nosec B104
            port=int(os.getenv("PORT", "8000")),
        )
    else:
        mcp.run()


if __name__ == "__main__":
    main()

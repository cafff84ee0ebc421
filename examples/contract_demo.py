"""Contract-check demo against a running service.

Prereqs:
  pip install -e .
  start the service under test (defaults to http://localhost:3000)

Run:
  API_SERVER_URL=http://localhost:3000 python examples/contract_demo.py
"""

from __future__ import annotations

import asyncio
import logging

from contract_harness import ContractContext, HarnessConfig
from contract_harness.contract import UndocumentedOperation
from contract_harness.contract.client import ApiResponse

PROBES = [
    ("get", "/"),
    ("get", "/health"),
    ("get", "/api/events"),
]


def report(context: ContractContext, probes, responses: list[ApiResponse]) -> list[str]:
    lines = []
    for (method, path), response in zip(probes, responses):
        label = f"  {method.upper()} {path} -> {response.status}"
        try:
            check = context.check_response(path, method, response.status, response.data)
        except UndocumentedOperation:
            lines.append(f"{label}: SKIP (not documented)")
            continue
        lines.append(f"{label}: {'PASS' if check else 'FAIL'}")
        if not check:
            lines.append(check.message)
    return lines


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    config = HarnessConfig.from_env()
    context = await ContractContext.acquire(config)

    print("\nEndpoints:")
    for operation in context.index.operations():
        print(f"  {operation.method.upper()} {operation.path} ({operation.operation_id})")

    print("\nChecks:")
    async with context.api_client() as client:
        responses = await asyncio.gather(*(client.request(method, path) for method, path in PROBES))
    for line in report(context, PROBES, list(responses)):
        print(line)


if __name__ == "__main__":
    asyncio.run(main())

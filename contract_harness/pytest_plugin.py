"""pytest wiring for live contract tests.

Registered through the ``pytest11`` entry point. The ``contract_context``
fixture fetches the OpenAPI document once per session; if the service or its
spec endpoint is unavailable the whole session stops instead of running tests
against nothing.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from .contract import ContractContext, HarnessConfig, SpecAcquisitionError, Verdict


@pytest.fixture(scope="session")
def contract_config() -> HarnessConfig:
    return HarnessConfig.from_env()


@pytest.fixture(scope="session")
def contract_context(contract_config: HarnessConfig) -> ContractContext:
    try:
        return asyncio.run(ContractContext.acquire(contract_config))
    except SpecAcquisitionError as exc:
        pytest.exit(
            f"Test suite setup failed: {exc}\n"
            f"Make sure the service at {contract_config.base_url} is running before executing tests.",
            returncode=1,
        )


def assert_response_contract(
    context: ContractContext, path: str, method: str, status_code: int, body: Any
) -> Verdict:
    check = context.check_response(path, method, status_code, body)
    if not check:
        raise AssertionError(check.message)
    return check.verdict


def assert_request_contract(context: ContractContext, path: str, method: str, body: Any) -> Verdict:
    check = context.check_request(path, method, body)
    if not check:
        raise AssertionError(check.message)
    return check.verdict

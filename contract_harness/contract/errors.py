from __future__ import annotations


class ContractError(RuntimeError):
    pass


class SpecAcquisitionError(ContractError):
    """Fetching the OpenAPI document failed; fatal to the run."""


class UnreachableService(SpecAcquisitionError):
    pass


class UpstreamError(SpecAcquisitionError):
    def __init__(self, url: str, status_code: int, reason: str | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"{status_code} {reason}" if reason else str(status_code)
        super().__init__(f"Request to {url} failed. Server responded with status {detail}")


class MalformedSpec(SpecAcquisitionError):
    pass


class UndocumentedOperation(ContractError, LookupError):
    def __init__(self, path: str, method: str) -> None:
        self.path = path
        self.method = method.lower()
        super().__init__(f"Operation not found for {method.upper()} {path}")

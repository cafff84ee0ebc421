from .client import ApiClient, ApiResponse
from .compiler import CompiledSchema, SchemaCompiler
from .config import HarnessConfig
from .context import ContractContext
from .document import OpenAPIDocument
from .errors import (
    ContractError,
    MalformedSpec,
    SpecAcquisitionError,
    UndocumentedOperation,
    UnreachableService,
    UpstreamError,
)
from .fetch import SpecFetcher, fetch_document
from .index import SpecIndex
from .model import ContractCheck, Operation, SchemaError, Verdict
from .validate import ContractValidator

__all__ = [
    "ApiClient",
    "ApiResponse",
    "CompiledSchema",
    "ContractCheck",
    "ContractContext",
    "ContractError",
    "ContractValidator",
    "HarnessConfig",
    "MalformedSpec",
    "OpenAPIDocument",
    "Operation",
    "SchemaCompiler",
    "SchemaError",
    "SpecAcquisitionError",
    "SpecFetcher",
    "SpecIndex",
    "UndocumentedOperation",
    "UnreachableService",
    "UpstreamError",
    "Verdict",
    "fetch_document",
]

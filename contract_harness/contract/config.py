from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class HarnessConfig:
    server_url: str = "http://localhost:3000"
    timeout: int = 10000
    openapi_endpoint: str = "/api/openapi.json"
    health_endpoint: str = "/health"
    strict: bool = False

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        defaults = cls()
        return cls(
            server_url=os.getenv("API_SERVER_URL", defaults.server_url),
            timeout=int(os.getenv("API_TIMEOUT_MS", str(defaults.timeout))),
            openapi_endpoint=os.getenv("OPENAPI_ENDPOINT", defaults.openapi_endpoint),
            health_endpoint=os.getenv("HEALTH_ENDPOINT", defaults.health_endpoint),
            strict=os.getenv("OPENAPI_STRICT", "0") == "1",
        )

"""
CBS Simulator Client Module

Async REST client used by the gateway to reach the simulator. Every call
is timed so the gateway can report CBS latency per request.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from cbs_simulator.logging_config import get_correlation_id, get_logger

logger = get_logger("cbs.gateway.client")


class CBSUnavailableError(Exception):
    """Raised when the simulator cannot be reached or does not answer in time"""

    def __init__(self, message: str, elapsed_ms: float):
        super().__init__(message)
        self.elapsed_ms = elapsed_ms


@dataclass
class CBSResponse:
    """Status, decoded JSON body and latency of one CBS call"""
    status_code: int
    payload: Any
    elapsed_ms: float

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class CBSClient:
    """REST client for the CBS simulator"""

    def __init__(
        self,
        base_url: str = "http://localhost:30001",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None
    ) -> CBSResponse:
        """
        Send a request to the simulator.

        The current correlation id, if any, is forwarded as X-Request-ID.

        Raises:
            CBSUnavailableError: On connection errors and timeouts
        """
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Request-ID"] = correlation_id

        start = time.perf_counter()
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"CBS call {method} {path} failed: {e}")
            raise CBSUnavailableError(str(e) or e.__class__.__name__, elapsed_ms)
        elapsed_ms = (time.perf_counter() - start) * 1000

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"CBS returned non-JSON body for {method} {path}: {response.status_code}")
            payload = {"error": "Invalid CBS response", "message": response.text}

        return CBSResponse(
            status_code=response.status_code, payload=payload, elapsed_ms=elapsed_ms
        )

    async def get(self, path: str) -> CBSResponse:
        return await self.request("GET", path)

    async def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> CBSResponse:
        return await self.request("POST", path, json=json)

    async def health_check(self) -> bool:
        """Check if the simulator is healthy"""
        try:
            response = await self.get("/health")
        except CBSUnavailableError:
            return False
        return response.status_code == 200

    async def aclose(self):
        """Close the HTTP client"""
        await self._client.aclose()

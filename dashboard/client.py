"""
Gateway REST client used by the dashboard
"""

from typing import Any, Dict, Optional

import httpx

from cbs_simulator.logging_config import get_logger

logger = get_logger("cbs.dashboard.client")


class GatewayError(Exception):
    """Raised when the gateway answers with an error status or cannot be reached"""

    def __init__(self, status_code: int, payload: Dict[str, Any]):
        message = payload.get("error") or payload.get("message") or f"HTTP {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class GatewayClient:
    """Synchronous client for the middleware gateway"""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport
        )

    def _request(self, method: str, path: str, what: str,
                 json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Error {what}: {e}")
            raise GatewayError(502, {"error": "Gateway unavailable", "message": str(e)})

        try:
            payload = response.json()
        except ValueError:
            payload = {"error": response.text or f"HTTP {response.status_code}"}

        if response.status_code >= 400:
            logger.error(f"Error {what}: HTTP {response.status_code} {payload}")
            if not isinstance(payload, dict):
                payload = {"error": str(payload)}
            raise GatewayError(response.status_code, payload)
        return payload

    def get_metrics(self) -> Dict[str, Any]:
        return self._request("GET", "/metrics", "fetching metrics")

    def get_health(self) -> Dict[str, Any]:
        return self._request("GET", "/health", "fetching health status")

    def do_transfer(self, transfer_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/transfer", "performing transfer", json=transfer_data)

    def get_account(self, account_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/accounts/{account_id}", f"fetching account {account_id}")

    def get_customer(self, customer_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/customers/{customer_id}", f"fetching customer {customer_id}")

    def get_transaction_history(self, account_id: str) -> Any:
        return self._request(
            "GET", f"/accounts/{account_id}/history",
            f"fetching transaction history for account {account_id}"
        )

    def close(self):
        """Close the HTTP client"""
        self._client.close()

"""
Tests for the middleware gateway

The gateway is wired to a real simulator app through httpx.ASGITransport,
or to a failing transport for the unreachable cases.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from cbs_simulator.api import create_app as create_cbs_app
from cbs_simulator.api.system import SimulatorSystem
from cbs_simulator.logging_config import correlation_context
from gateway.app import create_app
from gateway.client import CBSClient, CBSUnavailableError
from gateway.metrics import GatewayMetrics

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


def make_cbs_client():
    cbs_app = create_cbs_app(SimulatorSystem())
    return CBSClient(base_url="http://cbs", transport=httpx.ASGITransport(app=cbs_app))


def make_unreachable_client():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)
    return CBSClient(base_url="http://cbs", transport=httpx.MockTransport(refuse))


@pytest.fixture
def client():
    return TestClient(create_app(make_cbs_client()))


@pytest.fixture
def offline_client():
    return TestClient(create_app(make_unreachable_client()))


class TestProxyRoutes:
    """Calls relayed to the simulator"""

    def test_get_customer(self, client):
        r = client.get("/customers/C002")
        assert r.status_code == 200
        assert r.json()["prenom"] == "Fatima"
        assert r.headers["x-cbs-status"] == "200"
        assert "x-cbs-response-time" in r.headers

    def test_get_account(self, client):
        r = client.get("/accounts/A001")
        assert r.status_code == 200
        assert r.json()["iban"] == "TN59 1000 6035 0000 0123 4567 89"

    def test_error_status_and_body_passed_through(self, client):
        r = client.get("/accounts/Z999")
        assert r.status_code == 404
        assert r.json() == {"error": "Account not found", "accountId": "Z999"}
        assert r.headers["x-cbs-status"] == "404"

    def test_history(self, client):
        r = client.get("/accounts/A001/history")
        assert r.status_code == 200
        assert [t["id"] for t in r.json()] == ["TRN001", "TRN002", "TRN003"]

    def test_transfer(self, client):
        r = client.post("/transfer", json={
            "from": "A001", "to": "A002", "amount": 100, "ignored": "field"
        })
        assert r.status_code == 200
        assert r.json()["sourceAccount"]["balance"] == 15750.75
        assert client.get("/accounts/A002").json()["balance"] == 125100

    def test_transfer_rejected(self, client):
        r = client.post("/transfer", json={"from": "A001", "to": "A002", "amount": 999999})
        assert r.status_code == 400
        assert r.json()["error"] == "Insufficient funds"

    def test_balance_and_posting(self, client):
        r = client.post("/api/transactions", json={
            "accountNumber": "A003", "amount": 200, "type": "debit"
        })
        assert r.status_code == 201
        r = client.get("/api/balance/A003")
        assert r.json()["balance"] == 7030.5

    def test_request_id_echoed(self, client):
        r = client.get("/accounts/A001", headers={"X-Request-ID": "req-42"})
        assert r.headers["x-request-id"] == "req-42"

    def test_request_id_generated(self, client):
        r = client.get("/accounts/A001")
        assert len(r.headers["x-request-id"]) == 32


class TestUnreachableCBS:
    """Behaviour when the simulator cannot be reached"""

    def test_proxy_returns_502(self, offline_client):
        r = offline_client.get("/accounts/A001")
        assert r.status_code == 502
        assert r.json()["error"] == "CBS unavailable"
        assert r.headers["x-cbs-status"] == "unreachable"

    def test_health_reports_cbs_unreachable(self, offline_client):
        r = offline_client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "OK"
        assert r.json()["cbs"] == "unreachable"

    def test_failures_counted(self, offline_client):
        offline_client.get("/accounts/A001")
        metrics = offline_client.get("/metrics").json()
        assert metrics["cbs"]["failures"] == 1
        assert metrics["requests"]["byStatus"]["5xx"] == 1


class TestMonitoring:
    """Root, health and metrics endpoints"""

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["message"] == "CBS Middleware API"
        assert "transfer" in r.json()["endpoints"]

    def test_health(self, client):
        r = client.get("/health")
        assert r.json()["cbs"] == "healthy"

    def test_metrics(self, client):
        client.get("/accounts/A001")
        client.get("/accounts/Z999")
        metrics = client.get("/metrics").json()
        assert metrics["requests"]["total"] == 2
        assert metrics["requests"]["byStatus"] == {"2xx": 1, "4xx": 1}
        assert metrics["cbs"]["calls"] == 2
        assert metrics["memory"]["maxRss"] > 0
        assert "user" in metrics["cpu"]

    def test_unknown_route(self, client):
        r = client.get("/nowhere")
        assert r.status_code == 404
        assert r.json()["error"] == "Not found"


class TestValidateTransaction:
    """Local validation endpoint"""

    def test_valid(self, client):
        body = {"accountNumber": "A001", "amount": 50, "type": "credit"}
        r = client.post("/api/validate-transaction", json=body)
        assert r.status_code == 200
        assert r.json() == {"valid": True, "message": "Transaction is valid", "transaction": body}

    @pytest.mark.parametrize("amount", [0, -5, "abc", None])
    def test_bad_amount(self, client, amount):
        r = client.post("/api/validate-transaction", json={"accountNumber": "A001", "amount": amount})
        assert r.status_code == 400
        assert r.json()["message"] == "Amount must be greater than 0"

    def test_missing_account(self, client):
        r = client.post("/api/validate-transaction", json={"amount": 10})
        assert r.status_code == 400
        assert r.json()["message"] == "Account number is required"


class TestCBSClient:
    """Direct use of the async client"""

    @pytest.mark.asyncio
    async def test_get(self):
        cbs = make_cbs_client()
        response = await cbs.get("/cbs/account/A006")
        assert response.ok
        assert response.payload["customerId"] == "C004"
        assert response.elapsed_ms >= 0
        await cbs.aclose()

    @pytest.mark.asyncio
    async def test_forwards_correlation_id(self):
        seen = {}

        def handler(request):
            seen["request_id"] = request.headers.get("x-request-id")
            return httpx.Response(200, json={"status": "healthy"})

        cbs = CBSClient(base_url="http://cbs", transport=httpx.MockTransport(handler))
        with correlation_context("abc123"):
            assert await cbs.health_check() is True
        assert seen["request_id"] == "abc123"
        await cbs.aclose()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        cbs = CBSClient(
            base_url="http://cbs",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
        )
        response = await cbs.get("/cbs/accounts")
        assert not response.ok
        assert response.payload == {"error": "Invalid CBS response", "message": "boom"}
        await cbs.aclose()

    @pytest.mark.asyncio
    async def test_unreachable(self):
        cbs = make_unreachable_client()
        with pytest.raises(CBSUnavailableError):
            await cbs.get("/health")
        assert await cbs.health_check() is False
        await cbs.aclose()


class TestGatewayMetrics:
    """Metric aggregation"""

    def test_average_cbs_time(self):
        metrics = GatewayMetrics()
        metrics.record_request(200, cbs_time_ms=10.0)
        metrics.record_request(404, cbs_time_ms=20.0)
        metrics.record_request(200)
        snapshot = metrics.snapshot()
        assert snapshot["requests"]["total"] == 3
        assert snapshot["cbs"]["calls"] == 2
        assert snapshot["cbs"]["averageResponseTimeMs"] == 15.0

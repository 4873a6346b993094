"""
Integration tests for the CBS simulator API
Tests the HTTP surface using FastAPI TestClient
"""

import pytest
from fastapi.testclient import TestClient

from cbs_simulator.api import create_app
from cbs_simulator.api.system import SimulatorSystem


@pytest.fixture
def client():
    """Test client over a freshly seeded simulator"""
    return TestClient(create_app(SimulatorSystem()))


class TestMonitoringEndpoints:
    """Test root and health endpoints"""

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "OK"
        assert data["service"] == "CBS Simulator"
        assert data["timestamp"].endswith("Z")

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_unknown_route(self, client):
        r = client.get("/cbs/nowhere")
        assert r.status_code == 404
        assert r.json() == {
            "error": "Not found",
            "path": "/cbs/nowhere",
            "message": "The requested endpoint does not exist"
        }


class TestCustomerEndpoints:
    """Customer lookups"""

    def test_list_customers(self, client):
        r = client.get("/cbs/customers")
        assert r.status_code == 200
        assert [c["id"] for c in r.json()] == ["C001", "C002", "C003", "C004"]

    def test_get_customer_with_accounts(self, client):
        r = client.get("/cbs/customer/C001")
        assert r.status_code == 200
        data = r.json()
        assert data["nom"] == "Ben Ali"
        assert data["telephone"] == "+216 98 123 456"
        assert [a["id"] for a in data["accounts"]] == ["A001", "A002"]

    def test_customer_not_found(self, client):
        r = client.get("/cbs/customer/C999")
        assert r.status_code == 404
        assert r.json() == {"error": "Customer not found", "customerId": "C999"}


class TestAccountEndpoints:
    """Account and history lookups"""

    def test_get_account(self, client):
        r = client.get("/cbs/account/A001")
        assert r.status_code == 200
        data = r.json()
        assert data["balance"] == 15850.75
        assert data["currency"] == "TND"
        assert data["type"] == "Compte Courant"

    def test_account_not_found(self, client):
        r = client.get("/cbs/account/Z999")
        assert r.status_code == 404
        assert r.json() == {"error": "Account not found", "accountId": "Z999"}

    def test_history(self, client):
        r = client.get("/cbs/account/A005/history")
        assert r.status_code == 200
        history = r.json()
        assert len(history) == 1
        assert history[0]["id"] == "TRN010"
        assert history[0]["montant"] == 2000

    def test_history_unknown_account(self, client):
        r = client.get("/cbs/account/Z999/history")
        assert r.status_code == 404

    def test_account_with_history(self, client):
        r = client.get("/cbs/history/A003")
        assert r.status_code == 200
        data = r.json()
        assert data["account"]["id"] == "A003"
        assert [t["id"] for t in data["transactions"]] == ["TRN006", "TRN007"]

    def test_balance(self, client):
        r = client.get("/api/balance/A002")
        assert r.status_code == 200
        assert r.json() == {"accountNumber": "A002", "balance": 125000, "currency": "TND"}

    def test_account_by_number_not_found(self, client):
        r = client.get("/api/accounts/Z999")
        assert r.status_code == 404
        assert r.json() == {"error": "Account not found", "accountNumber": "Z999"}


class TestTransferEndpoint:
    """Transfers over HTTP"""

    def test_transfer(self, client):
        r = client.post("/cbs/transfer", json={"from": "A001", "to": "A002", "amount": 100})
        assert r.status_code == 200
        data = r.json()
        assert data["message"] == "Transfer successful"
        assert data["sourceAccount"]["balance"] == 15750.75
        assert data["targetAccount"]["balance"] == 125100
        assert data["debitTransaction"]["montant"] == -100

        history = client.get("/cbs/account/A002/history").json()
        assert history[-1]["id"] == data["creditTransaction"]["id"]

    def test_transfer_insufficient_funds(self, client):
        r = client.post("/cbs/transfer", json={"from": "A001", "to": "A002", "amount": 999999})
        assert r.status_code == 400
        assert r.json() == {"error": "Insufficient funds", "available": 15850.75, "requested": 999999}
        assert client.get("/cbs/account/A001").json()["balance"] == 15850.75

    def test_transfer_without_body(self, client):
        r = client.post("/cbs/transfer")
        assert r.status_code == 400
        assert r.json() == {"error": "Missing transfer details", "required": ["from", "to", "amount"]}

    def test_transfer_unknown_accounts(self, client):
        r = client.post("/cbs/transfer", json={"from": "Z998", "to": "Z999", "amount": 1})
        assert r.status_code == 404
        assert r.json()["missing"] == ["Z998", "Z999"]

    def test_malformed_body(self, client):
        r = client.post(
            "/cbs/transfer", content="{not json",
            headers={"Content-Type": "application/json"}
        )
        assert r.status_code == 400
        assert r.json()["error"] == "Invalid request"


class TestPostingEndpoint:
    """Single postings over HTTP"""

    def test_debit(self, client):
        r = client.post("/api/transactions", json={
            "accountNumber": "A003", "amount": 200, "type": "debit"
        })
        assert r.status_code == 201
        data = r.json()
        assert data["message"] == "Transaction processed successfully"
        assert data["account"]["balance"] == 7030.5
        assert data["transaction"]["montant"] == -200

    def test_invalid_type(self, client):
        r = client.post("/api/transactions", json={
            "accountNumber": "A003", "amount": 200, "type": "refund"
        })
        assert r.status_code == 400
        assert r.json()["allowed"] == ["credit", "debit"]

    def test_missing_fields(self, client):
        r = client.post("/api/transactions", json={"accountNumber": "A003"})
        assert r.status_code == 400
        assert r.json()["error"] == "Missing required fields"

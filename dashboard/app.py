"""CBS Supervision Dashboard - FastAPI Application"""

from collections import deque
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from cbs_simulator.config import get_config
from cbs_simulator.currency import to_decimal, to_number
from cbs_simulator.logging_config import get_logger
from .client import GatewayClient, GatewayError

logger = get_logger("cbs.dashboard")

# Points kept for the performance chart
PERFORMANCE_WINDOW = 20

DEFAULT_TRANSFER_DESCRIPTION = "Transfert via middleware"


class TransferForm(BaseModel):
    source_account_id: str = Field(..., min_length=1, alias="sourceAccountId")
    target_account_id: str = Field(..., min_length=1, alias="targetAccountId")
    amount: float = Field(..., ge=0.01)
    description: Optional[str] = None


INDEX_HTML = """<!DOCTYPE html>
<html lang="fr">
<head><meta charset="utf-8"><title>CBS Supervision</title></head>
<body>
  <h1>Dashboard de Supervision CBS</h1>
  <ul>
    <li><a href="/api/dashboard/overview">Vue d'ensemble</a></li>
    <li>Consultation compte : <code>/api/dashboard/accounts/{id}</code></li>
    <li>Consultation client : <code>/api/dashboard/customers/{id}</code></li>
    <li>Historique : <code>/api/dashboard/accounts/{id}/history</code></li>
    <li>Transfert : <code>POST /api/dashboard/transfer</code></li>
  </ul>
</body>
</html>
"""


def _sum_amounts(transactions, positive: bool) -> Decimal:
    total = Decimal("0")
    for txn in transactions:
        amount = to_decimal(txn.get("montant", 0))
        if (amount >= 0) == positive:
            total += amount
    return total


def create_app(client: Optional[GatewayClient] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.gateway.close()

    app = FastAPI(
        title="CBS Supervision Dashboard",
        description="Supervision and manual operations on the CBS through the gateway",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.gateway = client or GatewayClient(config.gateway_url, config.proxy_timeout)
    app.state.performance = deque(maxlen=PERFORMANCE_WINDOW)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content={
            "error": str(exc),
            "details": exc.payload
        })

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Landing page"""
        return INDEX_HTML

    @app.get("/api/dashboard/overview")
    def get_dashboard_overview():
        """Gateway health and metrics, plus the rolling performance series"""
        gateway: GatewayClient = app.state.gateway
        try:
            metrics = gateway.get_metrics()
            health = gateway.get_health()
        except GatewayError as e:
            logger.error(f"Dashboard error: {e}")
            return JSONResponse(status_code=503, content={
                "status": "unavailable",
                "error": "Erreur lors du chargement des données du dashboard",
                "details": e.payload
            })

        app.state.performance.append({
            "time": datetime.now(timezone.utc).strftime("%H:%M:%S"),
            "uptime": int(metrics.get("uptime", 0) // 60),
            "memory": round(metrics.get("memory", {}).get("maxRss", 0) / 1024 / 1024),  # peak MB
            "cpu": metrics.get("cpu", {}).get("user", 0),
        })

        cbs_ok = health.get("cbs", "healthy") == "healthy"
        return {
            "status": "healthy" if health.get("status") == "OK" and cbs_ok else "degraded",
            "health": health,
            "metrics": metrics,
            "performance": list(app.state.performance)
        }

    @app.get("/api/dashboard/accounts/{account_id}")
    def get_account(account_id: str):
        """Account consultation"""
        return app.state.gateway.get_account(account_id)

    @app.get("/api/dashboard/customers/{customer_id}")
    def get_customer(customer_id: str):
        """Customer consultation with balance summary"""
        customer = app.state.gateway.get_customer(customer_id)
        accounts = customer.get("accounts", [])
        total = sum((to_decimal(a.get("balance", 0)) for a in accounts), Decimal("0"))
        return {
            "customer": customer,
            "summary": {
                "accountCount": len(accounts),
                "totalBalance": to_number(total)
            }
        }

    @app.get("/api/dashboard/accounts/{account_id}/history")
    def get_transaction_history(account_id: str):
        """Account details with its transactions and credit/debit totals"""
        gateway: GatewayClient = app.state.gateway
        transactions = gateway.get_transaction_history(account_id)
        account = gateway.get_account(account_id)
        return {
            "account": account,
            "transactions": transactions,
            "totals": {
                "count": len(transactions),
                "credits": to_number(_sum_amounts(transactions, positive=True)),
                "debits": to_number(_sum_amounts(transactions, positive=False))
            }
        }

    @app.post("/api/dashboard/transfer")
    def do_transfer(form: TransferForm):
        """Transfer form submission"""
        transfer_data: Dict[str, Any] = {
            "from": form.source_account_id,
            "to": form.target_account_id,
            "amount": form.amount,
            "description": form.description or DEFAULT_TRANSFER_DESCRIPTION
        }
        logger.info(f"Transfer requested: {form.source_account_id} -> {form.target_account_id}")
        return app.state.gateway.do_transfer(transfer_data)

    return app

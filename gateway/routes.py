"""
Gateway endpoints proxied to the CBS simulator
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from cbs_simulator.currency import to_decimal
from cbs_simulator.logging_config import get_logger
from .client import CBSClient, CBSUnavailableError


router = APIRouter()
logger = get_logger("cbs.gateway")


def get_cbs_client(request: Request) -> CBSClient:
    return request.app.state.cbs_client


async def proxy(client: CBSClient, method: str, path: str,
                json: Optional[Dict[str, Any]] = None) -> JSONResponse:
    """
    Forward a call to the simulator and relay its status and body.

    CBS status and latency are attached as X-CBS-Status and
    X-CBS-Response-Time for the access log.
    """
    try:
        cbs = await client.request(method, path, json=json)
    except CBSUnavailableError as e:
        return JSONResponse(
            status_code=502,
            content={"error": "CBS unavailable", "message": str(e)},
            headers={"X-CBS-Status": "unreachable",
                     "X-CBS-Response-Time": f"{e.elapsed_ms:.0f}"}
        )
    if not cbs.ok:
        logger.warning(f"CBS answered {method} {path} with {cbs.status_code}: {cbs.payload}")
    return JSONResponse(
        status_code=cbs.status_code,
        content=cbs.payload,
        headers={"X-CBS-Status": str(cbs.status_code),
                 "X-CBS-Response-Time": f"{cbs.elapsed_ms:.0f}"}
    )


@router.get("/customers/{customer_id}", tags=["Customers"])
async def get_customer(customer_id: str, client: CBSClient = Depends(get_cbs_client)):
    """Customer details, including their accounts"""
    return await proxy(client, "GET", f"/cbs/customer/{customer_id}")


@router.get("/accounts/{account_id}", tags=["Accounts"])
async def get_account(account_id: str, client: CBSClient = Depends(get_cbs_client)):
    """Bank account details"""
    return await proxy(client, "GET", f"/cbs/account/{account_id}")


@router.get("/accounts/{account_id}/history", tags=["Accounts"])
async def get_account_history(account_id: str, client: CBSClient = Depends(get_cbs_client)):
    """Transaction history of an account"""
    return await proxy(client, "GET", f"/cbs/account/{account_id}/history")


@router.post("/transfer", tags=["Transactions"])
async def transfer(
    body: Optional[Dict[str, Any]] = Body(None),
    client: CBSClient = Depends(get_cbs_client)
):
    """Transfer between two accounts"""
    body = body or {}
    payload = {key: body.get(key) for key in ("from", "to", "amount", "description")}
    return await proxy(client, "POST", "/cbs/transfer", json=payload)


@router.get("/api/accounts/{account_number}", tags=["Accounts"])
async def get_account_by_number(account_number: str, client: CBSClient = Depends(get_cbs_client)):
    """Account lookup by account number"""
    logger.info(f"Fetching account {account_number} from CBS Simulator")
    return await proxy(client, "GET", f"/api/accounts/{account_number}")


@router.get("/api/balance/{account_number}", tags=["Accounts"])
async def get_balance(account_number: str, client: CBSClient = Depends(get_cbs_client)):
    """Balance inquiry"""
    logger.info(f"Fetching balance for account {account_number}")
    return await proxy(client, "GET", f"/api/balance/{account_number}")


@router.post("/api/transactions", tags=["Transactions"])
async def post_transaction(
    body: Optional[Dict[str, Any]] = Body(None),
    client: CBSClient = Depends(get_cbs_client)
):
    """Single credit or debit posting"""
    logger.info(f"Processing {(body or {}).get('type')} transaction for {(body or {}).get('accountNumber')}")
    return await proxy(client, "POST", "/api/transactions", json=body or {})


@router.post("/api/validate-transaction", tags=["Transactions"])
async def validate_transaction(body: Optional[Dict[str, Any]] = Body(None)):
    """Check a transaction locally before it is sent to the CBS"""
    body = body or {}
    try:
        amount = to_decimal(body["amount"]) if body.get("amount") is not None else None
    except ValueError:
        amount = None
    if amount is None or amount <= 0:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid transaction", "message": "Amount must be greater than 0"}
        )
    if not body.get("accountNumber"):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid transaction", "message": "Account number is required"}
        )
    return {"valid": True, "message": "Transaction is valid", "transaction": body}

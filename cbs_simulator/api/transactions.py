"""
Account-number endpoints used by the gateway's /api routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, status

from .schemas import PostTransactionRequest
from .system import SimulatorSystem, get_system
from ..currency import to_number
from ..exceptions import AccountNotFoundError


router = APIRouter()


def _lookup(system: SimulatorSystem, account_number: str):
    account = system.store.find_account(account_number)
    if account is None:
        raise AccountNotFoundError(account_number, key="accountNumber")
    return account


@router.get("/accounts/{account_number}")
async def get_account_by_number(
    account_number: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get account by number"""
    return _lookup(system, account_number).to_dict()


@router.get("/balance/{account_number}")
async def get_balance(
    account_number: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get account balance"""
    account = _lookup(system, account_number)
    return {
        "accountNumber": account_number,
        "balance": to_number(account.balance),
        "currency": account.currency.code
    }


@router.post("/transactions", status_code=status.HTTP_201_CREATED)
async def post_transaction(
    request: Optional[PostTransactionRequest] = None,
    system: SimulatorSystem = Depends(get_system)
):
    """Credit or debit a single account"""
    request = request or PostTransactionRequest()
    result = system.posting_engine.post_transaction(
        account_id=request.account_number,
        amount=request.amount,
        kind=request.kind,
        description=request.description
    )
    return result.to_dict()

"""
Account endpoints
"""

from fastapi import APIRouter, Depends

from .system import SimulatorSystem, get_system


router = APIRouter()


@router.get("/accounts")
async def list_accounts(system: SimulatorSystem = Depends(get_system)):
    """List all accounts"""
    return [account.to_dict() for account in system.store.list_accounts()]


@router.get("/account/{account_id}")
async def get_account(
    account_id: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get account details"""
    return system.store.get_account(account_id).to_dict()


@router.get("/account/{account_id}/history")
async def get_account_history(
    account_id: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get transaction history for account"""
    return [txn.to_dict() for txn in system.store.get_history(account_id)]


@router.get("/history/{account_id}")
async def get_account_with_history(
    account_id: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get account with its full history"""
    with system.store.atomic():
        account = system.store.get_account(account_id)
        transactions = system.store.get_history(account_id)
    return {
        "account": account.to_dict(),
        "transactions": [txn.to_dict() for txn in transactions]
    }

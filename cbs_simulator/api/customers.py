"""
Customer endpoints
"""

from fastapi import APIRouter, Depends

from .system import SimulatorSystem, get_system


router = APIRouter()


@router.get("/customers")
async def list_customers(system: SimulatorSystem = Depends(get_system)):
    """List all customers"""
    return [customer.to_dict() for customer in system.store.list_customers()]


@router.get("/customer/{customer_id}")
async def get_customer(
    customer_id: str,
    system: SimulatorSystem = Depends(get_system)
):
    """Get customer details with their accounts"""
    customer = system.store.get_customer(customer_id)
    accounts = system.store.get_accounts_for_customer(customer_id)
    return {
        **customer.to_dict(),
        "accounts": [account.to_dict() for account in accounts]
    }

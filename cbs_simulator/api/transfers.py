"""
Transfer endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends

from .schemas import TransferRequest
from .system import SimulatorSystem, get_system


router = APIRouter()


@router.post("/transfer")
async def transfer(
    request: Optional[TransferRequest] = None,
    system: SimulatorSystem = Depends(get_system)
):
    """Transfer between two accounts"""
    request = request or TransferRequest()
    result = system.transfer_engine.transfer(
        from_account_id=request.from_account,
        to_account_id=request.to_account,
        amount=request.amount,
        description=request.description
    )
    return result.to_dict()

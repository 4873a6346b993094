"""
Pydantic schemas for API requests

Fields are optional on purpose: presence is checked by the engines so a
missing field yields the documented MissingFields payload rather than a
generic validation error.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class TransferRequest(BaseModel):
    from_account: Optional[str] = Field(None, alias="from", description="Source account ID (e.g. A001)")
    to_account: Optional[str] = Field(None, alias="to", description="Destination account ID (e.g. A002)")
    amount: Optional[Any] = Field(None, description="Amount to transfer")
    description: Optional[str] = None


class PostTransactionRequest(BaseModel):
    account_number: Optional[str] = Field(None, alias="accountNumber")
    amount: Optional[Any] = Field(None, description="Unsigned amount")
    kind: Optional[str] = Field(None, alias="type", description="credit or debit")
    description: Optional[str] = None

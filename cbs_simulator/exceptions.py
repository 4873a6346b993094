"""
Exception hierarchy for the CBS simulator.

Every error carries the HTTP status it maps to and the JSON payload returned
to the caller, so the API layer renders them with a single handler.
"""

from decimal import Decimal
from typing import Any, Dict, List

from .currency import to_number


class CBSError(Exception):
    """Base exception for all simulator errors."""

    status_code = 500
    error = "Internal server error"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "message": str(self)}


class MissingFieldsError(CBSError):
    """Raised when one or more required inputs are absent."""

    status_code = 400

    def __init__(self, required: List[str], error: str = "Missing required fields"):
        super().__init__(f"{error}: {', '.join(required)}")
        self.required = list(required)
        self.error = error

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "required": self.required}


class InvalidAmountError(CBSError):
    """Raised when an amount is not numeric, or negative under the strict policy."""

    status_code = 400
    error = "Invalid amount"

    def __init__(self, amount: Any, reason: str = "Amount must be greater than 0"):
        super().__init__(f"{reason}, got {amount!r}")
        self.amount = amount
        self.reason = reason

    def to_payload(self) -> Dict[str, Any]:
        amount = to_number(self.amount) if isinstance(self.amount, Decimal) else self.amount
        return {"error": self.error, "amount": amount, "message": self.reason}


class InvalidTransactionTypeError(CBSError):
    """Raised when a posting type is neither credit nor debit."""

    status_code = 400
    error = "Invalid transaction type"

    def __init__(self, kind: str, allowed: List[str]):
        super().__init__(f"Unsupported transaction type {kind!r}")
        self.kind = kind
        self.allowed = allowed

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "type": self.kind, "allowed": self.allowed}


class EntityNotFoundError(CBSError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class AccountNotFoundError(EntityNotFoundError):
    """Raised when an account identifier does not exist.

    ``key`` is the field name echoed back in the payload: ``accountId`` on
    the /cbs routes, ``accountNumber`` on the /api routes.
    """

    error = "Account not found"

    def __init__(self, account_id: str, key: str = "accountId"):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id
        self.key = key

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, self.key: self.account_id}


class TransferAccountsNotFoundError(AccountNotFoundError):
    """Raised when the source and/or target account of a transfer is missing."""

    error = "One or more accounts not found"

    def __init__(self, from_account_id: str, to_account_id: str, missing: List[str]):
        EntityNotFoundError.__init__(self, f"Accounts not found: {', '.join(missing)}")
        self.account_id = missing[0]
        self.key = "accountId"
        self.from_account_id = from_account_id
        self.to_account_id = to_account_id
        self.missing = missing

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "from": self.from_account_id,
            "to": self.to_account_id,
            "missing": self.missing,
        }


class CustomerNotFoundError(EntityNotFoundError):
    """Raised when a customer identifier does not exist."""

    error = "Customer not found"

    def __init__(self, customer_id: str):
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "customerId": self.customer_id}


class InsufficientFundsError(CBSError):
    """Raised when a balance is below the requested debit or transfer amount."""

    status_code = 400
    error = "Insufficient funds"

    def __init__(self, account_id: str, available: Decimal, requested: Decimal):
        super().__init__(
            f"Insufficient funds on {account_id}: available {available}, requested {requested}"
        )
        self.account_id = account_id
        self.available = available
        self.requested = requested

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "available": to_number(self.available),
            "requested": to_number(self.requested),
        }


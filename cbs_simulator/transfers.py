"""
Transfer Engine Module

Double-entry movement of funds between two accounts of the ledger store.
A transfer yields two transactions, a debit on the source account and a
credit on the target account, correlated by timestamp and opposite signs.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .exceptions import (
    CBSError, InsufficientFundsError, MissingFieldsError,
    TransferAccountsNotFoundError
)
from .ledger import LedgerStore
from .logging_config import get_logger, log_action
from .models import Account, Transaction, TransactionType, utc_now
from .validation import check_amount_policy, is_blank, parse_amount


@dataclass
class TransferResult:
    """Updated accounts and the two transactions of a transfer"""
    source_account: Account
    target_account: Account
    debit_transaction: Transaction
    credit_transaction: Transaction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": "Transfer successful",
            "sourceAccount": self.source_account.to_dict(),
            "targetAccount": self.target_account.to_dict(),
            "debitTransaction": self.debit_transaction.to_dict(),
            "creditTransaction": self.credit_transaction.to_dict(),
        }


class TransferEngine:
    """Validates and executes transfers between two accounts"""

    REQUIRED_FIELDS = ["from", "to", "amount"]

    def __init__(self, store: LedgerStore, reject_non_positive_amounts: bool = True):
        self.store = store
        self.reject_non_positive_amounts = reject_non_positive_amounts
        self.logger = get_logger("cbs.transfers")

    def transfer(
        self,
        from_account_id: Optional[str],
        to_account_id: Optional[str],
        amount: Any,
        description: Optional[str] = None
    ) -> TransferResult:
        """
        Move ``amount`` from one account to another.

        Checks run in order and the first failure wins: missing fields,
        amount policy, account existence, source balance. The amount is
        rounded to the ledger currency first; one that rounds to zero
        counts as missing.

        Raises:
            MissingFieldsError: from, to or amount absent
            InvalidAmountError: amount not numeric, or negative under the strict policy
            TransferAccountsNotFoundError: source and/or target unknown
            InsufficientFundsError: source balance below amount
        """
        try:
            with self.store.atomic():
                return self._transfer(from_account_id, to_account_id, amount, description)
        except CBSError as e:
            log_action(
                self.logger, "warning", f"Transfer rejected: {e.error}",
                action="transfer", resource=f"account:{from_account_id}",
                extra={"from": from_account_id, "to": to_account_id,
                       "amount": str(amount), "status_code": e.status_code}
            )
            raise

    def _transfer(self, from_account_id, to_account_id, amount, description) -> TransferResult:
        if is_blank(from_account_id) or is_blank(to_account_id) or is_blank(amount):
            raise MissingFieldsError(self.REQUIRED_FIELDS, error="Missing transfer details")
        requested = parse_amount(amount, self.store.currency)
        if requested is None:
            raise MissingFieldsError(self.REQUIRED_FIELDS, error="Missing transfer details")

        check_amount_policy(requested, self.reject_non_positive_amounts)

        source = self.store.find_account(from_account_id)
        target = self.store.find_account(to_account_id)
        missing: List[str] = []
        if source is None:
            missing.append(from_account_id)
        if target is None:
            missing.append(to_account_id)
        if missing:
            raise TransferAccountsNotFoundError(from_account_id, to_account_id, missing)

        if source.balance < requested:
            raise InsufficientFundsError(source.id, source.balance, requested)

        now = utc_now()
        debit = Transaction(
            id=self.store.next_transaction_id(),
            kind=TransactionType.DEBIT,
            label=TransactionType.DEBIT.ledger_label,
            date=now,
            description=description or f"Virement à {to_account_id}",
            amount=-requested,
        )
        credit = Transaction(
            id=self.store.next_transaction_id(),
            kind=TransactionType.CREDIT,
            label=TransactionType.CREDIT.ledger_label,
            date=now,
            description=description or f"Virement de {from_account_id}",
            amount=requested,
        )

        source = self.store.post(from_account_id, debit, at=now)
        target = self.store.post(to_account_id, credit, at=now)

        log_action(
            self.logger, "info", f"Transfer completed: {from_account_id} -> {to_account_id}",
            action="transfer", resource=f"account:{from_account_id}",
            extra={
                "from": from_account_id,
                "to": to_account_id,
                "amount": str(requested),
                "debit_transaction": debit.id,
                "credit_transaction": credit.id,
            }
        )

        return TransferResult(
            source_account=source,
            target_account=target,
            debit_transaction=debit,
            credit_transaction=credit,
        )

"""
Single-Account Posting Engine Module

Credits or debits one account and records the matching transaction.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import (
    AccountNotFoundError, CBSError, InsufficientFundsError,
    InvalidTransactionTypeError, MissingFieldsError
)
from .ledger import LedgerStore
from .logging_config import get_logger, log_action
from .models import Account, Transaction, TransactionType, utc_now
from .validation import check_amount_policy, is_blank, parse_amount


@dataclass
class PostResult:
    """The new transaction and the updated account"""
    transaction: Transaction
    account: Account

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": "Transaction processed successfully",
            "transaction": self.transaction.to_dict(),
            "account": self.account.to_dict(),
        }


class PostingEngine:
    """Validates and executes single credit/debit postings"""

    REQUIRED_FIELDS = ["accountNumber", "amount", "type"]

    def __init__(self, store: LedgerStore, reject_non_positive_amounts: bool = True):
        self.store = store
        self.reject_non_positive_amounts = reject_non_positive_amounts
        self.logger = get_logger("cbs.postings")

    def post_transaction(
        self,
        account_id: Optional[str],
        amount: Any,
        kind: Optional[str],
        description: Optional[str] = None
    ) -> PostResult:
        """
        Credit or debit one account.

        Args:
            account_id: Account to post to
            amount: Unsigned amount, rounded to the ledger currency
            kind: "credit" or "debit" (case-insensitive)
            description: Optional label, defaults to "<kind> transaction"

        Raises:
            MissingFieldsError: account, amount or kind absent
            InvalidTransactionTypeError: kind is neither credit nor debit
            InvalidAmountError: amount not numeric, or negative under the strict policy
            AccountNotFoundError: account unknown
            InsufficientFundsError: debit above the balance
        """
        try:
            with self.store.atomic():
                return self._post(account_id, amount, kind, description)
        except CBSError as e:
            log_action(
                self.logger, "warning", f"Posting rejected: {e.error}",
                action="post_transaction", resource=f"account:{account_id}",
                extra={"account": account_id, "type": kind,
                       "amount": str(amount), "status_code": e.status_code}
            )
            raise

    def _post(self, account_id, amount, kind, description) -> PostResult:
        if is_blank(account_id) or is_blank(amount) or is_blank(kind):
            raise MissingFieldsError(self.REQUIRED_FIELDS)
        requested = parse_amount(amount, self.store.currency)
        if requested is None:
            raise MissingFieldsError(self.REQUIRED_FIELDS)

        kind = str(kind).strip().lower()
        try:
            transaction_type = TransactionType(kind.upper())
        except ValueError:
            raise InvalidTransactionTypeError(
                kind, [t.value.lower() for t in TransactionType]
            )

        check_amount_policy(requested, self.reject_non_positive_amounts)

        account = self.store.find_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id, key="accountNumber")

        if transaction_type is TransactionType.DEBIT and account.balance < requested:
            raise InsufficientFundsError(account.id, account.balance, requested)

        now = utc_now()
        transaction = Transaction(
            id=self.store.next_transaction_id(),
            kind=transaction_type,
            label=transaction_type.value,
            date=now,
            description=description or f"{kind} transaction",
            amount=requested * transaction_type.sign,
        )
        account = self.store.post(account_id, transaction, at=now)

        log_action(
            self.logger, "info", f"Transaction posted: {kind} on {account_id}",
            action="post_transaction", resource=f"account:{account_id}",
            extra={
                "transaction_id": transaction.id,
                "type": kind,
                "amount": str(requested),
                "balance": str(account.balance),
            }
        )

        return PostResult(transaction=transaction, account=account)

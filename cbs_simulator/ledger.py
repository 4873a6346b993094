"""
Ledger Store Module

Authoritative in-memory mapping of customers, accounts and per-account
transaction history, plus the process-wide transaction id sequence.
All accounts share the ledger currency; amounts are rounded to its minor
unit before they reach the store.

The store owns one re-entrant lock. Engines wrap their read-validate-mutate
sequence in ``store.atomic()`` so a transfer or a posting is observed either
completely or not at all by other threads.
"""

import re
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional

from .currency import Currency
from .exceptions import AccountNotFoundError, CustomerNotFoundError
from .logging_config import get_logger
from .models import Account, Customer, Transaction, utc_now


class LedgerStore:
    """In-memory customers, accounts and history"""

    TRANSACTION_PREFIX = "TRN"
    _ID_PATTERN = re.compile(r"^TRN(\d+)$")

    def __init__(self, currency: Currency = Currency.TND):
        self.currency = currency
        self._customers: Dict[str, Customer] = {}
        self._accounts: Dict[str, Account] = {}
        self._history: Dict[str, List[Transaction]] = {}
        self._next_sequence = 1
        self._lock = threading.RLock()
        self.logger = get_logger("cbs.ledger")

    @contextmanager
    def atomic(self):
        """Exclusive section over the whole store"""
        with self._lock:
            yield

    # Seeding

    def add_customer(self, customer: Customer) -> None:
        with self._lock:
            if customer.id in self._customers:
                raise ValueError(f"Customer {customer.id} already exists")
            self._customers[customer.id] = customer

    def add_account(self, account: Account) -> None:
        with self._lock:
            if account.id in self._accounts:
                raise ValueError(f"Account {account.id} already exists")
            if account.customer_id not in self._customers:
                raise CustomerNotFoundError(account.customer_id)
            self._accounts[account.id] = account.snapshot()

    # Reads

    def get_customer(self, customer_id: str) -> Customer:
        """Get customer by ID or raise CustomerNotFoundError"""
        with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            return customer

    def find_account(self, account_id: str) -> Optional[Account]:
        """Get a snapshot of the account, or None"""
        with self._lock:
            account = self._accounts.get(account_id)
            return account.snapshot() if account else None

    def get_account(self, account_id: str) -> Account:
        """Get a snapshot of the account or raise AccountNotFoundError"""
        account = self.find_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def get_accounts_for_customer(self, customer_id: str) -> List[Account]:
        """Accounts owned by a customer, in account insertion order"""
        with self._lock:
            return [
                account.snapshot() for account in self._accounts.values()
                if account.customer_id == customer_id
            ]

    def get_history(self, account_id: str) -> List[Transaction]:
        """
        Transactions of an account in insertion order.

        An existing account without history yields an empty list; an
        unknown account raises AccountNotFoundError.
        """
        with self._lock:
            if account_id not in self._accounts:
                raise AccountNotFoundError(account_id)
            return list(self._history.get(account_id, []))

    def list_customers(self) -> List[Customer]:
        with self._lock:
            return list(self._customers.values())

    def list_accounts(self) -> List[Account]:
        with self._lock:
            return [account.snapshot() for account in self._accounts.values()]

    # Mutations

    def next_transaction_id(self) -> str:
        """Next token of the process-wide sequence (TRN012, TRN013, ...)"""
        with self._lock:
            sequence = self._next_sequence
            self._next_sequence += 1
        return f"{self.TRANSACTION_PREFIX}{sequence:03d}"

    def append_transaction(self, account_id: str, transaction: Transaction) -> None:
        """
        Append to an account's history without touching its balance.

        Used for seeding; live postings go through post(). Appending an id
        from the TRN sequence moves the counter above it.
        """
        with self._lock:
            if account_id not in self._accounts:
                raise AccountNotFoundError(account_id)
            self._history.setdefault(account_id, []).append(transaction)
            match = self._ID_PATTERN.match(transaction.id)
            if match:
                self._next_sequence = max(self._next_sequence, int(match.group(1)) + 1)

    def post(self, account_id: str, transaction: Transaction,
             at: Optional[datetime] = None) -> Account:
        """
        Apply a transaction's signed amount to the balance and append it to
        the history as one step.

        Returns:
            Snapshot of the updated account
        """
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            account.balance += transaction.amount
            account.updated_at = at or utc_now()
            self._history.setdefault(account_id, []).append(transaction)
            self.logger.debug(
                f"Posted {transaction.id} ({transaction.amount}) to {account_id}, "
                f"balance {account.balance}"
            )
            return account.snapshot()

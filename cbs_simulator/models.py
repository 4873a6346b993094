"""
Domain Models Module

Customers, accounts and transactions held by the ledger store, with their
wire representation. The JSON field names (prenom, montant, customerId...)
are the ones the gateway and the dashboard consume.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from .currency import Currency, to_number


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AccountType(Enum):
    """Account categories offered by the bank"""
    CHECKING = "Compte Courant"
    SAVINGS = "Compte Épargne"


class TransactionType(Enum):
    """Direction of a transaction"""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    @property
    def ledger_label(self) -> str:
        """Label used in account history for transfers and seeded entries"""
        return "CRÉDIT" if self is TransactionType.CREDIT else "DÉBIT"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionType.CREDIT else -1


@dataclass(frozen=True)
class Customer:
    """Customer profile. Never updated after seeding."""
    id: str
    first_name: str
    last_name: str
    address: str
    email: str
    phone: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "prenom": self.first_name,
            "nom": self.last_name,
            "adresse": self.address,
            "email": self.email,
            "telephone": self.phone,
        }


@dataclass
class Account:
    """
    Bank account. ``balance`` and ``updated_at`` are the only fields that
    change, and only through LedgerStore.post().
    """
    id: str
    customer_id: str
    account_type: AccountType
    iban: str
    balance: Decimal
    currency: Currency
    created_at: datetime
    updated_at: datetime

    def snapshot(self) -> 'Account':
        """Detached copy safe to hand out of the store"""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "type": self.account_type.value,
            "iban": self.iban,
            "balance": to_number(self.balance),
            "currency": self.currency.code,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True)
class Transaction:
    """
    One entry of an account's history.

    ``amount`` is signed: positive for credits, negative for debits.
    ``label`` is the wire ``type`` value.
    """
    id: str
    kind: TransactionType
    label: str
    date: datetime
    description: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.label,
            "date": format_timestamp(self.date),
            "description": self.description,
            "montant": to_number(self.amount),
        }

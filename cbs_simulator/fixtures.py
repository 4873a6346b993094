"""
Demo fixture data for the simulator

Four customers, six accounts and eleven historical transactions. Every
timestamp is computed as ``reference_now - offset`` from a single instant
captured once per seeding, so relative ages are identical on every start.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from .ledger import LedgerStore
from .logging_config import get_logger
from .models import Account, AccountType, Customer, Transaction, TransactionType, utc_now

logger = get_logger("cbs.fixtures")


CUSTOMERS = [
    # id, first name, last name, address, email, phone
    ("C001", "Mohamed", "Ben Ali", "12 Rue de Carthage, 2000 Le Bardo, Tunis",
     "mohamed.benali@email.tn", "+216 98 123 456"),
    ("C002", "Fatima", "El Fihri", "45 Avenue Habib Bourguiba, 4000 Sousse",
     "fatima.elfihri@email.tn", "+216 22 789 012"),
    ("C003", "Ali", "Trabelsi", "7 Avenue de Paris, 1000 Tunis",
     "ali.trabelsi@email.com", "+216 55 123 789"),
    ("C004", "Aisha", "Bouslama", "3 Rue El Marr, 3000 Sfax",
     "aisha.bouslama@email.com", "+216 21 987 654"),
]

ACCOUNTS = [
    # id, customer, type, IBAN, opening balance, age in days
    ("A001", "C001", AccountType.CHECKING, "TN59 1000 6035 0000 0123 4567 89", "15850.75", 365),
    ("A002", "C001", AccountType.SAVINGS, "TN59 1000 6035 0000 0789 0123 45", "125000.00", 730),
    ("A003", "C002", AccountType.CHECKING, "TN59 1400 3051 0000 0987 6543 21", "7230.50", 180),
    ("A004", "C003", AccountType.CHECKING, "TN59 1200 8091 0000 0543 2167 89", "21500.00", 90),
    ("A005", "C004", AccountType.CHECKING, "TN59 1100 7061 0000 0876 5432 10", "9800.25", 45),
    ("A006", "C004", AccountType.SAVINGS, "TN59 1100 7061 0000 0112 2334 45", "50000.00", 45),
]

HISTORY = [
    # account, id, type, age in days, description, signed amount
    ("A001", "TRN001", TransactionType.DEBIT, 5, "Paiement Facture STEG", "-120.50"),
    ("A001", "TRN002", TransactionType.DEBIT, 3, "Achat en ligne Jumia", "-345.00"),
    ("A001", "TRN003", TransactionType.CREDIT, 1, "Virement Salaire", "4500.00"),
    ("A002", "TRN004", TransactionType.CREDIT, 30, "Dépôt initial", "100000.00"),
    ("A002", "TRN005", TransactionType.CREDIT, 15, "Intérêts annuels", "2500.00"),
    ("A003", "TRN006", TransactionType.CREDIT, 10, 'Virement de "Ahmed"', "800.00"),
    ("A003", "TRN007", TransactionType.DEBIT, 2, "Retrait GAB", "-200.00"),
    ("A004", "TRN008", TransactionType.CREDIT, 20, "Virement international", "15000.00"),
    ("A004", "TRN009", TransactionType.DEBIT, 5, "Paiement restaurant", "-150.00"),
    ("A005", "TRN010", TransactionType.CREDIT, 12, "Dépôt chèque", "2000.00"),
    ("A006", "TRN011", TransactionType.CREDIT, 40, "Dépôt initial", "50000.00"),
]


def seed_store(store: LedgerStore, reference_now: Optional[datetime] = None) -> LedgerStore:
    """
    Load the demo fixtures into a store.

    Seeded history is appended as-is: account balances are the opening
    balances above, not recomputed from the history.

    Args:
        store: Empty ledger store
        reference_now: Instant all offsets are taken from (defaults to now)

    Returns:
        The same store, for chaining
    """
    now = reference_now or utc_now()

    for customer_id, first_name, last_name, address, email, phone in CUSTOMERS:
        store.add_customer(Customer(
            id=customer_id,
            first_name=first_name,
            last_name=last_name,
            address=address,
            email=email,
            phone=phone,
        ))

    for account_id, customer_id, account_type, iban, balance, age_days in ACCOUNTS:
        store.add_account(Account(
            id=account_id,
            customer_id=customer_id,
            account_type=account_type,
            iban=iban,
            balance=Decimal(balance),
            currency=store.currency,
            created_at=now - timedelta(days=age_days),
            updated_at=now,
        ))

    for account_id, transaction_id, kind, age_days, description, amount in HISTORY:
        store.append_transaction(account_id, Transaction(
            id=transaction_id,
            kind=kind,
            label=kind.ledger_label,
            date=now - timedelta(days=age_days),
            description=description,
            amount=Decimal(amount),
        ))

    logger.info(
        f"Seeded {len(CUSTOMERS)} customers, {len(ACCOUNTS)} accounts "
        f"and {len(HISTORY)} transactions"
    )
    return store


def create_seeded_store(reference_now: Optional[datetime] = None) -> LedgerStore:
    """Fresh store loaded with the demo fixtures"""
    return seed_store(LedgerStore(), reference_now)

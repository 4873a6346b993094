"""
Tests for the single-account posting engine
"""

from decimal import Decimal

import pytest

from cbs_simulator.exceptions import (
    AccountNotFoundError, InsufficientFundsError, InvalidTransactionTypeError,
    MissingFieldsError
)
from cbs_simulator.fixtures import create_seeded_store
from cbs_simulator.postings import PostingEngine


class TestPostingEngine:
    """Test credit and debit postings"""

    def setup_method(self):
        self.store = create_seeded_store()
        self.engine = PostingEngine(self.store)

    def test_debit(self):
        result = self.engine.post_transaction("A003", 200, "debit")

        assert result.account.balance == Decimal("7030.50")
        assert result.transaction.amount == Decimal("-200")
        history = self.store.get_history("A003")
        assert len(history) == 3
        assert history[-1].id == result.transaction.id == "TRN012"

        data = result.to_dict()
        assert data["message"] == "Transaction processed successfully"
        assert data["transaction"]["type"] == "DEBIT"
        assert data["transaction"]["description"] == "debit transaction"
        assert data["account"]["balance"] == 7030.5

    def test_credit_is_case_insensitive(self):
        result = self.engine.post_transaction("A005", "49.75", "CREDIT", "Versement")
        assert result.account.balance == Decimal("9850.00")
        assert result.transaction.label == "CREDIT"
        assert result.transaction.description == "Versement"

    def test_debit_insufficient_funds(self):
        with pytest.raises(InsufficientFundsError):
            self.engine.post_transaction("A003", 10000, "debit")
        assert self.store.get_account("A003").balance == Decimal("7230.50")

    def test_invalid_type(self):
        with pytest.raises(InvalidTransactionTypeError) as exc_info:
            self.engine.post_transaction("A003", 10, "refund")
        assert exc_info.value.to_payload() == {
            "error": "Invalid transaction type", "type": "refund",
            "allowed": ["credit", "debit"]
        }

    def test_missing_fields(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            self.engine.post_transaction("A003", 10, None)
        assert exc_info.value.to_payload() == {
            "error": "Missing required fields",
            "required": ["accountNumber", "amount", "type"]
        }

    def test_missing_account_reported_before_bad_amount(self):
        with pytest.raises(MissingFieldsError):
            self.engine.post_transaction(None, "abc", "credit")

    def test_amount_rounded_to_millimes(self):
        result = self.engine.post_transaction("A005", "0.0015", "credit")
        assert result.transaction.amount == Decimal("0.002")
        assert result.account.balance == Decimal("9800.252")

    def test_amount_below_one_millime_is_missing(self):
        with pytest.raises(MissingFieldsError):
            self.engine.post_transaction("A005", "0.0001", "credit")
        assert len(self.store.get_history("A005")) == 1

    def test_unknown_account(self):
        with pytest.raises(AccountNotFoundError) as exc_info:
            self.engine.post_transaction("Z999", 10, "credit")
        assert exc_info.value.to_payload() == {
            "error": "Account not found", "accountNumber": "Z999"
        }

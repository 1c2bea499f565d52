"""Tests for the canonical record model."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from netbank_export.exceptions import EncodingError
from netbank_export.models import (
    Account,
    AccountType,
    HistoryResult,
    Transaction,
    TransactionStatus,
    coerce_transactions,
)


class TestTransaction:
    """Tests for Transaction parsing and defaults."""

    def test_defaults(self) -> None:
        t = Transaction(date=date(2024, 1, 1), amount=Decimal("1.00"))

        assert t.description == ""
        assert t.balance is None
        assert t.status == TransactionStatus.POSTED
        assert t.id is None
        assert t.is_pending is False

    @pytest.mark.parametrize("raw, expected", [
        ("2024-01-05", date(2024, 1, 5)),
        ("05/01/2024", date(2024, 1, 5)),
        ("01/13/2024", date(2024, 1, 13)),
        ("2024/01/05", date(2024, 1, 5)),
        ("5 Jan 2024", date(2024, 1, 5)),
        ("Jan 05, 2024", date(2024, 1, 5)),
        (datetime(2024, 1, 5, 13, 45), date(2024, 1, 5)),
    ])
    def test_date_formats(self, raw, expected) -> None:
        assert Transaction(date=raw, amount=1).date == expected

    @pytest.mark.parametrize("raw, expected", [
        ("-12.50", Decimal("-12.50")),
        ("$1,234.56", Decimal("1234.56")),
        ("(12.50)", Decimal("-12.50")),
        (" 7 ", Decimal("7")),
        (12.5, Decimal("12.5")),
        (0.1, Decimal("0.1")),
        (-3, Decimal("-3")),
    ])
    def test_amount_formats(self, raw, expected) -> None:
        assert Transaction(date=date(2024, 1, 1), amount=raw).amount == expected

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", True, None])
    def test_invalid_amount(self, raw) -> None:
        with pytest.raises(ValidationError):
            Transaction(date=date(2024, 1, 1), amount=raw)

    @pytest.mark.parametrize("raw", ["31/02/2024", "yesterday", "", None])
    def test_invalid_date(self, raw) -> None:
        with pytest.raises(ValidationError):
            Transaction(date=raw, amount=1)

    def test_description_kept_verbatim(self) -> None:
        t = Transaction(date=date(2024, 1, 1), amount=1, description="  Transfer to  J SMITH\nRef 42 ")

        assert t.description == "Transfer to  J SMITH\nRef 42"

    @pytest.mark.parametrize("raw", ["1e30", Decimal("1E+15"), 10 ** 16, "-1000000000000000"])
    def test_amount_out_of_range(self, raw) -> None:
        with pytest.raises(ValidationError):
            Transaction(date=date(2024, 1, 1), amount=raw)

    def test_largest_amount(self) -> None:
        t = Transaction(date=date(2024, 1, 1), amount="999999999999999.99")

        assert t.amount == Decimal("999999999999999.99")

    def test_empty_balance_is_none(self) -> None:
        assert Transaction(date=date(2024, 1, 1), amount=1, balance="").balance is None

    def test_frozen(self) -> None:
        t = Transaction(date=date(2024, 1, 1), amount=1)

        with pytest.raises(ValidationError):
            t.amount = Decimal("2")


class TestAccount:
    """Tests for Account identifiers."""

    def test_bsb_prefixed_number(self, account: Account) -> None:
        assert account.routing_number == "062000"
        assert account.account_id == "12345678"

    def test_explicit_bsb(self) -> None:
        acc = Account(name="Savings", number="1234 5678", bsb="062-000", type=AccountType.SAVINGS)

        assert acc.routing_number == "062000"
        assert acc.account_id == "12345678"

    def test_card_number(self, credit_account: Account) -> None:
        assert credit_account.is_credit is True
        assert credit_account.routing_number == ""
        assert credit_account.account_id == "5218940012345678"

    def test_defaults(self) -> None:
        acc = Account(name="Other", number="999")

        assert acc.type == AccountType.OTHER
        assert acc.currency == "AUD"
        assert acc.balance is None
        assert acc.is_credit is False

    def test_balance_parsing(self) -> None:
        acc = Account(name="Other", number="999", balance="$1,000.10", available="")

        assert acc.balance == Decimal("1000.10")
        assert acc.available is None


class TestHistoryResult:
    """Tests for HistoryResult."""

    def test_tagged_pendings(self, history: HistoryResult) -> None:
        tagged = history.tagged_pendings()

        assert [t.status for t in tagged] == [TransactionStatus.PENDING] * 2
        assert [t.description for t in tagged] == ["Uber Trip", "Netflix"]
        # the retrieved records are left untouched
        assert all(t.status == TransactionStatus.POSTED for t in history.pendings)

    def test_empty(self) -> None:
        result = HistoryResult()

        assert result.transactions == []
        assert result.tagged_pendings() == []


class TestCoerceTransactions:
    """Tests for coerce_transactions."""

    def test_mixed_input(self, transactions) -> None:
        raw = {"date": "06/02/2024", "amount": "-1.00", "description": "ATM fee", "status": "Pending"}

        result = coerce_transactions([transactions[0], raw])

        assert result[0] is transactions[0]
        assert result[1].date == date(2024, 2, 6)
        assert result[1].is_pending is True

    def test_invalid_record_fails_batch(self) -> None:
        good = {"date": "2024-01-01", "amount": "1.00"}
        bad = {"date": "not a date", "amount": "1.00"}

        with pytest.raises(EncodingError, match="#1"):
            coerce_transactions([good, bad])

    def test_huge_amount_is_encoding_error(self) -> None:
        with pytest.raises(EncodingError, match="#0"):
            coerce_transactions([{"date": "2024-01-01", "amount": "1e30"}])

    def test_missing_amount(self) -> None:
        with pytest.raises(EncodingError):
            coerce_transactions([{"date": "2024-01-01"}])

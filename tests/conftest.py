"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

import pytest

from netbank_export.models import Account, AccountType, HistoryResult, Transaction
from netbank_export.session import NetbankSession


class FakeSession(NetbankSession):
    """In-memory session returning canned accounts and history."""

    def __init__(self, accounts: List[Account], history: HistoryResult):
        self.accounts = accounts
        self.history = history
        self.calls = []

    def logon(self, username: str, password: str) -> List[Account]:
        self.calls.append(("logon", username, password))
        return self.accounts

    def download_history(self, account: Account, from_date: Optional[date] = None,
                         to_date: Optional[date] = None) -> HistoryResult:
        self.calls.append(("download_history", account.number, from_date, to_date))
        return self.history


@pytest.fixture
def account() -> Account:
    """Everyday account with a BSB-prefixed number."""
    return Account(
        name="Smart Access",
        number="062000 12345678",
        type=AccountType.CHECKING,
        balance=Decimal("2475.30"),
        available=Decimal("2400.00"),
    )


@pytest.fixture
def credit_account() -> Account:
    """Credit card account."""
    return Account(
        name="MasterCard Platinum",
        number="5218 9400 1234 5678",
        type=AccountType.CREDIT_CARD,
        balance=Decimal("-310.15"),
    )


@pytest.fixture
def transactions() -> List[Transaction]:
    """Three posted transactions, oldest first."""
    return [
        Transaction(date=date(2024, 1, 5), amount="-12.50",
                    description='Woolworths, Sydney "Metro"', balance="987.50"),
        Transaction(date=date(2024, 1, 20), amount=1500, description="Salary ACME", balance="2487.50"),
        Transaction(date=date(2024, 2, 3), amount="-4.2", description="Coffee & Co <Surry Hills>"),
    ]


@pytest.fixture
def pendings() -> List[Transaction]:
    """Two pending transactions as retrieved (not yet tagged)."""
    return [
        Transaction(date=date(2024, 2, 28), amount="-30.00", description="Uber Trip"),
        Transaction(date=date(2024, 2, 27), amount="-8.95", description="Netflix"),
    ]


@pytest.fixture
def history(transactions: List[Transaction], pendings: List[Transaction]) -> HistoryResult:
    return HistoryResult(transactions=transactions, pendings=pendings)


@pytest.fixture
def fake_session(account: Account, credit_account: Account, history: HistoryResult) -> FakeSession:
    return FakeSession([account, credit_account], history)

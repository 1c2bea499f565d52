"""Plain-text rendering of accounts for the command line."""
from typing import List

import pandas as pd

from .models import Account
from .utils import TransactionNormalizer

ACCOUNT_COLUMNS = ['Name', 'Number', 'Type', 'Balance', 'Available']


def _account_row(account: Account) -> dict:
    return {
        'Name': account.name,
        'Number': account.number,
        'Type': account.type.value,
        'Balance': TransactionNormalizer.format_amount(account.balance),
        'Available': TransactionNormalizer.format_amount(account.available),
    }


def render_accounts(accounts: List[Account]) -> str:
    """Render accounts as an aligned text table."""
    if not accounts:
        return "No accounts found."
    df = pd.DataFrame([_account_row(a) for a in accounts], columns=ACCOUNT_COLUMNS)
    return df.to_string(index=False)


def render_account(account: Account) -> str:
    balance = TransactionNormalizer.format_amount(account.balance) or 'n/a'
    return f"{account.name} ({account.number}) [{account.type.value}] balance: {balance} {account.currency}"

"""
Export orchestration.

Ties the pieces together for one export call: pick the account, choose posted
or pending transactions, resolve the output file name, encode the whole
payload, and only then write it out.
"""
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from .exceptions import AccountNotFoundError, WriteError
from .formats import ExportFormat, OutputDescriptor
from .models import Account, HistoryResult, Transaction
from .serializer import encode
from .templating import DEFAULT_TEMPLATE, resolve

logger = logging.getLogger(__name__)


def find_account(accounts: Sequence[Account], pattern: str) -> Account:
    """
    Return the first account whose name contains `pattern` (case-insensitive)
    or whose number contains it.
    """
    needle = pattern.lower()
    for account in accounts:
        if needle in account.name.lower() or pattern in account.number:
            return account
    raise AccountNotFoundError(pattern)


def default_date_range(today: date, months: int) -> Tuple[date, date]:
    """`months` calendar months back from `today`, through `today`."""
    start = (pd.Timestamp(today) - pd.DateOffset(months=months)).date()
    return start, today


def _transaction_span(transactions: List[Transaction], today: date) -> Tuple[date, date]:
    if not transactions:
        return today, today
    dates = [t.date for t in transactions]
    return min(dates), max(dates)


def build_export(history: HistoryResult, account: Account, fmt: ExportFormat,
                 template: str = DEFAULT_TEMPLATE, from_date: Optional[date] = None,
                 to_date: Optional[date] = None, pending: bool = False,
                 today: Optional[date] = None) -> Tuple[OutputDescriptor, str]:
    """
    Encode one export and resolve where it goes.

    Posted exports use `history.transactions`; pending exports use the tagged
    pendings. A pending export with no range leaves the date tokens of the
    template alone and gives the encoder the span of the transaction dates.
    """
    fmt = ExportFormat.parse(fmt) if not isinstance(fmt, ExportFormat) else fmt
    today = today or date.today()

    if pending:
        transactions = history.tagged_pendings()
    else:
        transactions = list(history.transactions)

    filename = resolve(template, account, from_date, to_date, fmt)

    if from_date is None or to_date is None:
        span_start, span_end = _transaction_span(transactions, today)
        from_date = from_date or span_start
        to_date = to_date or span_end

    payload = encode(fmt, transactions, account, from_date, to_date)
    logger.info(f"Encoded {len(transactions)} {'pending' if pending else 'posted'} transactions as {fmt.value}")
    return OutputDescriptor(format=fmt, filename=Path(filename)), payload


def write_export(descriptor: OutputDescriptor, payload: str) -> Path:
    """Write an encoded payload, replacing any existing file."""
    try:
        with open(descriptor.filename, 'w', encoding='utf-8', newline='') as f:
            f.write(payload)
    except OSError as e:
        raise WriteError(f"Cannot write {descriptor.filename}: {e}") from e
    logger.info(f"Saved {descriptor.format.value} export to {descriptor.filename}")
    return descriptor.filename

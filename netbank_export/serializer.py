"""
Transaction serializers.

Every encoder here is a pure function: it takes transactions (and whatever
account metadata the format needs) and returns the complete file content as a
string. Nothing is written to disk and nothing is returned until every record
has been encoded, so a bad record fails the export as a whole.

Formats:
- csv: header row plus one row per transaction.
- qif: Quicken Interchange Format, with generic/US/AUS date ordering.
- ofx: Open Financial Exchange (see `ofx.py`).
- json: plain JSON array of the canonical records.
"""
import csv as _csv
import io
import json
import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from .exceptions import UnsupportedFormatError
from .formats import ExportFormat, QifRegion
from .models import Account, AccountType, Transaction, TransactionLike, coerce_transactions
from .ofx import ofx
from .utils import TransactionNormalizer

logger = logging.getLogger(__name__)

CSV_FIELDS = ['Date', 'Description', 'Amount', 'Balance', 'Status']

QIF_DATE_FORMATS = {
    None: '%Y-%m-%d',
    QifRegion.US: '%m/%d/%Y',
    QifRegion.AUS: '%d/%m/%Y',
}


def csv(transactions: Iterable[TransactionLike]) -> str:
    """
    Serialize transactions to CSV.

    Columns are fixed (CSV_FIELDS). Dates are ISO 8601, amounts are plain
    two-decimal strings, and a missing balance is an empty cell.
    """
    records = coerce_transactions(transactions)

    buffer = io.StringIO()
    writer = _csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator='\n')
    writer.writeheader()
    for t in records:
        writer.writerow({
            'Date': t.date.isoformat(),
            'Description': t.description,
            'Amount': TransactionNormalizer.format_amount(t.amount),
            'Balance': TransactionNormalizer.format_amount(t.balance),
            'Status': t.status.value,
        })

    logger.debug(f"Serialized {len(records)} transactions to CSV")
    return buffer.getvalue()


def qif(transactions: Iterable[TransactionLike], region: Optional[QifRegion] = None,
        account: Optional[Account] = None) -> str:
    """
    Serialize transactions to QIF.

    The file starts with a single `!Type:` header (`CCard` for credit card
    accounts, `Bank` otherwise) followed by one `^`-terminated block per
    transaction. `region` only changes how the `D` line orders day, month and
    year. Descriptions are flattened onto one line since QIF is line-oriented.
    Posted transactions are marked cleared (`C*`); pending ones carry no `C`
    line so importers treat them as uncleared.
    """
    if region is not None:
        try:
            region = QifRegion(region)
        except ValueError:
            raise UnsupportedFormatError(f"{region}.qif") from None
    records = coerce_transactions(transactions)
    date_format = QIF_DATE_FORMATS[region]

    account_type = 'CCard' if account is not None and account.type == AccountType.CREDIT_CARD else 'Bank'
    lines = [f'!Type:{account_type}']
    for t in records:
        lines.append(f'D{t.date.strftime(date_format)}')
        lines.append(f'T{TransactionNormalizer.format_amount(t.amount)}')
        description = TransactionNormalizer.clean_description(t.description)
        if description:
            lines.append(f'P{description}')
            lines.append(f'M{description}')
        if not t.is_pending:
            lines.append('C*')
        lines.append('^')

    logger.debug(f"Serialized {len(records)} transactions to QIF (region={region})")
    return '\n'.join(lines) + '\n'


def to_json(transactions: Iterable[TransactionLike]) -> str:
    """Plain JSON array of the transactions."""
    records = coerce_transactions(transactions)
    payload = [
        {
            'date': t.date.isoformat(),
            'description': t.description,
            'amount': TransactionNormalizer.format_amount(t.amount),
            'balance': TransactionNormalizer.format_amount(t.balance) or None,
            'status': t.status.value,
            'id': t.id,
        }
        for t in records
    ]
    return json.dumps(payload, indent=2)


Encoder = Callable[[ExportFormat, List[Transaction], Account, date, date], str]


def _encode_qif(fmt: ExportFormat, txns: List[Transaction], account: Account, start: date, end: date) -> str:
    return qif(txns, fmt.region, account)


ENCODERS: Dict[ExportFormat, Encoder] = {
    ExportFormat.JSON: lambda fmt, txns, account, start, end: to_json(txns),
    ExportFormat.CSV: lambda fmt, txns, account, start, end: csv(txns),
    ExportFormat.QIF: _encode_qif,
    ExportFormat.AUS_QIF: _encode_qif,
    ExportFormat.US_QIF: _encode_qif,
    ExportFormat.OFX: lambda fmt, txns, account, start, end: ofx(txns, account, start, end),
}


def encode(fmt: ExportFormat, transactions: Iterable[TransactionLike], account: Account,
           from_date: date, to_date: date) -> str:
    """Encode `transactions` in the given format."""
    fmt = ExportFormat.parse(fmt) if not isinstance(fmt, ExportFormat) else fmt
    records = coerce_transactions(transactions)
    return ENCODERS[fmt](fmt, records, account, from_date, to_date)

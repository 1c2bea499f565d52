"""
OFX (Open Financial Exchange) serializer.

Produces an OFX 1.0.2 SGML document for one account: a fixed header, a
sign-on block that always reports success (this is an offline export, not a
live bank response), a statement with the transaction list, and a ledger
balance. Leaf elements are left unterminated as SGML allows; aggregates are
closed. The header declares UTF-8, which is how the exporter writes every file.

Output is a pure function of its arguments. The server date and balance date
are pinned to `to_date`, and transaction ids are derived from each
transaction's date, amount and description, so exporting the same data twice
gives byte-identical files.
"""
import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Iterable, List

from .exceptions import EncodingError
from .models import Account, AccountType, Transaction, TransactionLike, coerce_transactions
from .utils import TransactionNormalizer

logger = logging.getLogger(__name__)

OFX_HEADER = [
    'OFXHEADER:100',
    'DATA:OFXSGML',
    'VERSION:102',
    'SECURITY:NONE',
    'ENCODING:UTF-8',
    'CHARSET:NONE',
    'COMPRESSION:NONE',
    'OLDFILEUID:NONE',
    'NEWFILEUID:NONE',
]

# Midnight UTC; the bank only reports calendar dates.
OFX_TIME_SUFFIX = '000000[0:GMT]'

NAME_MAX_LENGTH = 32
MEMO_MAX_LENGTH = 255

ACCOUNT_TYPES = {
    AccountType.CHECKING: 'CHECKING',
    AccountType.SAVINGS: 'SAVINGS',
    AccountType.LOAN: 'CREDITLINE',
}


def ofx_datetime(value: date) -> str:
    return value.strftime('%Y%m%d') + OFX_TIME_SUFFIX


def escape(text: str) -> str:
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def transaction_ids(transactions: List[Transaction]) -> List[str]:
    """
    FITIDs for each transaction, in order.

    Repeats of an identical (date, amount, description) tuple get an occurrence
    counter mixed in, so genuinely duplicated purchases are not deduplicated
    away by the importing application.
    """
    seen = Counter()
    ids = []
    for t in transactions:
        key = (t.date, TransactionNormalizer.format_amount(t.amount), t.description)
        ids.append(TransactionNormalizer.generate_transaction_id(t.date, t.amount, t.description, seen[key]))
        seen[key] += 1
    return ids


def _statement_transaction(t: Transaction, fitid: str) -> List[str]:
    lines = [
        '<STMTTRN>',
        f'<TRNTYPE>{"DEBIT" if t.amount < 0 else "CREDIT"}',
        f'<DTPOSTED>{ofx_datetime(t.date)}',
        f'<TRNAMT>{TransactionNormalizer.format_amount(t.amount)}',
        f'<FITID>{fitid}',
    ]
    description = TransactionNormalizer.clean_description(t.description)
    if description:
        lines.append(f'<NAME>{escape(description[:NAME_MAX_LENGTH])}')
        lines.append(f'<MEMO>{escape(description[:MEMO_MAX_LENGTH])}')
    lines.append('</STMTTRN>')
    return lines


def _ledger_balance(account: Account, transactions: List[Transaction]) -> Decimal:
    if account.balance is not None:
        return account.balance
    for t in reversed(transactions):
        if t.balance is not None:
            return t.balance
    return Decimal('0')


def ofx(transactions: Iterable[TransactionLike], account: Account, from_date: date, to_date: date) -> str:
    """
    Serialize transactions for `account` to an OFX document.

    Credit card accounts are written as a credit card statement
    (CREDITCARDMSGSRSV1/CCSTMTRS); everything else as a bank statement.
    """
    records = coerce_transactions(transactions)
    try:
        from_date = TransactionNormalizer.parse_date(from_date)
        to_date = TransactionNormalizer.parse_date(to_date)
    except ValueError as e:
        raise EncodingError(f"Invalid statement range: {e}") from e
    server_date = ofx_datetime(to_date)

    if account.is_credit:
        msgs, trnrs, stmtrs = 'CREDITCARDMSGSRSV1', 'CCSTMTTRNRS', 'CCSTMTRS'
        account_from = [
            '<CCACCTFROM>',
            f'<ACCTID>{escape(account.account_id)}',
            '</CCACCTFROM>',
        ]
    else:
        msgs, trnrs, stmtrs = 'BANKMSGSRSV1', 'STMTTRNRS', 'STMTRS'
        account_from = [
            '<BANKACCTFROM>',
            f'<BANKID>{escape(account.routing_number)}',
            f'<ACCTID>{escape(account.account_id)}',
            f'<ACCTTYPE>{ACCOUNT_TYPES.get(account.type, "CHECKING")}',
            '</BANKACCTFROM>',
        ]

    lines = list(OFX_HEADER)
    lines.append('')
    lines += [
        '<OFX>',
        '<SIGNONMSGSRSV1>',
        '<SONRS>',
        '<STATUS>',
        '<CODE>0',
        '<SEVERITY>INFO',
        '</STATUS>',
        f'<DTSERVER>{server_date}',
        '<LANGUAGE>ENG',
        '</SONRS>',
        '</SIGNONMSGSRSV1>',
        f'<{msgs}>',
        f'<{trnrs}>',
        '<TRNUID>0',
        '<STATUS>',
        '<CODE>0',
        '<SEVERITY>INFO',
        '</STATUS>',
        f'<{stmtrs}>',
        f'<CURDEF>{escape(account.currency)}',
    ]
    lines += account_from
    lines += [
        '<BANKTRANLIST>',
        f'<DTSTART>{ofx_datetime(from_date)}',
        f'<DTEND>{ofx_datetime(to_date)}',
    ]
    for t, fitid in zip(records, transaction_ids(records)):
        lines += _statement_transaction(t, fitid)
    lines += [
        '</BANKTRANLIST>',
        '<LEDGERBAL>',
        f'<BALAMT>{TransactionNormalizer.format_amount(_ledger_balance(account, records))}',
        f'<DTASOF>{server_date}',
        '</LEDGERBAL>',
        f'</{stmtrs}>',
        f'</{trnrs}>',
        f'</{msgs}>',
        '</OFX>',
    ]

    logger.debug(f"Serialized {len(records)} transactions to OFX for account {account.number}")
    return '\n'.join(lines) + '\n'

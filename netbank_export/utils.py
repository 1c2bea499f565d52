import re
import hashlib
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CENTS = Decimal("0.01")

# Whole-number digits allowed in an amount; keeps two-decimal display within Decimal precision.
MAX_AMOUNT_DIGITS = 15

# Tried in order; day-first wins for ambiguous dates since the bank is Australian.
DATE_FORMATS = ['%Y-%m-%d', '%d/%m/%Y', '%m/%d/%Y', '%Y/%m/%d', '%b %d, %Y', '%d %b %Y', '%d %B %Y']


class TransactionNormalizer:
    """
    Utility class for standardizing transaction data.

    The session collaborator hands over whatever the banking site rendered:
    dates in a handful of layouts, amounts with currency symbols and thousands
    separators. These static methods turn those into `date` and `Decimal`
    values and back into the text tokens the export formats need.
    """

    @staticmethod
    def clean_description(description: str) -> str:
        """Collapse runs of whitespace (including newlines) into single spaces."""
        if not description:
            return ""
        return re.sub(r'\s+', ' ', str(description)).strip()

    @staticmethod
    def parse_date(value: Any) -> date:
        """
        Convert a scraped date value into a calendar date.

        Accepts `date`, `datetime` (pandas timestamps included), or a string in one of
        DATE_FORMATS. Raises ValueError when nothing matches so that a bad record
        fails the export instead of being skipped.
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Unrecognised date: {value!r}")

        text = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        raise ValueError(f"Unrecognised date: {value!r}")

    @staticmethod
    def parse_amount(value: Any) -> Decimal:
        """
        Convert a scraped amount into a Decimal, preserving its sign.

        Floats go through `str()` first so binary rounding never reaches the
        output. Strings may carry a `$`, thousands separators, or accounting
        style parentheses for negatives. Amounts of 10**15 or more are rejected.
        """
        if isinstance(value, bool):
            raise ValueError(f"Unrecognised amount: {value!r}")
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            text = value.strip().replace('$', '').replace(',', '').replace(' ', '')
            negative = text.startswith('(') and text.endswith(')')
            if negative:
                text = text[1:-1]
            try:
                amount = Decimal(text)
            except InvalidOperation:
                raise ValueError(f"Unrecognised amount: {value!r}") from None
            if negative:
                amount = -amount
        else:
            raise ValueError(f"Unrecognised amount: {value!r}")

        if not amount.is_finite():
            raise ValueError(f"Unrecognised amount: {value!r}")
        if amount and amount.adjusted() >= MAX_AMOUNT_DIGITS:
            raise ValueError(f"Amount out of range: {value!r}")
        return amount

    @staticmethod
    def format_amount(amount: Optional[Decimal]) -> str:
        """Plain two-decimal string, sign kept, no symbol or separators. None gives ''."""
        if amount is None:
            return ""
        return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))

    @staticmethod
    def sortable_date(value: date) -> str:
        """YYYYMMDD, used in file names."""
        return value.strftime('%Y%m%d')

    @staticmethod
    def generate_transaction_id(date_value: date, amount: Decimal, description: str, occurrence: int = 0) -> str:
        """
        Generate a deterministic unique ID for a transaction.

        MD5 of `date|amount|description`. Identical transactions on the same day
        would collide, so callers pass the running count of earlier identical
        tuples as `occurrence`, which is appended for every repeat after the first.
        """
        raw_str = f"{date_value.isoformat()}|{TransactionNormalizer.format_amount(amount)}|{description}"
        if occurrence:
            raw_str = f"{raw_str}|{occurrence}"
        return hashlib.md5(raw_str.encode('utf-8')).hexdigest()

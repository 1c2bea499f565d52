"""
Output filename templating.

A template is a plain string that may contain any of the tokens in TOKENS.
Each token is substituted in a single pass over the template, so text coming
from the substituted values (e.g. an account name that itself contains
"<to>") is never substituted again. Tokens missing from the template are
ignored, and when no date is given the date tokens stay as written.
"""
import re
from datetime import date
from typing import Dict, Optional

from .models import Account
from .formats import ExportFormat
from .utils import TransactionNormalizer

TAG_NAME = '<name>'
TAG_NUMBER = '<number>'
TAG_FROM = '<from>'
TAG_TO = '<to>'
TAG_EXT = '<ext>'

TOKENS = (TAG_NAME, TAG_NUMBER, TAG_FROM, TAG_TO, TAG_EXT)

DEFAULT_TEMPLATE = f'[{TAG_NAME}]({TAG_NUMBER}) [{TAG_FROM} to {TAG_TO}].{TAG_EXT}'

_TOKEN_PATTERN = re.compile('|'.join(re.escape(t) for t in TOKENS))


def resolve(template: str, account: Account, from_date: Optional[date] = None,
            to_date: Optional[date] = None, fmt: str = ExportFormat.JSON.value) -> str:
    """
    Substitute the tokens in `template` and return the resulting file name.

    Dates render as YYYYMMDD so exported files sort chronologically.
    """
    values: Dict[str, str] = {
        TAG_NAME: account.name,
        TAG_NUMBER: account.number,
        TAG_EXT: fmt.extension if isinstance(fmt, ExportFormat) else str(fmt),
    }
    if from_date is not None:
        values[TAG_FROM] = TransactionNormalizer.sortable_date(from_date)
    if to_date is not None:
        values[TAG_TO] = TransactionNormalizer.sortable_date(to_date)

    return _TOKEN_PATTERN.sub(lambda m: values.get(m.group(0), m.group(0)), template)

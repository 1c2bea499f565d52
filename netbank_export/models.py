"""
Data Models for Netbank Export

This module defines the canonical, format-agnostic records that every encoder
consumes. The session collaborator builds them from whatever the banking site
returned; after construction they are read-only.

Key Classes:
- AccountType: Enum for account classifications.
- TransactionStatus: Posted vs. Pending.
- Account: A bank account or credit card.
- Transaction: A single posted or pending transaction.
- HistoryResult: The posted and pending transactions retrieved for one account.
"""
import re
import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import EncodingError
from .utils import TransactionNormalizer


class AccountType(str, Enum):
    CHECKING = "Checking"
    SAVINGS = "Savings"
    CREDIT_CARD = "Credit Card"
    LOAN = "Loan"
    INVESTMENT = "Investment"
    OTHER = "Other"


class TransactionStatus(str, Enum):
    POSTED = "Posted"
    PENDING = "Pending"


class Account(BaseModel):
    """
    Represents a bank account or credit card.

    `number` is kept exactly as the bank displays it. It is used both for
    matching the account on the command line and as the account identifier
    in OFX exports.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    number: str
    type: AccountType = AccountType.OTHER
    balance: Optional[Decimal] = None
    available: Optional[Decimal] = None
    currency: str = "AUD"
    bsb: Optional[str] = None

    @field_validator('balance', 'available', mode='before')
    @classmethod
    def _parse_balance(cls, value: Any) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        return TransactionNormalizer.parse_amount(value)

    @property
    def is_credit(self) -> bool:
        return self.type == AccountType.CREDIT_CARD

    @property
    def routing_number(self) -> str:
        """
        Branch (BSB) code for the account.

        Uses the explicit `bsb` when set, otherwise the leading group of a
        number shaped like "062000 12345678". Empty when neither is available.
        """
        if self.bsb:
            return re.sub(r'\D', '', self.bsb)
        parts = self.number.split()
        if len(parts) > 1 and re.fullmatch(r'\d{6}', parts[0]):
            return parts[0]
        return ""

    @property
    def account_id(self) -> str:
        """Account number without the routing group or whitespace."""
        parts = self.number.split()
        if not self.bsb and len(parts) > 1 and re.fullmatch(r'\d{6}', parts[0]):
            parts = parts[1:]
        return "".join(parts)


class Transaction(BaseModel):
    """
    Represents a single financial transaction.

    `amount` is signed (negative is a debit) and is never rounded here; the
    encoders only round for two-decimal display. `description` keeps the text
    the bank supplied, internal whitespace and line breaks included; only the
    line-oriented formats flatten it. Pending transactions have no
    bank-provided `id`.
    """
    model_config = ConfigDict(frozen=True)

    date: datetime.date
    amount: Decimal
    description: str = ""
    balance: Optional[Decimal] = None
    status: TransactionStatus = TransactionStatus.POSTED
    id: Optional[str] = None

    @field_validator('date', mode='before')
    @classmethod
    def _parse_date(cls, value: Any) -> datetime.date:
        return TransactionNormalizer.parse_date(value)

    @field_validator('amount', mode='before')
    @classmethod
    def _parse_amount(cls, value: Any) -> Decimal:
        return TransactionNormalizer.parse_amount(value)

    @field_validator('balance', mode='before')
    @classmethod
    def _parse_balance(cls, value: Any) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        return TransactionNormalizer.parse_amount(value)

    @field_validator('description', mode='before')
    @classmethod
    def _strip_description(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING


class HistoryResult(BaseModel):
    """Posted and pending transactions for one account, kept apart."""
    model_config = ConfigDict(frozen=True)

    transactions: List[Transaction] = Field(default_factory=list)
    pendings: List[Transaction] = Field(default_factory=list)

    def tagged_pendings(self) -> List[Transaction]:
        """Pending transactions stamped with status Pending, ready to encode."""
        return [t.model_copy(update={'status': TransactionStatus.PENDING}) for t in self.pendings]


TransactionLike = Union[Transaction, Mapping[str, Any]]


def coerce_transactions(items: Iterable[TransactionLike]) -> List[Transaction]:
    """
    Return `items` as Transaction objects, validating any raw mappings.

    A record that fails validation raises EncodingError for the whole batch.
    """
    result = []
    for index, item in enumerate(items):
        if isinstance(item, Transaction):
            result.append(item)
            continue
        try:
            result.append(Transaction.model_validate(item))
        except ValidationError as e:
            raise EncodingError(f"Transaction #{index} is invalid: {e}") from e
    return result

"""
netbank_export package.

Offline serializers that turn a bank customer's accounts and transactions,
as retrieved by a `NetbankSession`, into CSV, QIF (generic, US and AUS date
ordering), OFX or JSON files, plus the output filename templating and the
export orchestration used by the command line.
"""
from .models import Account, AccountType, HistoryResult, Transaction, TransactionStatus
from .formats import ExportFormat, OutputDescriptor, QifRegion
from .exceptions import (
    AccountNotFoundError,
    EncodingError,
    NetbankExportError,
    SessionError,
    UnsupportedFormatError,
    WriteError,
)
from .serializer import csv, encode, qif, to_json
from .ofx import ofx
from .templating import resolve
from .exporter import build_export, find_account, write_export
from .session import NetbankSession
from .config import Config

__all__ = [
    "Account",
    "AccountType",
    "HistoryResult",
    "Transaction",
    "TransactionStatus",
    "ExportFormat",
    "OutputDescriptor",
    "QifRegion",
    "AccountNotFoundError",
    "EncodingError",
    "NetbankExportError",
    "SessionError",
    "UnsupportedFormatError",
    "WriteError",
    "csv",
    "encode",
    "qif",
    "to_json",
    "ofx",
    "resolve",
    "build_export",
    "find_account",
    "write_export",
    "NetbankSession",
    "Config",
]

"""Exception hierarchy for netbank-export."""


class NetbankExportError(Exception):
    """Base exception for all netbank-export errors."""


class AccountNotFoundError(NetbankExportError):
    """Raised when no account matches the requested name or number pattern."""

    def __init__(self, pattern: str):
        super().__init__(f"Cannot find account matching pattern '{pattern}'")
        self.pattern = pattern


class UnsupportedFormatError(NetbankExportError):
    """Raised when an output format name is outside the supported set."""

    def __init__(self, name: str):
        super().__init__(f"Unsupported output format '{name}'")
        self.name = name


class EncodingError(NetbankExportError):
    """Raised when a transaction cannot be encoded. The whole export fails."""


class WriteError(NetbankExportError):
    """Raised when an encoded export cannot be written to disk."""


class SessionError(NetbankExportError):
    """Raised when the banking session collaborator is missing or fails."""

"""
Output format selection.

`ExportFormat` is the closed set of formats the exporter can produce. The QIF
variants differ only in date ordering, which `region` exposes so the QIF
encoder never has to look at the format name.
"""
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .exceptions import UnsupportedFormatError


class QifRegion(str, Enum):
    US = "us"
    AUS = "aus"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    QIF = "qif"
    AUS_QIF = "aus.qif"
    US_QIF = "us.qif"
    OFX = "ofx"

    @classmethod
    def parse(cls, name: str) -> "ExportFormat":
        """Case-insensitive lookup; anything outside the set is rejected."""
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(name) from None

    @classmethod
    def names(cls):
        return [f.value for f in cls]

    @property
    def region(self) -> Optional[QifRegion]:
        return {
            ExportFormat.AUS_QIF: QifRegion.AUS,
            ExportFormat.US_QIF: QifRegion.US,
        }.get(self)

    @property
    def extension(self) -> str:
        return self.value


class OutputDescriptor(BaseModel):
    """The format chosen for one export call and the file it will be written to."""
    model_config = ConfigDict(frozen=True)

    format: ExportFormat
    filename: Path

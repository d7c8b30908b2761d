"""
Domain entity for one trading day of price history.
Zero external dependencies: pure Python dataclass only.

HistoryEntry.from_cells() owns the field-level parsing rules; the HTML adapter
(infrastructure/html/row_parser.py) only pulls the seven cell texts out of a row.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from quote_history.domain.errors import InvalidDate, InvalidNumber, MalformedRow

CSV_HEADER = ("Date", "Open", "High", "Low", "Close", "Adj Close", "Volume")

# "Jan 5, 2021"; strptime's %d accepts the day without a leading zero.
DATE_FORMAT = "%b %d, %Y"

_VOLUME_PATTERN = re.compile(r"\d+", re.ASCII)
_PRICE_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)


def format_number(value: float) -> str:
    """Render a float in plain decimal form: 100.0 -> '100', 1e-07 -> '0.0000001'."""
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _parse_date(text: str) -> date:
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDate(f"invalid date {text!r}: {exc}") from exc


def _parse_price(name: str, text: str) -> float:
    if not _PRICE_PATTERN.fullmatch(text):
        raise InvalidNumber(f"invalid {name} {text!r}")
    try:
        return float(text)
    except ValueError as exc:
        raise InvalidNumber(f"invalid {name} {text!r}") from exc


def _parse_volume(text: str) -> int:
    digits = text.replace(",", "")
    if not _VOLUME_PATTERN.fullmatch(digits):
        raise InvalidNumber(f"invalid volume {text!r}")
    return int(digits)


@dataclass(frozen=True)
class HistoryEntry:
    date: date
    open: float
    high: float
    low: float
    close: float
    adj_close: float
    volume: int

    @classmethod
    def from_cells(cls, cells: Sequence[str]) -> "HistoryEntry":
        """Build an entry from the seven cell texts of a history-table row.

        Cells are expected in page order: date, open, high, low, close,
        adjusted close, volume. The row is accepted or rejected as a whole.

        Raises:
            MalformedRow:  if there are not exactly seven cells.
            InvalidDate:   if the date cell does not match DATE_FORMAT.
            InvalidNumber: if a price or the volume cell does not parse.
        """
        if len(cells) != len(CSV_HEADER):
            raise MalformedRow(
                f"expected {len(CSV_HEADER)} cells, got {len(cells)}"
            )
        date_text, open_, high, low, close, adj_close, volume = (
            cell.strip() for cell in cells
        )
        return cls(
            date=_parse_date(date_text),
            open=_parse_price("open", open_),
            high=_parse_price("high", high),
            low=_parse_price("low", low),
            close=_parse_price("close", close),
            adj_close=_parse_price("adj close", adj_close),
            volume=_parse_volume(volume),
        )

    def to_csv_fields(self) -> list[str]:
        return [
            self.date.isoformat(),
            format_number(self.open),
            format_number(self.high),
            format_number(self.low),
            format_number(self.close),
            format_number(self.adj_close),
            str(self.volume),
        ]

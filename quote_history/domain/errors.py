"""
Domain exceptions for the quote history pipeline.
Zero external dependencies.

Adapters translate library exceptions (httpx, OSError, ...) into these types at
their boundary so the application layer only ever handles QuoteHistoryError.
"""

from pathlib import Path


class QuoteHistoryError(Exception):
    """Base class for every expected failure of a symbol's pipeline."""


class FetchError(QuoteHistoryError):
    """Transport failure, DNS/connection failure, or non-success HTTP status."""

    def __init__(self, symbol: str, detail: str) -> None:
        super().__init__(f"failed to fetch history page for {symbol!r}: {detail}")
        self.symbol = symbol
        self.detail = detail


class OutputError(QuoteHistoryError):
    """The output directory or a symbol's CSV file could not be created or written."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"cannot write {str(path)!r}: {detail}")
        self.path = path
        self.detail = detail


class EmptyHistoryError(QuoteHistoryError):
    """No row of the history table could be parsed."""

    def __init__(self, symbol: str) -> None:
        super().__init__(
            f"no history rows extracted for {symbol!r}; the page markup may have changed"
        )
        self.symbol = symbol


class RowParseError(QuoteHistoryError, ValueError):
    """A single table row could not be turned into a HistoryEntry.

    Recovered inside the extractor: the row is dropped and extraction continues.
    """


class MalformedRow(RowParseError):
    pass


class InvalidDate(RowParseError):
    pass


class InvalidNumber(RowParseError):
    pass

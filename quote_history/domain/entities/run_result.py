"""
Domain entities describing the outcome of a scraping run.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class SymbolStatus(str, Enum):
    """Outcome of one symbol.

    CANCELLED means the result was abandoned, not that nothing was written: a CSV
    write already handed to a worker thread runs to completion, so the file may
    exist in full.
    """

    WRITTEN = "written"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ExtractionReport:
    """Running tally of one page's extraction, updated as rows are consumed."""

    rows_seen: int = 0
    rows_parsed: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.rows_seen - self.rows_parsed


@dataclass(frozen=True)
class SymbolResult:
    symbol: str
    status: SymbolStatus
    path: Optional[Path] = None
    rows_written: int = 0
    rows_dropped: int = 0
    error: Optional[str] = None

    @classmethod
    def failed(cls, symbol: str, path: Path, error: Exception) -> "SymbolResult":
        return cls(symbol=symbol, status=SymbolStatus.FAILED, path=path, error=str(error))

    @classmethod
    def cancelled(cls, symbol: str, path: Path) -> "SymbolResult":
        return cls(
            symbol=symbol,
            status=SymbolStatus.CANCELLED,
            path=path,
            error="cancelled after another symbol failed; its file may still have been written",
        )


@dataclass(frozen=True)
class RunResult:
    """Per-symbol outcomes of one run, in the order the symbols were given."""

    results: dict[str, SymbolResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.status is SymbolStatus.WRITTEN for r in self.results.values())

    @property
    def failures(self) -> list[SymbolResult]:
        return [r for r in self.results.values() if r.status is not SymbolStatus.WRITTEN]

    def __getitem__(self, symbol: str) -> SymbolResult:
        return self.results[symbol]

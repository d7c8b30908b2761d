import asyncio
from datetime import date
from pathlib import Path

import pytest

from quote_history.application.use_cases.download_symbol_history import (
    DownloadSymbolHistoryUseCase,
)
from quote_history.domain.entities.history_entry import HistoryEntry
from quote_history.domain.entities.run_result import SymbolStatus
from quote_history.domain.errors import EmptyHistoryError, FetchError, OutputError
from quote_history.domain.ports.entry_extractor_port import IEntryExtractor
from quote_history.domain.ports.history_writer_port import IHistoryWriter
from quote_history.domain.ports.page_fetcher_port import IHistoryPageFetcher

ENTRY = HistoryEntry(date(2021, 1, 5), 100.0, 105.5, 99.25, 104.0, 104.0, 1234567)


class StubFetcher(IHistoryPageFetcher):
    def __init__(self, error=None):
        self.error = error
        self.symbols = []

    async def fetch(self, symbol):
        self.symbols.append(symbol)
        if self.error:
            raise self.error
        return f"<page {symbol}>"


class StubExtractor(IEntryExtractor):
    """Yields *parsed* entries and pretends *dropped* further rows failed."""

    def __init__(self, parsed, dropped=0):
        self.parsed = parsed
        self.dropped = dropped

    def extract(self, page, report=None):
        for _ in range(self.dropped):
            report.rows_seen += 1
        for entry in self.parsed:
            report.rows_seen += 1
            report.rows_parsed += 1
            yield entry


class RecordingWriter(IHistoryWriter):
    def __init__(self, error=None):
        self.error = error
        self.files = {}

    async def write(self, path, entries):
        if self.error:
            raise self.error
        self.files[path] = list(entries)
        return len(self.files[path])

    async def prepare_directory(self, directory):
        pass


def _execute(use_case, symbol="AAPL", path=Path("out/AAPL.csv")):
    return asyncio.run(use_case.execute(symbol, path))


def test_pipeline_writes_entries_and_reports_counts():
    fetcher, writer = StubFetcher(), RecordingWriter()
    use_case = DownloadSymbolHistoryUseCase(fetcher, StubExtractor([ENTRY, ENTRY], dropped=1), writer)

    result = _execute(use_case)

    assert fetcher.symbols == ["AAPL"]
    assert writer.files == {Path("out/AAPL.csv"): [ENTRY, ENTRY]}
    assert result.status is SymbolStatus.WRITTEN
    assert result.rows_written == 2
    assert result.rows_dropped == 1
    assert result.path == Path("out/AAPL.csv")


def test_empty_extraction_is_success_by_default(caplog):
    writer = RecordingWriter()
    use_case = DownloadSymbolHistoryUseCase(StubFetcher(), StubExtractor([], dropped=3), writer)

    result = _execute(use_case)

    assert result.status is SymbolStatus.WRITTEN
    assert result.rows_written == 0
    assert writer.files[Path("out/AAPL.csv")] == []
    assert "no history rows extracted" in caplog.text


def test_empty_extraction_fails_when_requested():
    writer = RecordingWriter()
    use_case = DownloadSymbolHistoryUseCase(
        StubFetcher(), StubExtractor([]), writer, fail_on_empty=True
    )
    with pytest.raises(EmptyHistoryError):
        _execute(use_case)
    assert Path("out/AAPL.csv") in writer.files


def test_fetch_error_stops_before_writing():
    writer = RecordingWriter()
    use_case = DownloadSymbolHistoryUseCase(
        StubFetcher(FetchError("AAPL", "HTTP 404")), StubExtractor([ENTRY]), writer
    )
    with pytest.raises(FetchError):
        _execute(use_case)
    assert writer.files == {}


def test_output_error_propagates():
    use_case = DownloadSymbolHistoryUseCase(
        StubFetcher(),
        StubExtractor([ENTRY]),
        RecordingWriter(OutputError(Path("out/AAPL.csv"), "Permission denied")),
    )
    with pytest.raises(OutputError):
        _execute(use_case)

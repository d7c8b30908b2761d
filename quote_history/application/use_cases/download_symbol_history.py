"""
Use-case: fetch, extract and persist the price history of one symbol.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging
from pathlib import Path

from quote_history.domain.entities.run_result import (
    ExtractionReport,
    SymbolResult,
    SymbolStatus,
)
from quote_history.domain.errors import EmptyHistoryError
from quote_history.domain.ports.entry_extractor_port import IEntryExtractor
from quote_history.domain.ports.history_writer_port import IHistoryWriter
from quote_history.domain.ports.page_fetcher_port import IHistoryPageFetcher

logger = logging.getLogger(__name__)


class DownloadSymbolHistoryUseCase:
    def __init__(
        self,
        fetcher: IHistoryPageFetcher,
        extractor: IEntryExtractor,
        writer: IHistoryWriter,
        fail_on_empty: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._extractor = extractor
        self._writer = writer
        self._fail_on_empty = fail_on_empty

    async def execute(self, symbol: str, output_path: Path) -> SymbolResult:
        """Run fetch -> extract -> write for *symbol*.

        The file is written even when no row parses, so a header-only file is
        left behind before EmptyHistoryError is raised in fail-on-empty mode.

        Raises:
            FetchError:        if the page cannot be fetched.
            OutputError:       if the CSV file cannot be written.
            EmptyHistoryError: if fail_on_empty is set and no row parsed.
        """
        logger.info("[%s] fetching history page", symbol)
        page = await self._fetcher.fetch(symbol)
        logger.info("[%s] fetched %d characters", symbol, len(page))

        report = ExtractionReport()
        entries = self._extractor.extract(page, report)

        logger.info("[%s] writing entries to %s", symbol, output_path)
        written = await self._writer.write(output_path, entries)
        logger.info(
            "[%s] parsed %d of %d rows (%d dropped), wrote %s",
            symbol,
            report.rows_parsed,
            report.rows_seen,
            report.rows_dropped,
            output_path,
        )

        if written == 0:
            logger.warning(
                "[%s] no history rows extracted; %s holds only the header",
                symbol,
                output_path,
            )
            if self._fail_on_empty:
                raise EmptyHistoryError(symbol)

        return SymbolResult(
            symbol=symbol,
            status=SymbolStatus.WRITTEN,
            path=output_path,
            rows_written=written,
            rows_dropped=report.rows_dropped,
        )

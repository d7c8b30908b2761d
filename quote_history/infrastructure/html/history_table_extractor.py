"""
Infrastructure adapter: history page HTML -> IEntryExtractor, via BeautifulSoup.

The page's table header is styled with the same class as the data rows, so the
first selector match is always skipped. Rows that fail to parse are dropped one
by one; a drifting page shows up as a growing dropped count, not an exception.
"""

import logging
from typing import Iterator, Optional

from bs4 import BeautifulSoup

from quote_history.domain.entities.history_entry import HistoryEntry
from quote_history.domain.entities.run_result import ExtractionReport
from quote_history.domain.errors import RowParseError
from quote_history.domain.ports.entry_extractor_port import IEntryExtractor
from quote_history.infrastructure.config.settings import DEFAULT_ROW_SELECTOR
from quote_history.infrastructure.html.row_parser import parse_row

logger = logging.getLogger(__name__)


class HistoryTableExtractor(IEntryExtractor):
    """Selects history-table rows with a CSS selector and parses each one."""

    def __init__(self, row_selector: str = DEFAULT_ROW_SELECTOR) -> None:
        self._row_selector = row_selector

    def extract(
        self, page: str, report: Optional[ExtractionReport] = None
    ) -> Iterator[HistoryEntry]:
        if report is None:
            report = ExtractionReport()
        soup = BeautifulSoup(page, "html.parser")
        rows = soup.select(self._row_selector)[1:]
        for row in rows:
            report.rows_seen += 1
            try:
                entry = parse_row(row)
            except RowParseError as exc:
                logger.debug("dropping history row %d: %s", report.rows_seen, exc)
                continue
            report.rows_parsed += 1
            yield entry

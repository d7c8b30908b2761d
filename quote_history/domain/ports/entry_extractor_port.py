"""
Port (interface) for turning a fetched page into history entries.
Infrastructure adapters (e.g. HistoryTableExtractor) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from quote_history.domain.entities.history_entry import HistoryEntry
from quote_history.domain.entities.run_result import ExtractionReport


class IEntryExtractor(ABC):
    @abstractmethod
    def extract(
        self, page: str, report: Optional[ExtractionReport] = None
    ) -> Iterator[HistoryEntry]:
        """Lazily yield the entries of *page* in document order.

        Rows that fail to parse are dropped, never raised. When *report* is
        given it is updated as the iterator is consumed.
        """
        ...

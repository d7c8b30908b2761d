"""
Port (interface) for persisting a symbol's history.
Infrastructure adapters (e.g. CsvHistoryWriter) must implement this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from quote_history.domain.entities.history_entry import HistoryEntry


class IHistoryWriter(ABC):
    @abstractmethod
    async def write(self, path: Path, entries: Iterable[HistoryEntry]) -> int:
        """Create or truncate *path*, write *entries*, return how many were written.

        Raises:
            OutputError: if the file cannot be opened or written.
        """
        ...

    @abstractmethod
    async def prepare_directory(self, directory: Path) -> None:
        """Create *directory* and its parents if missing.

        Raises:
            OutputError: if the directory cannot be created.
        """
        ...

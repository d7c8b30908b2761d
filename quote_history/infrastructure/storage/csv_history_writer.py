"""
Infrastructure adapter: local filesystem CSV -> IHistoryWriter.

Every field is a number or an ISO date, so the csv module never has to quote
anything; QUOTE_NONE makes that an error rather than a silent format change.
Blocking file I/O runs in a worker thread to keep the event loop free.
"""

import asyncio
import csv
import logging
from pathlib import Path
from typing import Iterable

from quote_history.domain.entities.history_entry import CSV_HEADER, HistoryEntry
from quote_history.domain.errors import OutputError
from quote_history.domain.ports.history_writer_port import IHistoryWriter

logger = logging.getLogger(__name__)


def write_history_csv(path: Path, entries: Iterable[HistoryEntry]) -> int:
    """Create or truncate *path* and write the header plus one line per entry.

    Returns:
        Number of entries written.

    Raises:
        OutputError: if the file cannot be opened or written.
    """
    written = 0
    try:
        with open(path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh, lineterminator="\n", quoting=csv.QUOTE_NONE)
            writer.writerow(CSV_HEADER)
            for entry in entries:
                writer.writerow(entry.to_csv_fields())
                written += 1
    except OSError as exc:
        raise OutputError(path, exc.strerror or str(exc)) from exc
    return written


class CsvHistoryWriter(IHistoryWriter):
    async def write(self, path: Path, entries: Iterable[HistoryEntry]) -> int:
        return await asyncio.to_thread(write_history_csv, path, entries)

    async def prepare_directory(self, directory: Path) -> None:
        try:
            await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputError(directory, exc.strerror or str(exc)) from exc
        logger.debug("output directory %s ready", directory)

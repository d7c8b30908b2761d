"""
Infrastructure adapter: one BeautifulSoup <tr> -> HistoryEntry.

Only the HTML concern lives here (which nodes are the cells, how their text is
read); the field parsing rules belong to HistoryEntry.from_cells().
"""

from bs4 import Tag

from quote_history.domain.entities.history_entry import HistoryEntry


def row_cells(row: Tag) -> list[str]:
    """Return the text of every direct child element of *row*, in order."""
    return [cell.get_text(strip=True) for cell in row.find_all(recursive=False)]


def parse_row(row: Tag) -> HistoryEntry:
    """Parse a history-table row.

    Raises:
        RowParseError: MalformedRow, InvalidDate or InvalidNumber.
    """
    return HistoryEntry.from_cells(row_cells(row))

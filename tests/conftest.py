import logging
import os

import pytest

HEADER_CELLS = ["Date", "Open", "High", "Low", "Close", "Adj Close", "Volume"]

AAPL_ROWS = [
    ["Jan 6, 2021", "105.00", "106.75", "103.50", "106.25", "106.00", "2,000,100"],
    ["Jan 5, 2021", "100.00", "105.50", "99.25", "104.00", "104.00", "1,234,567"],
]


def render_history_page(rows, css_class="yf-ewueuo", header=True, extra=""):
    """Render a page shaped like the Yahoo history table.

    *rows* is a list of cell lists; a string item is emitted verbatim as a row.
    """
    parts = ["<html><body><div><table>"]
    if header:
        cells = "".join(f"<th>{c}</th>" for c in HEADER_CELLS)
        parts.append(f'<thead><tr class="{css_class}">{cells}</tr></thead>')
    parts.append("<tbody>")
    for row in rows:
        if isinstance(row, str):
            parts.append(row)
            continue
        cells = "\n".join(f"<td>{c}</td>" for c in row)
        parts.append(f'<tr class="{css_class}">\n{cells}\n</tr>')
    parts.append(f"</tbody></table>{extra}</div></body></html>")
    return "\n".join(parts)


@pytest.fixture
def history_page():
    return render_history_page


@pytest.fixture
def aapl_page():
    return render_history_page(AAPL_ROWS)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without QUOTE_HISTORY_* variables and without a stray .env file."""
    for name in list(os.environ):
        if name.startswith("QUOTE_HISTORY_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

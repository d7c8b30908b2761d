import httpx
import pytest

from quote_history.infrastructure.entrypoints import cli
from quote_history.infrastructure.http.yahoo_page_fetcher import YahooHistoryPageFetcher
from quote_history.infrastructure.observability.logging_setup import parse_log_filter

HEADER = "Date,Open,High,Low,Close,Adj Close,Volume"


@pytest.fixture
def upstream(monkeypatch, clean_env, aapl_page):
    """Route every fetch through a MockTransport; returns the list of requested URLs.

    Logging is only validated, not reconfigured, so caplog keeps its handler.
    """
    monkeypatch.setattr(cli, "configure_logging", parse_log_filter)
    requested = []

    def handler(request):
        requested.append(request.url)
        if "/BADSYM/" in request.url.path:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=aapl_page)

    monkeypatch.setattr(
        cli,
        "YahooHistoryPageFetcher",
        lambda settings: YahooHistoryPageFetcher(
            settings, transport=httpx.MockTransport(handler)
        ),
    )
    return requested


def test_successful_run_creates_directory_and_files(upstream, tmp_path):
    out = tmp_path / "does" / "not" / "exist"
    assert cli.main(["--symbols", "AAPL MSFT", "--output-dir", str(out)]) == 0

    assert sorted(p.name for p in out.iterdir()) == ["AAPL.csv", "MSFT.csv"]
    assert (out / "AAPL.csv").read_text().splitlines()[0] == HEADER
    assert len(upstream) == 2


def test_failed_symbol_gives_nonzero_exit_and_names_the_symbol(upstream, tmp_path, caplog):
    status = cli.main(["-s", "AAPL", "BADSYM", "-o", str(tmp_path)])

    assert status == 1
    assert "BADSYM" in caplog.text
    assert "404" in caplog.text
    assert (tmp_path / "AAPL.csv").exists()


def test_repeated_symbol_flags_accumulate(upstream, tmp_path):
    assert cli.main(["-s", "AAPL", "-s", "MSFT", "-o", str(tmp_path)]) == 0
    assert (tmp_path / "MSFT.csv").exists()


def test_date_range_flags_reach_the_url(upstream, tmp_path):
    cli.main(["-s", "AAPL", "-o", str(tmp_path), "--start", "2020-01-01", "--end", "2021-01-01"])
    assert upstream[0].params["period1"] == "1577836800"
    assert upstream[0].params["period2"] == "1609459200"


def test_default_url_uses_default_window(upstream, tmp_path):
    cli.main(["-s", "AAPL", "-o", str(tmp_path)])
    assert upstream[0].params["period1"] == "345479400"
    assert upstream[0].params["period2"] == "1722448703"


def test_output_dir_that_cannot_be_created_exits_1(upstream, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert cli.main(["-s", "AAPL", "-o", str(blocker / "out")]) == 1
    assert upstream == []


@pytest.mark.parametrize(
    "argv",
    [
        ["-o", "out"],
        ["-s", "AAPL"],
        ["-s", "../x", "-o", "out"],
        ["-s", "AAPL", "-o", "out", "--max-concurrency", "0"],
        ["-s", "AAPL", "-o", "out", "--start", "2022-01-01", "--end", "2021-01-01"],
        ["-s", "AAPL", "-o", "out", "--log-level", "chatty"],
    ],
)
def test_usage_errors_exit_2(upstream, argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    assert upstream == []


def test_split_symbols():
    assert cli.split_symbols(["AAPL MSFT", " GOOG "]) == ["AAPL", "MSFT", "GOOG"]

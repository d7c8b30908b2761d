"""
CLI entry point for the quote history download.

This module is the Composition Root: it loads Settings, configures logging,
wires the infrastructure adapters (YahooHistoryPageFetcher, HistoryTableExtractor,
CsvHistoryWriter) into DownloadSymbolHistoryUseCase / HistoryBatchService and
maps the RunResult to a process exit status.

Run:

    quote-history --symbols "AAPL MSFT" --output-dir data/history
    python -m quote_history -s AAPL -s MSFT -o data/history --fail-fast

Exit status: 0 when every symbol was written, 1 when any symbol failed or the
run could not start, 2 on invalid arguments or configuration.
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from quote_history.application.services.history_batch_service import (
    HistoryBatchService,
    normalize_symbols,
)
from quote_history.application.use_cases.download_symbol_history import (
    DownloadSymbolHistoryUseCase,
)
from quote_history.domain.entities.run_result import RunResult
from quote_history.domain.errors import OutputError
from quote_history.infrastructure.config.settings import Settings
from quote_history.infrastructure.html.history_table_extractor import HistoryTableExtractor
from quote_history.infrastructure.http.yahoo_page_fetcher import YahooHistoryPageFetcher
from quote_history.infrastructure.observability.logging_setup import (
    DEFAULT_FILTER,
    LOG_ENV_VAR,
    configure_logging,
)
from quote_history.infrastructure.storage.csv_history_writer import CsvHistoryWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quote-history",
        description="Download Yahoo Finance price history pages into one CSV per symbol.",
    )
    p.add_argument(
        "-s",
        "--symbols",
        nargs="+",
        action="extend",
        required=True,
        help="Ticker symbols, space-delimited (e.g. -s AAPL MSFT or -s 'AAPL MSFT')",
    )
    p.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        required=True,
        help="Destination directory, created if missing",
    )
    p.add_argument(
        "--start",
        type=datetime.fromisoformat,
        default=None,
        help="History window start, ISO date or datetime (UTC when naive)",
    )
    p.add_argument(
        "--end",
        type=datetime.fromisoformat,
        default=None,
        help="History window end, ISO date or datetime (UTC when naive)",
    )
    p.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Maximum number of symbols downloaded at once (default 8)",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: httpx client default)",
    )
    p.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Cancel the remaining symbols as soon as one fails",
    )
    p.add_argument(
        "--fail-on-empty",
        action="store_true",
        default=None,
        help="Treat a page without any parseable row as a failure",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help=f"Log filter, e.g. 'debug' or 'info,httpx=debug' (env {LOG_ENV_VAR})",
    )
    return p


def split_symbols(values: list[str]) -> list[str]:
    return [symbol for value in values for symbol in value.split()]


async def run(settings: Settings, symbols: list[str], output_dir: Path) -> RunResult:
    writer = CsvHistoryWriter()
    async with YahooHistoryPageFetcher(settings) as fetcher:
        use_case = DownloadSymbolHistoryUseCase(
            fetcher=fetcher,
            extractor=HistoryTableExtractor(settings.row_selector),
            writer=writer,
            fail_on_empty=settings.fail_on_empty,
        )
        service = HistoryBatchService(
            use_case,
            writer,
            max_concurrency=settings.max_concurrency,
            fail_fast=settings.fail_fast,
        )
        return await service.run(symbols, output_dir)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    try:
        configure_logging(args.log_level or os.environ.get(LOG_ENV_VAR, DEFAULT_FILTER))
    except ValueError as exc:
        parser.error(str(exc))

    try:
        settings = Settings.from_env(load_dotenv_file=False).with_overrides(
            period_start=args.start,
            period_end=args.end,
            max_concurrency=args.max_concurrency,
            timeout=args.timeout,
            fail_fast=args.fail_fast,
            fail_on_empty=args.fail_on_empty,
        )
    except ValidationError as exc:
        parser.error(f"invalid configuration:\n{exc}")

    try:
        symbols = normalize_symbols(split_symbols(args.symbols))
    except ValueError as exc:
        parser.error(str(exc))

    try:
        result = asyncio.run(run(settings, symbols, args.output_dir))
    except OutputError as exc:
        logger.error("%s", exc)
        return 1

    for failure in result.failures:
        logger.error("%s %s: %s", failure.symbol, failure.status.value, failure.error)
    return 0 if result.ok else 1


def entrypoint() -> None:
    sys.exit(main())


if __name__ == "__main__":
    entrypoint()

"""
Application service: runs the per-symbol pipeline for a whole symbol list.

Business decisions owned here:
  - One independent task per symbol, at most max_concurrency running at once.
  - Aggregation: by default every symbol runs to completion and the run's
    outcome is decided once all results are in. With fail_fast, the first
    failure cancels the symbols still in flight.
  - Output layout: <output_dir>/<symbol>.csv.

Infrastructure adapters are injected through DownloadSymbolHistoryUseCase and
IHistoryWriter; nothing here imports httpx, bs4 or touches the filesystem.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from quote_history.application.use_cases.download_symbol_history import (
    DownloadSymbolHistoryUseCase,
)
from quote_history.domain.entities.run_result import RunResult, SymbolResult, SymbolStatus
from quote_history.domain.errors import QuoteHistoryError
from quote_history.domain.ports.history_writer_port import IHistoryWriter

logger = logging.getLogger(__name__)


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """Trim symbols and drop duplicates, keeping the first occurrence.

    Raises:
        ValueError: if the list is empty, or a symbol is blank or contains a
                    path separator.
    """
    seen: dict[str, None] = {}
    for raw in symbols:
        symbol = raw.strip()
        if not symbol:
            raise ValueError("symbols must be non-empty strings")
        if "/" in symbol or "\\" in symbol or symbol in (".", ".."):
            raise ValueError(f"invalid symbol {symbol!r}")
        seen.setdefault(symbol, None)
    if not seen:
        raise ValueError("at least one symbol is required")
    return list(seen)


class HistoryBatchService:
    DEFAULT_MAX_CONCURRENCY: int = 8

    def __init__(
        self,
        use_case: DownloadSymbolHistoryUseCase,
        writer: IHistoryWriter,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        fail_fast: bool = False,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._use_case = use_case
        self._writer = writer
        self._max_concurrency = max_concurrency
        self._fail_fast = fail_fast

    @staticmethod
    def output_path(output_dir: Path, symbol: str) -> Path:
        return output_dir / f"{symbol}.csv"

    async def run(self, symbols: Iterable[str], output_dir: Path) -> RunResult:
        """Download every symbol's history into *output_dir*.

        Args:
            symbols:    Ticker symbols; trimmed and de-duplicated.
            output_dir: Destination directory, created if missing.

        Returns:
            RunResult with one SymbolResult per distinct symbol, in input order.

        Raises:
            ValueError:  on an empty or invalid symbol list.
            OutputError: if the output directory cannot be created.
        """
        symbols = normalize_symbols(symbols)
        await self._writer.prepare_directory(output_dir)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        tasks = {
            symbol: asyncio.create_task(
                self._run_one(symbol, self.output_path(output_dir, symbol), semaphore),
                name=f"history-{symbol}",
            )
            for symbol in symbols
        }
        logger.info(
            "Downloading %d symbol(s) into %s (max %d concurrent)",
            len(tasks),
            output_dir,
            self._max_concurrency,
        )

        if self._fail_fast:
            results = await self._collect_fail_fast(tasks, output_dir)
        else:
            results = await self._collect_all(tasks)

        run = RunResult(results={symbol: results[symbol] for symbol in symbols})
        counts = {status: 0 for status in SymbolStatus}
        for result in run.results.values():
            counts[result.status] += 1
        logger.info(
            "Run finished: %d written, %d failed, %d cancelled",
            counts[SymbolStatus.WRITTEN],
            counts[SymbolStatus.FAILED],
            counts[SymbolStatus.CANCELLED],
        )
        return run

    async def _run_one(
        self, symbol: str, path: Path, semaphore: asyncio.Semaphore
    ) -> SymbolResult:
        async with semaphore:
            try:
                return await self._use_case.execute(symbol, path)
            except QuoteHistoryError as exc:
                logger.error("[%s] %s", symbol, exc)
                return SymbolResult.failed(symbol, path, exc)

    @staticmethod
    async def _collect_all(tasks: dict[str, asyncio.Task]) -> dict[str, SymbolResult]:
        try:
            outcomes = await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            raise
        return dict(zip(tasks, outcomes))

    async def _collect_fail_fast(
        self, tasks: dict[str, asyncio.Task], output_dir: Path
    ) -> dict[str, SymbolResult]:
        symbol_of = {task: symbol for symbol, task in tasks.items()}
        results: dict[str, SymbolResult] = {}
        pending = set(tasks.values())
        try:
            while pending:
                done, pending = await asyncio.wait(
                    pending, return_when=asyncio.FIRST_COMPLETED
                )
                failed = False
                for task in done:
                    result = task.result()
                    results[symbol_of[task]] = result
                    failed = failed or result.status is SymbolStatus.FAILED
                if failed:
                    break
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for task in pending:
            symbol = symbol_of[task]
            if task.cancelled():
                results[symbol] = SymbolResult.cancelled(
                    symbol, self.output_path(output_dir, symbol)
                )
            else:
                results[symbol] = task.result()
        return results

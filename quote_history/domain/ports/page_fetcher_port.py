"""
Port (interface) for history page fetchers.
Infrastructure adapters (e.g. YahooHistoryPageFetcher) must implement this interface.
"""

from abc import ABC, abstractmethod


class IHistoryPageFetcher(ABC):
    @abstractmethod
    async def fetch(self, symbol: str) -> str:
        """Return the raw history page for *symbol*.

        Raises:
            FetchError: on transport failure or a non-success status.
        """
        ...

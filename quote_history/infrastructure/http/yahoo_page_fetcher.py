"""
Infrastructure adapter: Yahoo Finance history page over httpx -> IHistoryPageFetcher.

All HTTP details (URL template, browser User-Agent, client lifetime) are confined
here. Yahoo serves different markup, or refuses the request, when the client
does not identify as a common desktop browser.

One httpx.AsyncClient is shared by all symbols of a run; use the fetcher as an
async context manager so the connection pool is closed when the run ends.
"""

import logging
from typing import Optional

import httpx

from quote_history.domain.errors import FetchError
from quote_history.domain.ports.page_fetcher_port import IHistoryPageFetcher
from quote_history.infrastructure.config.settings import Settings

logger = logging.getLogger(__name__)

HISTORY_URL_TEMPLATE = (
    "https://finance.yahoo.com/quote/{symbol}/history/?period1={period1}&period2={period2}"
)


def build_history_url(symbol: str, period1: int, period2: int) -> str:
    return HISTORY_URL_TEMPLATE.format(symbol=symbol, period1=period1, period2=period2)


class YahooHistoryPageFetcher(IHistoryPageFetcher):
    """Fetches quote history pages from finance.yahoo.com."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            settings:  Run settings (period bounds, User-Agent, timeout).
            transport: Optional httpx transport; tests pass an httpx.MockTransport.
        """
        self._settings = settings
        client_kwargs = {
            "headers": {"User-Agent": settings.user_agent},
            "follow_redirects": True,
            "transport": transport,
        }
        if settings.timeout is not None:
            client_kwargs["timeout"] = settings.timeout
        self._client = httpx.AsyncClient(**client_kwargs)

    def url_for(self, symbol: str) -> str:
        return build_history_url(symbol, self._settings.period1, self._settings.period2)

    async def fetch(self, symbol: str) -> str:
        url = self.url_for(symbol)
        logger.debug("[%s] GET %s", symbol, url)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                symbol, f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(symbol, f"{type(exc).__name__}: {exc}") from exc
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "YahooHistoryPageFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

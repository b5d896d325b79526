"""
Scryfall API client.

Exact-name lookups and paginated searches, with responses cached by URL
and uncached requests spaced out per client instance (Scryfall asks for
50-100ms between requests).

API docs: https://scryfall.com/docs/api
"""

import asyncio
import logging
import time
from datetime import timedelta
from types import TracebackType

import httpx
from pydantic import ValidationError

from commanderforge.config import settings
from commanderforge.parsers.scryfall import ScryfallCard, ScryfallSearchPage
from commanderforge.services.disk_cache import DiskCache

logger = logging.getLogger(__name__)


class CardLookupError(Exception):
    """Raised when fetching card data fails."""

    pass


class CardNotFoundError(CardLookupError):
    """Raised when no card has the requested exact name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Card not found: {name}")


class ScryfallClient:
    """
    Async Scryfall client.

    Usage:
        async with ScryfallClient(cache=DiskCache(".cache/scryfall")) as client:
            card = await client.get_card_named("Sol Ring")
    """

    def __init__(
        self,
        base_url: str | None = None,
        cache: DiskCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        request_interval: float | None = None,
        cache_max_age: timedelta | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.cache = cache
        self.request_interval = (
            settings.request_interval_seconds if request_interval is None else request_interval
        )
        self.cache_max_age = cache_max_age or timedelta(days=settings.cache_max_age_days)

        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=settings.request_timeout_seconds,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )
        self._lock = asyncio.Lock()
        self._last_request = 0.0

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    async def get_card_named(self, name: str) -> ScryfallCard:
        """
        Look up a card by exact name.

        Raises:
            CardNotFoundError: If Scryfall has no card with that name
            CardLookupError: If the request fails
        """
        url = self._url("/cards/named", {"exact": name})
        try:
            text = await self._get_text(url)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise CardNotFoundError(name) from e
            raise CardLookupError(
                f"Failed to fetch card {name!r}: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise CardLookupError(f"Failed to fetch card {name!r}: {e}") from e

        try:
            return ScryfallCard.model_validate_json(text)
        except ValidationError as e:
            raise CardLookupError(f"Unreadable card response for {name!r}") from e

    async def search(self, query: str, max_cards: int) -> list[ScryfallCard]:
        """
        Run a card search, following pagination.

        Args:
            query: Scryfall search syntax
            max_cards: Stop once this many cards are collected

        Returns:
            Up to max_cards cards. A search with no matches returns [].

        Raises:
            CardLookupError: If a request fails
        """
        results: list[ScryfallCard] = []
        url: str | None = self._url("/cards/search", {"q": query})

        while url is not None and len(results) < max_cards:
            try:
                text = await self._get_text(url)
            except httpx.HTTPStatusError as e:
                # Scryfall answers 404 for "no cards matched"
                if e.response.status_code == 404:
                    break
                raise CardLookupError(
                    f"Search failed for {query!r}: HTTP {e.response.status_code}"
                ) from e
            except httpx.RequestError as e:
                raise CardLookupError(f"Search failed for {query!r}: {e}") from e

            try:
                page = ScryfallSearchPage.model_validate_json(text)
            except ValidationError as e:
                raise CardLookupError(f"Unreadable search response for {query!r}") from e

            results.extend(page.data)
            url = page.next_page if page.has_more and page.next_page else None

        logger.debug("Search %r returned %d cards", query, min(len(results), max_cards))
        return results[:max_cards]

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _url(self, path: str, params: dict[str, str]) -> str:
        return str(httpx.URL(f"{self.base_url}{path}", params=params))

    async def _get_text(self, url: str) -> str:
        if self.cache is not None:
            cached = self.cache.get(url, self.cache_max_age)
            if cached is not None:
                return cached

        async with self._lock:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self.request_interval:
                await asyncio.sleep(self.request_interval - elapsed)

            try:
                response = await self._http.get(url)
            finally:
                self._last_request = time.monotonic()
            response.raise_for_status()
            text = response.text

        if self.cache is not None:
            self.cache.put(url, text)
        return text

"""SOL/USD price lookup across several public price oracles."""

import logging

from feed_cache.config import settings
from feed_cache.repositories.upstream_fetcher import UpstreamFetcher, first_available

logger = logging.getLogger(__name__)

SOL_MINT = "So11111111111111111111111111111111111111112"
JUPITER_PRICE_URL = "https://api.jup.ag/price/v3"
CRYPTOCOMPARE_URL = "https://min-api.cryptocompare.com/data/price"
COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"


class SolPriceRepository:
    """Looks up the SOL price, Jupiter first, then CryptoCompare, then CoinGecko.

    ``get_sol_price`` never raises: when every oracle fails it returns
    ``0.0``, which callers must treat as "price unknown".
    """

    def __init__(self, fetcher: UpstreamFetcher, jup_api_key: str | None = None) -> None:
        self._fetcher = fetcher
        self._jup_api_key = jup_api_key or settings.jup_api_key or ""

    async def get_sol_price(self) -> float:
        """Get the SOL price in USD, or 0.0 if no oracle answered."""
        return await first_available(
            [self._from_jupiter, self._from_cryptocompare, self._from_coingecko],
            default=0.0,
        )

    async def _from_jupiter(self) -> float | None:
        response = await self._fetcher.fetch(
            "GET",
            JUPITER_PRICE_URL,
            params={"ids": SOL_MINT},
            headers={"x-api-key": self._jup_api_key},
        )
        if not response.is_success:
            return None
        entry = response.json().get(SOL_MINT) or {}
        return _as_price(entry.get("usdPrice"))

    async def _from_cryptocompare(self) -> float | None:
        response = await self._fetcher.fetch(
            "GET", CRYPTOCOMPARE_URL, params={"fsym": "SOL", "tsyms": "USD"}
        )
        if not response.is_success:
            return None
        return _as_price(response.json().get("USD"))

    async def _from_coingecko(self) -> float | None:
        response = await self._fetcher.fetch(
            "GET", COINGECKO_URL, params={"ids": "solana", "vs_currencies": "usd"}
        )
        if not response.is_success:
            return None
        return _as_price((response.json().get("solana") or {}).get("usd"))


def _as_price(value: object) -> float | None:
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None

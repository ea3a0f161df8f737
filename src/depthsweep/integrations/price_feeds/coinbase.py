"""Coinbase spot price feed.

Endpoint: GET https://api.exchange.coinbase.com/products/{product}/ticker
Shape: {"price": "67000.01", "bid": "...", "ask": "...", "volume": "...", ...}
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from depthsweep.core.logging import get_logger
from depthsweep.core.retry import SchemaError, wrap_http_error
from depthsweep.domain.results import SpotPrice
from depthsweep.integrations.venues.base import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from depthsweep.integrations.venues.coinbase import COINBASE_REST_URL

log = get_logger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    """Positive finite number from a ticker field, else None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) and number > 0 else None


class CoinbaseSpotPriceFeed:
    """Last trade price from the Coinbase Exchange ticker."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._timeout = timeout
        self._client = client
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._log = log.bind(component="coinbase_spot")

    @property
    def name(self) -> str:
        return "coinbase"

    async def get_spot_price(self, product: str = "BTC-USD") -> SpotPrice:
        """Fetch the ticker for ``product``.

        Raises:
            TransportError: Request failed.
            SchemaError: Price missing or not a positive number.
        """
        url = f"{COINBASE_REST_URL}/products/{product}/ticker"
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=self._headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(
                    timeout=self._timeout, headers=self._headers
                ) as client:
                    response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise wrap_http_error(e, self.name) from e

        price = _optional_float(data.get("price")) if isinstance(data, dict) else None
        if price is None:
            raise SchemaError(f"{self.name}: invalid price in ticker response", source=self.name)

        self._log.debug("spot_price_fetched", product=product, price=price)
        return SpotPrice(
            product=product,
            price=price,
            timestamp=datetime.now(timezone.utc),
            source=self.name,
            bid=_optional_float(data.get("bid")),
            ask=_optional_float(data.get("ask")),
            volume_24h=_optional_float(data.get("volume")),
        )

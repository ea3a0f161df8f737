"""Base protocol for spot price feeds.

Spot feeds provide the pre-trade reference price that a sweep's average
realized price is compared against.
"""

from abc import abstractmethod
from typing import Protocol

from depthsweep.domain.results import SpotPrice


class SpotPriceFeed(Protocol):
    """Protocol for spot price sources.

    Implementations should:
    - Make one request per call, with no retries
    - Raise a FetchError subclass on failure
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Feed identifier (e.g., 'coinbase')."""
        ...

    @abstractmethod
    async def get_spot_price(self, product: str) -> SpotPrice:
        """Get the current spot price for a product.

        Args:
            product: Product identifier (e.g., "BTC-USD").

        Returns:
            SpotPrice for the product.
        """
        ...

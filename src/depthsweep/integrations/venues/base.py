"""Base classes for venue depth adapters.

Every venue hides its own URL, query parameters and response shape behind the
same capability: ``await adapter.fetch_depth() -> DepthSnapshot``. The core
never branches on venue identity; ``adapter.name`` is only used as a source
tag.

Adapters make exactly one HTTP request per call and never retry. Failures
surface as FetchError subclasses (see depthsweep.core.retry).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from depthsweep.core.logging import get_logger
from depthsweep.core.retry import FetchError, SchemaError, wrap_http_error
from depthsweep.domain.depth import DepthSnapshot

log = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_USER_AGENT = "depthsweep/0.3"


@runtime_checkable
class DepthAdapter(Protocol):
    """Anything that can produce one normalized depth snapshot."""

    @property
    def name(self) -> str:
        """Source identifier, unique within one run (e.g. 'binance')."""
        ...

    async def fetch_depth(self) -> DepthSnapshot:
        """Fetch one snapshot. Raises FetchError on failure."""
        ...


class HttpDepthAdapter(ABC):
    """Adapter for a public JSON depth endpoint.

    Subclasses provide ``request()`` (URL and query parameters) and
    ``parse()`` (payload to DepthSnapshot). Pass ``client`` to share one
    httpx.AsyncClient across adapters; otherwise a client is opened for the
    duration of each request.
    """

    default_name: str = ""

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._name = name or self.default_name
        self._timeout = timeout
        self._client = client
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._log = log.bind(component="venue_adapter", source=self._name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def timeout(self) -> float:
        return self._timeout

    @abstractmethod
    def request(self) -> tuple[str, dict[str, Any]]:
        """Return the absolute URL and query parameters for one snapshot."""

    @abstractmethod
    def parse(self, payload: Any) -> DepthSnapshot:
        """Convert the decoded JSON body into a DepthSnapshot.

        Raises:
            SchemaError: Required fields are missing or malformed.
        """

    async def fetch_depth(self) -> DepthSnapshot:
        """Fetch and normalize one snapshot.

        Anything ``parse()`` raises other than a FetchError is reported as a
        SchemaError, since the body was not in the shape the venue promises.
        """
        url, params = self.request()
        payload = await self._get_json(url, params)
        try:
            depth = self.parse(payload)
        except FetchError:
            raise
        except Exception as e:
            raise SchemaError(
                f"{self._name}: malformed depth response ({type(e).__name__}: {e})",
                source=self._name,
                cause=e,
            ) from e
        self._log.debug("depth_fetched", bids=len(depth.bids), asks=len(depth.asks))
        return depth

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, params=params, headers=self._headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(
                    timeout=self._timeout, headers=self._headers
                ) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise wrap_http_error(e, self._name) from e

    def schema_error(self, detail: str) -> SchemaError:
        """Build a SchemaError tagged with this adapter's source."""
        return SchemaError(f"{self._name}: {detail}", source=self._name)

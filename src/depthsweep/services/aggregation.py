"""Concurrent fan-out over venue adapters.

Each venue gets its own task with its own timeout and retry budget. The
tasks are joined with a wait-all barrier; a slow or failing venue never
cancels or fails the others. Failures become skipped sources. Only when
every venue fails does the run stop with AggregateFailure.

Successful books are ordered by source name, so everything downstream is
independent of the order in which responses arrived.
"""

import asyncio
from typing import Mapping, Optional, Sequence

from depthsweep.core.logging import get_logger
from depthsweep.core.retry import (
    AggregateFailure,
    FetchTimeoutError,
    RetryConfig,
    retry_with_config,
)
from depthsweep.domain.depth import AggregatedDepth, DepthSnapshot, SourcedDepth
from depthsweep.domain.results import FetchOutcome
from depthsweep.engine.merge import merge_depths
from depthsweep.integrations.venues.base import DEFAULT_TIMEOUT_SECONDS, DepthAdapter

log = get_logger(__name__)


class DepthAggregator:
    """Fetch depth from several venues at once and collect what succeeded.

    Args:
        adapters: Venue adapters; names must be unique.
        retry: Retry policy applied per venue (transport errors only).
        timeout_seconds: Timeout for each individual attempt.
        disabled: Venues excluded before fetching (name -> reason); they are
            reported as skipped.
    """

    def __init__(
        self,
        adapters: Sequence[DepthAdapter],
        retry: Optional[RetryConfig] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        disabled: Optional[Mapping[str, str]] = None,
    ):
        names = [adapter.name for adapter in adapters]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate source names: {', '.join(duplicates)}")

        self._adapters = list(adapters)
        self._retry = retry or RetryConfig()
        self._timeout = timeout_seconds
        self._disabled = dict(disabled or {})
        self._log = log.bind(component="depth_aggregator")

    @property
    def source_names(self) -> list[str]:
        return [adapter.name for adapter in self._adapters]

    async def _fetch_one(self, adapter: DepthAdapter) -> DepthSnapshot:
        @retry_with_config(self._retry, log_context={"source": adapter.name})
        async def attempt() -> DepthSnapshot:
            try:
                return await asyncio.wait_for(adapter.fetch_depth(), timeout=self._timeout)
            except asyncio.TimeoutError as e:
                raise FetchTimeoutError(
                    f"{adapter.name}: no response within {self._timeout:g}s",
                    source=adapter.name,
                    cause=e,
                ) from e

        return await attempt()

    async def fetch_all(self) -> FetchOutcome:
        """Query every venue concurrently.

        Returns:
            FetchOutcome with successful books (sorted by source) and
            skipped sources with their failure reasons.

        Raises:
            AggregateFailure: No venue produced a snapshot.
        """
        skipped: dict[str, str] = dict(self._disabled)
        if not self._adapters:
            raise AggregateFailure("no venues configured", skipped)

        self._log.info("fetching_depth", sources=self.source_names)
        results = await asyncio.gather(
            *(self._fetch_one(adapter) for adapter in self._adapters),
            return_exceptions=True,
        )

        books: list[SourcedDepth] = []
        for adapter, result in zip(self._adapters, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                skipped[adapter.name] = str(result)
                self._log.warning(
                    "source_skipped",
                    source=adapter.name,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            books.append(SourcedDepth(source=adapter.name, depth=result))
            self._log.info(
                "source_fetched",
                source=adapter.name,
                bids=len(result.bids),
                asks=len(result.asks),
            )

        if not books:
            raise AggregateFailure("every venue fetch failed", skipped)

        books.sort(key=lambda book: book.source)
        return FetchOutcome(books=tuple(books), skipped=skipped)

    async def aggregate(self) -> AggregatedDepth:
        """Fetch every venue and merge the successes into one curve."""
        outcome = await self.fetch_all()
        return merge_depths(outcome.books, outcome.skipped_sources)

"""
Error taxonomy and caller-side retry policy for venue fetches.

This module provides:
- Error type hierarchy (transient transport failures vs. permanent schema
  failures, plus the fatal AggregateFailure)
- Conversion of httpx exceptions into that hierarchy
- A configurable retry decorator using tenacity

Adapters never retry on their own; the aggregation layer wraps each fetch
with ``retry_with_config``.

Usage:
    from depthsweep.core.retry import RetryConfig, retry_with_config

    @retry_with_config(RetryConfig(max_attempts=2))
    async def fetch():
        ...
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from functools import wraps
from typing import Any, Callable, Mapping, Optional, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random_exponential,
)

from depthsweep.core.logging import get_logger

log = get_logger(__name__)


# =============================================================================
# Error Type Hierarchy
# =============================================================================


class ErrorCategory(str, Enum):
    """Classification of error types for retry decisions."""

    TRANSIENT = "transient"  # Network issues, rate limits - should retry
    PERMANENT = "permanent"  # Malformed payloads - should NOT retry
    UNKNOWN = "unknown"


class DepthSweepError(Exception):
    """Base exception for all depthsweep errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class FetchError(DepthSweepError):
    """A venue request did not produce a usable snapshot."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.source = source


class TransportError(FetchError):
    """Non-2xx status or socket-level failure. May succeed on retry."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, source, cause)
        self.status_code = status_code


class FetchTimeoutError(TransportError):
    """Request exceeded its timeout."""

    pass


class SchemaError(FetchError):
    """Response body is malformed or lacks required fields."""

    category = ErrorCategory.PERMANENT


class AggregateFailure(DepthSweepError):
    """Every venue fetch failed; there is nothing to simulate against."""

    category = ErrorCategory.PERMANENT

    def __init__(self, message: str, skipped: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.skipped = dict(skipped or {})


def wrap_http_error(error: Exception, source: str) -> FetchError:
    """Convert an httpx (or decoding) exception into the fetch taxonomy.

    Args:
        error: The exception raised while requesting or decoding.
        source: Venue identifier for the error.

    Returns:
        A TransportError, FetchTimeoutError or SchemaError.
    """
    if isinstance(error, FetchError):
        return error
    if isinstance(error, httpx.TimeoutException):
        return FetchTimeoutError(f"{source}: request timed out", source=source, cause=error)
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        snippet = " ".join(error.response.text.split())[:240]
        return TransportError(
            f"{source}: HTTP {status} {snippet}".rstrip(),
            source=source,
            status_code=status,
            cause=error,
        )
    if isinstance(error, httpx.TransportError):
        return TransportError(f"{source}: {type(error).__name__}", source=source, cause=error)
    if isinstance(error, ValueError):
        # json.JSONDecodeError is a ValueError
        return SchemaError(f"{source}: invalid JSON body", source=source, cause=error)
    return TransportError(f"{source}: {error}", source=source, cause=error)


def is_retryable(error: Exception) -> bool:
    """Check if an error is worth another attempt."""
    if isinstance(error, DepthSweepError):
        return error.category == ErrorCategory.TRANSIENT
    return False


# =============================================================================
# Retry Configuration
# =============================================================================

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 4.0
DEFAULT_EXPONENTIAL_MULTIPLIER = 2.0
DEFAULT_JITTER = True


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (including the initial one).
        min_wait_seconds: Minimum wait time between attempts.
        max_wait_seconds: Maximum wait time between attempts.
        exponential_multiplier: Multiplier for exponential backoff.
        jitter: Whether to add randomness to wait times.
        on_retry: Optional callback for retry events.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS
    exponential_multiplier: float = DEFAULT_EXPONENTIAL_MULTIPLIER
    jitter: bool = DEFAULT_JITTER
    on_retry: Optional[Callable[[RetryCallState], None]] = None

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "RetryConfig":
        """Create RetryConfig from a dictionary (e.g., a ConfigManager section)."""
        return cls(
            max_attempts=int(config_dict.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
            min_wait_seconds=float(
                config_dict.get("min_wait_seconds", DEFAULT_MIN_WAIT_SECONDS)
            ),
            max_wait_seconds=float(
                config_dict.get("max_wait_seconds", DEFAULT_MAX_WAIT_SECONDS)
            ),
            exponential_multiplier=float(
                config_dict.get("exponential_multiplier", DEFAULT_EXPONENTIAL_MULTIPLIER)
            ),
            jitter=bool(config_dict.get("jitter", DEFAULT_JITTER)),
        )


# =============================================================================
# Retry Decorators
# =============================================================================

F = TypeVar("F", bound=Callable[..., Any])


def _create_retry_callback(
    log_context: Optional[dict[str, Any]] = None,
    on_retry: Optional[Callable[[RetryCallState], None]] = None,
) -> Callable[[RetryCallState], None]:
    context = log_context or {}

    def callback(state: RetryCallState) -> None:
        exception = state.outcome.exception() if state.outcome else None
        log.warning(
            "retry_attempt",
            attempt=state.attempt_number,
            error=str(exception) if exception else None,
            error_type=type(exception).__name__ if exception else None,
            wait_seconds=state.next_action.sleep if state.next_action else 0,
            **context,
        )
        if on_retry:
            on_retry(state)

    return callback


def retry_transient(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait: float = DEFAULT_MAX_WAIT_SECONDS,
    multiplier: float = DEFAULT_EXPONENTIAL_MULTIPLIER,
    jitter: bool = DEFAULT_JITTER,
    on_retry: Optional[Callable[[RetryCallState], None]] = None,
    log_context: Optional[dict[str, Any]] = None,
) -> Callable[[F], F]:
    """Decorator to retry an async function on TransportError.

    SchemaError and other permanent errors are raised on the first attempt.

    Example:
        @retry_transient(max_attempts=3)
        async def fetch_depth():
            ...
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError("retry_transient only supports async functions")

        callback = _create_retry_callback(log_context, on_retry)

        if jitter:
            wait_strategy = wait_random_exponential(
                multiplier=multiplier, min=min_wait, max=max_wait
            )
        else:
            wait_strategy = wait_exponential(
                multiplier=multiplier, min=min_wait, max=max_wait
            )

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max(1, max_attempts)),
                wait=wait_strategy,
                retry=retry_if_exception_type(TransportError),
                before_sleep=callback,
                reraise=True,
            ):
                with attempt:
                    return await func(*args, **kwargs)

        return async_wrapper  # type: ignore

    return decorator


def retry_with_config(
    config: RetryConfig,
    log_context: Optional[dict[str, Any]] = None,
) -> Callable[[F], F]:
    """Decorator to retry a function using a RetryConfig object."""
    return retry_transient(
        max_attempts=config.max_attempts,
        min_wait=config.min_wait_seconds,
        max_wait=config.max_wait_seconds,
        multiplier=config.exponential_multiplier,
        jitter=config.jitter,
        on_retry=config.on_retry,
        log_context=log_context,
    )

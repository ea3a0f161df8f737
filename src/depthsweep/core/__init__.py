"""Core framework infrastructure - config, logging, errors, retry."""

from depthsweep.core.config import ConfigManager
from depthsweep.core.logging import get_logger, setup_logging
from depthsweep.core.retry import (
    AggregateFailure,
    DepthSweepError,
    ErrorCategory,
    FetchError,
    FetchTimeoutError,
    RetryConfig,
    SchemaError,
    TransportError,
    is_retryable,
    retry_transient,
    retry_with_config,
    wrap_http_error,
)

__all__ = [
    # Config
    "ConfigManager",
    # Logging
    "setup_logging",
    "get_logger",
    # Errors
    "ErrorCategory",
    "DepthSweepError",
    "FetchError",
    "TransportError",
    "FetchTimeoutError",
    "SchemaError",
    "AggregateFailure",
    "wrap_http_error",
    "is_retryable",
    # Retry
    "RetryConfig",
    "retry_transient",
    "retry_with_config",
]

"""
Structured logging for depthsweep, built on structlog over stdlib logging.

Reports are printed on stdout (text or JSON), so every log line goes to
stderr or a file. Modules take their logger from ``get_logger(__name__)``;
the ``depthsweep.`` prefix lets a single stdlib logger level control them all.
"""
import logging
import sys
from typing import Optional

import structlog

ROOT_LOGGER = "depthsweep"

# httpx logs one INFO line per request; kept at WARNING unless debugging
_NOISY_LOGGERS = ("httpx", "httpcore")


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def setup_logging(
    level: str = "WARNING",
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib handlers behind it.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Unknown names fall back to WARNING.
        json_output: Render log events as JSON lines instead of console text.
        log_file: Also append log lines to this file.

    Returns:
        The package root logger.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setLevel(log_level)

    # force: the CLI may be invoked repeatedly in one process (tests)
    logging.basicConfig(format="%(message)s", level=log_level, handlers=handlers, force=True)
    noisy_level = log_level if log_level <= logging.DEBUG else max(log_level, logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return get_logger()


def get_logger(name: str = ROOT_LOGGER) -> structlog.stdlib.BoundLogger:
    """Logger named under the ``depthsweep`` hierarchy.

    ``get_logger(__name__)`` is the usual call; bare names such as
    ``"cli"`` become ``depthsweep.cli``.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return structlog.get_logger(name)

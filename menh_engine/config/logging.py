"""
Logging setup for the Menh Scoring Engine
"""

import logging
import sys
from typing import Optional

import structlog

ENGINE_LOGGER = "menh_engine"


def resolve_level(verbose: bool = False, level: Optional[str] = None) -> int:
    """Level for the engine logger: explicit name, else DEBUG when verbose"""
    if level:
        value = logging.getLevelName(level.upper())
        return value if isinstance(value, int) else logging.WARNING
    return logging.DEBUG if verbose else logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    level: Optional[str] = None,
) -> None:
    """
    Route structlog and stdlib records to stderr.

    Args:
        verbose: DEBUG output for the engine (batch and quick check events)
        log_json: One JSON object per line instead of console output
        level: Level name for the engine logger, wins over verbose
    """
    timestamped = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=timestamped + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=timestamped,
            processor=(
                structlog.processors.JSONRenderer()
                if log_json
                else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
            ),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(ENGINE_LOGGER).setLevel(resolve_level(verbose, level))

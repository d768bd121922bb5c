import logging
import sys
from typing import Any, Dict, Optional

import structlog

# Third-party loggers that chatter at DEBUG while decoding and fetching
QUIET_LOGGERS = ("PIL", "httpx", "httpcore")


def setup_logging(log_level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structured logging for the command-line tool.

    Log records always go to stderr so status lines on stdout stay clean.

    Args:
        log_level: Level name such as DEBUG or WARNING
        json_logs: Render each record as one JSON object
    """
    level = getattr(logging, log_level.upper())

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        (
            structlog.processors.JSONRenderer()
            if json_logs
            else structlog.dev.ConsoleRenderer(colors=False)
        ),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    # force replaces handlers installed by an earlier call
    logging.basicConfig(
        format="%(message)s", handlers=[stderr_handler], level=level, force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggingContext:
    """Bind key/value pairs (such as the item being converted) to every log record
    emitted inside the block."""

    def __init__(self, **bindings: Any) -> None:
        self.bindings = bindings
        self._tokens: Dict[str, Any] = {}

    def __enter__(self) -> "LoggingContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.bindings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

"""
Structured logging configuration for versionist.

Library modules obtain loggers through :func:`get_logger`; applications (and
the CLI) call :func:`setup_logging` once at startup.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional, cast

import structlog
from structlog.types import FilteringBoundLogger


class VersionObjectRenderer:
    """
    Structlog processor that renders versionist objects as plain text.

    Values, formats, schemas and fields are replaced by their string form so
    JSON rendering never chokes on them. Versionist errors are expanded into
    their dictionary form.

    Note: This class has only one public method (__call__) as it's designed
    to be used as a single-purpose structlog processor.
    """

    PACKAGE_PREFIX = "versionist."

    def __call__(
        self, logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Process log event rendering versionist objects.

        Args:
            logger: Structlog logger instance
            method_name: Log method name (info, error, etc.)
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with versionist objects rendered
        """
        for key, value in list(event_dict.items()):
            if not type(value).__module__.startswith(self.PACKAGE_PREFIX):
                continue
            to_dict = getattr(value, "to_dict", None)
            if isinstance(value, Exception) and callable(to_dict):
                event_dict[key] = to_dict()
            else:
                event_dict[key] = str(value)
        return event_dict


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[str] = None,
) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json, console)
        log_file: Optional log file path
    """
    level = getattr(logging, log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        VersionObjectRenderer(),
    ]

    if log_format == "json":
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )
    else:
        processors.extend([structlog.dev.ConsoleRenderer(colors=False)])

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    # Console handler; stderr keeps CLI output on stdout clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))

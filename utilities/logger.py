"""
Structured logging setup using structlog.
Provides structured logging with different output formats and levels.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class MutationLogger:
    """
    Specialized logger for book list mutations with context management.
    """

    def __init__(self, name: str = "booklist"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'MutationLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def log_fetched(self, version, book_count: int, title: Optional[str] = None) -> None:
        """Log a completed fetch of the container (and reference) documents."""
        self.logger.debug(
            "Book list fetched",
            version=str(version),
            book_count=book_count,
            title=title,
            **self.context
        )

    def log_rejected(self, status_code: int, reason: str) -> None:
        """Log an operation the mutator refused to apply."""
        self.logger.info(
            "Book list mutation rejected",
            status_code=status_code,
            reason=reason,
            **self.context
        )

    def log_written(self, book_count: int) -> None:
        """Log a successful conditional write."""
        self.logger.info(
            "Book list updated",
            book_count=book_count,
            **self.context
        )

    def log_conflict(self, version) -> None:
        """Log a write that lost the race against a concurrent update."""
        self.logger.warning(
            "Book list version conflict",
            version=str(version),
            **self.context
        )

    def log_store_error(self, error: str, status_code: Optional[int] = None) -> None:
        """Log a failure reported by the document store."""
        self.logger.error(
            "Document store error",
            error=error,
            status_code=status_code,
            **self.context
        )

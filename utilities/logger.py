"""
Logging system using structlog.
Provides structured logging, the named server loggers and their runtime levels.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Dict, Optional
import structlog
from structlog.stdlib import LoggerFactory

from bookstore.errors import BookServiceError
from bookstore.models import Book
from bookstore.observer import ServiceObserver


REQUEST_LOGGER = "request-logger"
BOOKS_LOGGER = "books-logger"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Names exposed by the log-level endpoint -> stdlib levels
LEVELS: Dict[str, int] = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}


class UnknownLoggerError(KeyError):
    """Raised for a logger name the server does not manage."""


class UnknownLevelError(ValueError):
    """Raised for a level outside LEVELS."""


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    log_file: Optional[str] = None,
    debug: bool = False,
    logger_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Enable debug mode for more verbose logging
        logger_levels: Initial levels of the named server loggers
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    # Configure structlog processors
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

    # Set up file logging if specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    registry = LoggerRegistry()
    for name, level in (logger_levels or {}).items():
        registry.set_level(name, level)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug,
        logger_levels=registry.levels()
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ or one of the server loggers)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LoggerRegistry:
    """
    Runtime view of the server loggers' levels.

    Levels live on the stdlib loggers, so changes apply immediately to every
    structlog logger bound to the same name.
    """

    def __init__(self, names=(REQUEST_LOGGER, BOOKS_LOGGER)):
        self.names = tuple(names)

    def _stdlib_logger(self, name: str) -> logging.Logger:
        if name not in self.names:
            raise UnknownLoggerError(name)
        return logging.getLogger(name)

    def get_level(self, name: str) -> str:
        """Return the effective level of ``name`` as an upper-case level name."""
        level = self._stdlib_logger(name).getEffectiveLevel()
        for level_name, value in LEVELS.items():
            if value == level:
                return level_name
        return logging.getLevelName(level).upper()

    def set_level(self, name: str, level: str) -> str:
        """
        Change the level of ``name``.

        The level is validated before the logger name.

        Raises:
            UnknownLevelError: if ``level`` is not one of LEVELS
            UnknownLoggerError: if ``name`` is not a server logger
        """
        if level not in LEVELS:
            raise UnknownLevelError(level)
        self._stdlib_logger(name).setLevel(LEVELS[level])
        return self.get_level(name)

    def levels(self) -> Dict[str, str]:
        return {name: self.get_level(name) for name in self.names}


class RequestCounter:
    """Thread-safe sequence of request numbers, starting at 1."""

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._count += 1
            return self._count

    @property
    def count(self) -> int:
        return self._count


class RequestLogger:
    """
    Logger for incoming requests, correlated by request number.
    """

    def __init__(self, name: str = REQUEST_LOGGER):
        self.logger = structlog.get_logger(name)

    def bind_request(self, request_id: int) -> None:
        """Bind the request number to every log line of the current context."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

    def log_incoming(self, request_id: int, resource: str, verb: str) -> None:
        self.logger.info(
            "Incoming request",
            request_number=request_id,
            resource=resource,
            verb=verb
        )

    def log_duration(self, request_id: int, duration_ms: float) -> None:
        self.logger.debug(
            "Request duration",
            request_number=request_id,
            duration_ms=round(duration_ms, 3)
        )


class LoggingObserver(ServiceObserver):
    """
    Reports book service events on the server loggers.
    """

    def __init__(self, books_logger: str = BOOKS_LOGGER, request_logger: str = REQUEST_LOGGER):
        self.logger = structlog.get_logger(books_logger)
        self.timing_logger = structlog.get_logger(request_logger)

    def operation_finished(self, operation: str, duration_ms: float) -> None:
        self.timing_logger.debug(
            "Operation finished",
            operation=operation,
            duration_ms=round(duration_ms, 3)
        )

    def book_created(self, book: Book, previous_count: int) -> None:
        self.logger.info("Creating new book", title=book.title)
        self.logger.debug(
            "Book assigned id",
            books_before=previous_count,
            book_id=book.id
        )

    def book_rejected(self, operation: str, error: BookServiceError) -> None:
        self.logger.error(
            error.message,
            operation=operation,
            kind=error.kind.value
        )

    def books_matched(self, operation: str, books_count: int) -> None:
        self.logger.info(
            "Total books found for requested filters",
            operation=operation,
            count=books_count
        )

    def book_fetched(self, book: Book) -> None:
        self.logger.debug("Fetching book details", book_id=book.id)

    def price_updated(self, book: Book, old_price: int) -> None:
        self.logger.info("Updated book price", book_id=book.id, price=book.price)
        self.logger.debug(
            "Book price change",
            title=book.title,
            old_price=old_price,
            new_price=book.price
        )

    def book_deleted(self, book: Book, remaining: int) -> None:
        self.logger.info("Removing book", title=book.title)
        self.logger.debug(
            "Book removed",
            title=book.title,
            book_id=book.id,
            remaining=remaining
        )

"""Logging configuration and setup."""

import logging
import logging.handlers
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

from ..config.models import LoggingConfig

NOISY_LOGGERS = ("httpx", "httpcore", "aiohttp", "openai", "anthropic")
NO_USER = "-"

_current_user: ContextVar[str] = ContextVar("current_user", default=NO_USER)


@contextmanager
def user_context(user_id: str) -> Iterator[None]:
    """Tag every record logged inside the block with ``user_id``."""
    token = _current_user.set(user_id)
    try:
        yield
    finally:
        _current_user.reset(token)


class UserContextFilter(logging.Filter):
    """Adds the current user id to records as ``user_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.user_id = _current_user.get()
        return True


def setup_logging(config: LoggingConfig) -> None:
    """Set up logging configuration.

    Args:
        config: Logging configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level))
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format)
    user_filter = UserContextFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, config.level))
    console_handler.setFormatter(formatter)
    console_handler.addFilter(user_filter)
    root_logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, config.level))
        file_handler.setFormatter(formatter)
        file_handler.addFilter(user_filter)
        root_logger.addHandler(file_handler)

    # Third-party clients log every request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging configured with level {config.level}")


class LoggerMixin:
    """Mixin class that provides logging functionality."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

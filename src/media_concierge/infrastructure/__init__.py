"""Infrastructure module for cross-cutting concerns."""

from .container import Container
from .logging import LoggerMixin, setup_logging, user_context

__all__ = [
    "Container",
    "LoggerMixin",
    "setup_logging",
    "user_context",
]

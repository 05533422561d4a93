"""API middleware for deckmodel."""

from deckmodel.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]

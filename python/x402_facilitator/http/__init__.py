"""HTTP surface of the facilitator."""

from .server import RequestLoggingMiddleware, create_app

__all__ = ["RequestLoggingMiddleware", "create_app"]

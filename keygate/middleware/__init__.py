"""Middleware components for request processing."""

from keygate.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]

"""
Middleware package for FastAPI application.

Contains request processing middleware.
"""

from marketplace.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]

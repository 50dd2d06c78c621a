"""
HTTP middleware.
"""

from agenda.api.middleware.logging_middleware import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]

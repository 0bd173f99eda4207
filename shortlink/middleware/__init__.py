"""Middleware for the shortlink web app."""

from shortlink.middleware.headers import SecurityHeadersMiddleware
from shortlink.middleware.logging import RequestLoggingMiddleware

__all__ = ["SecurityHeadersMiddleware", "RequestLoggingMiddleware"]

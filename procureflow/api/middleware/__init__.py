"""
API Middleware Module

Modules:
    - correlation: Request correlation ID middleware
    - error_handlers: Exception handlers producing the uniform error body
"""

from .correlation import CorrelationIdMiddleware, CORRELATION_HEADER
from .error_handlers import register_error_handlers

__all__ = ["CorrelationIdMiddleware", "CORRELATION_HEADER", "register_error_handlers"]

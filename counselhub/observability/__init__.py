"""
Observability module.

Provides structured logging, correlation ID tracking, request logging
middleware and Langfuse tracing for AI companion calls.
"""

from counselhub.observability.correlation import get_correlation_id, set_correlation_id
from counselhub.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
]

"""Shared helpers for API routers."""

from .error_handling import handle_service_errors, status_for, to_http_exception

__all__ = ["handle_service_errors", "status_for", "to_http_exception"]

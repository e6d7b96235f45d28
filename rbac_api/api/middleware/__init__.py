"""Middleware package."""

from rbac_api.api.middleware.logging import LoggingMiddleware
from rbac_api.api.middleware.request_id import RequestIdMiddleware

__all__ = [
    "LoggingMiddleware",
    "RequestIdMiddleware",
]

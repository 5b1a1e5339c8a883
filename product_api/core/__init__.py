"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: ErrorKind, AppException, error factories and handlers
- dependencies: API-key gate, catalog injection, pagination
- middleware: request logging

Usage:
------
    from product_api.core import exceptions
    raise exceptions.product_not_found(product_id)

==============================================================================
"""

from .exceptions import (
    AppException,
    ErrorKind,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "ErrorKind",
    "register_exception_handlers",
]

"""Request middleware and global exception handlers."""

from toolrank.middleware.error_handler import register_exception_handlers
from toolrank.middleware.logging import logging_middleware

__all__ = ["logging_middleware", "register_exception_handlers"]

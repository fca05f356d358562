"""
Name Cache Logging Module

Structured logging setup shared by the service and the command line.
"""

from .logger import (
    StructuredLogger,
    get_logger,
    log_exception,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "StructuredLogger",
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "log_exception",
]

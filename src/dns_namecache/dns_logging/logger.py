"""
Structured Logging Framework

This module provides the logging infrastructure: structlog bound loggers on
top of the standard library logging tree, with a console handler and an
optional rotating JSON log file.
"""

import logging
import logging.handlers
import sys
import traceback
from pathlib import Path
from typing import List, Optional

import structlog

from ..config.schema import LoggingConfig

SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _renderer_chain(renderer) -> List:
    chain = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if not isinstance(renderer, structlog.dev.ConsoleRenderer):
        chain.append(structlog.processors.format_exc_info)
    chain.append(renderer)
    return chain


class StructuredLogger:
    """Structured logger using structlog with console and JSON file output."""

    def __init__(self, config: LoggingConfig):
        """Initialize structured logger.

        Args:
            config: Logging configuration
        """
        self.config = config
        self._configured = False
        self.logger = None
        self._handlers: List[logging.Handler] = []

    def _console_renderer(self):
        if self.config.format == "structured":
            return structlog.processors.JSONRenderer()
        if self.config.format == "simple":
            return structlog.processors.KeyValueRenderer(
                key_order=["level", "event"], drop_missing=True
            )
        return structlog.dev.ConsoleRenderer(colors=False)

    def configure(self) -> None:
        """Configure structlog and the root logger handlers."""
        if self._configured:
            return

        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        log_level = getattr(logging, self.config.level.upper())
        root_logger.setLevel(log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=_renderer_chain(self._console_renderer()),
                foreign_pre_chain=SHARED_PROCESSORS,
            )
        )
        root_logger.addHandler(console_handler)
        self._handlers.append(console_handler)

        if self.config.file:
            self._setup_file_logging(root_logger, log_level)

        structlog.configure(
            processors=SHARED_PROCESSORS
            + [
                structlog.processors.StackInfoRenderer(),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self._configured = True
        self.logger = structlog.get_logger("dns_namecache")

    def _setup_file_logging(self, root_logger: logging.Logger, log_level: int) -> None:
        """Attach a rotating file handler writing one JSON object per line."""
        log_path = Path(self.config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=self.config.file,
            maxBytes=self.config.max_size_mb * 1024 * 1024,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=_renderer_chain(structlog.processors.JSONRenderer()),
                foreign_pre_chain=SHARED_PROCESSORS,
            )
        )
        root_logger.addHandler(file_handler)
        self._handlers.append(file_handler)

    def close(self) -> None:
        """Detach and close the handlers installed by configure()."""
        root_logger = logging.getLogger()
        for handler in self._handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._configured = False

    def get_logger(self, name: str = "dns_namecache") -> structlog.stdlib.BoundLogger:
        """Get a structured logger instance."""
        if not self._configured:
            self.configure()

        return structlog.get_logger(name)


# Global logger instance
_logger_instance: Optional[StructuredLogger] = None


def setup_logging(config: LoggingConfig) -> None:
    """Setup global logging configuration.

    Args:
        config: Logging configuration
    """
    global _logger_instance
    if _logger_instance is not None:
        _logger_instance.close()
    _logger_instance = StructuredLogger(config)
    _logger_instance.configure()


def shutdown_logging() -> None:
    global _logger_instance
    if _logger_instance is not None:
        _logger_instance.close()
        _logger_instance = None


def get_logger(name: str = "dns_namecache") -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Raises:
        RuntimeError: If logging hasn't been configured
    """
    if _logger_instance is None:
        raise RuntimeError("Logging not configured. Call setup_logging() first.")

    return _logger_instance.get_logger(name)


def log_exception(logger, message: str, exc: Optional[BaseException] = None) -> None:
    """Log an exception with detailed traceback information.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance (optional, will use current exception if None)
    """
    if exc is None:
        exc = sys.exc_info()[1]

    if exc is None:
        logger.error(message)
        return

    tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        message,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        traceback=tb_str,
    )

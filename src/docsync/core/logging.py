"""Logging configuration for docsync."""

import logging
import logging.handlers
import sys
from typing import Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from .config import settings


def setup_logging(cli_mode: bool = False, level: Optional[str] = None) -> None:
    """Set up structured logging with rich console output."""

    level_name = (level or settings.logging.level).upper()
    log_level = getattr(logging, level_name)

    if cli_mode:
        processors = [
            structlog.stdlib.filter_by_level,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.KeyValueRenderer(key_order=['event']),
        ]
    else:
        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.is_production()
            else structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    if not settings.is_production():
        console = Console(stderr=True)
        console_handler = RichHandler(
            console=console,
            show_time=not cli_mode,
            show_path=not cli_mode,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(settings.logging.format))
        root_logger.addHandler(console_handler)

    if settings.logging.file:
        file_handler = logging.handlers.RotatingFileHandler(
            settings.logging.file,
            maxBytes=settings.logging.max_file_size,
            backupCount=settings.logging.backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(settings.logging.format))
        root_logger.addHandler(file_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)

"""
Logging configuration utilities.
"""
import logging
import logging.handlers
import structlog
from pathlib import Path

from spendsim.config.settings import settings


def setup_logging(level=None):
    """
    Configure structured logging for the application.

    Args:
        level: Log level name overriding ``settings.logging.level``
    """
    level_name = (level or settings.logging.level).upper()
    log_dir = Path(settings.logging.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamper = structlog.processors.TimeStamper(fmt="ISO")

    if settings.logging.use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format=settings.logging.format,
        level=getattr(logging, level_name),
        handlers=[
            logging.StreamHandler(),
            logging.handlers.RotatingFileHandler(
                filename=log_dir / "spendsim.log",
                maxBytes=settings.logging.max_file_size_mb * 1024 * 1024,
                backupCount=settings.logging.backup_count
            )
        ]
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level_name)

    # Set logging levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)

"""Logging for memberfiles.

The package logs access denials and file changes under the ``memberfiles``
logger. ``configure_from_settings`` attaches a console handler and, when
enabled, a rotating ``<name>.log`` file under the configured directory.
"""

import logging
import logging.handlers
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"  # ISO 8601
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logger(
    name: str,
    log_dir: str = "/var/log/memberfiles",
    level: str = "INFO",
    file_logging: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and rotating-file handlers to the ``name`` logger.

    Calling it again only updates the level.

    Raises:
        ValueError: level is not a standard logging level name
    """
    level_name = level.upper()
    if level_name not in LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(LEVELS)}")

    logger = logging.getLogger(name)
    logger.setLevel(level_name)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_from_settings(settings, name: str = "memberfiles") -> logging.Logger:
    """Set up the package logger from a ``Settings`` or ``LoggingConfig``."""
    level = getattr(settings, "log_level", None) or getattr(settings, "level", "INFO")
    return setup_logger(
        name,
        log_dir=settings.log_dir,
        level=level,
        file_logging=settings.file_logging,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

"""Common utilities for memberfiles."""

from .logger import setup_logger, get_logger
from .config import load_config, load_access_config

__all__ = ["get_logger", "load_access_config", "load_config", "setup_logger"]

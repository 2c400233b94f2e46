"""Ambient utilities for the indicator library: configuration and logging."""

from app.config import get_config, indicator_defaults, load_config
from app.logging import get_logger, reset_logging, setup_logging

__all__ = [
    "get_config",
    "get_logger",
    "indicator_defaults",
    "load_config",
    "reset_logging",
    "setup_logging",
]

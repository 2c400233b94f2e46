"""Rich console logging for applications embedding the indicator library.

The indicator modules only ever log through ``logging.getLogger(__name__)``
at DEBUG level; they never install handlers.  Call :func:`setup_logging`
once from the embedding application (or use :func:`get_logger`) to see
those records on a Rich console.
"""

from __future__ import annotations

import logging
from typing import Final

from rich.logging import RichHandler

from app.config import load_config

_DEFAULT_LEVEL: Final[str] = "INFO"
_FORMAT: Final[str] = "%(message)s"
_DATE_FORMAT: Final[str] = "[%X]"

_handler: RichHandler | None = None


def _resolve_level(level: str | None) -> int:
    """Explicit level, then ``log_level`` from config (SIL_LOG_LEVEL), then INFO."""
    if level is None:
        level = str(load_config().get("log_level") or _DEFAULT_LEVEL)
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str | None = None) -> None:
    """Attach a Rich console handler to the root logger.

    Safe to call multiple times; only the first call takes effect until
    :func:`reset_logging` is called.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    global _handler
    if _handler is not None:
        return

    resolved_level = _resolve_level(level)

    handler = RichHandler(
        level=resolved_level,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(resolved_level)
    root.addHandler(handler)

    _handler = handler


def reset_logging() -> None:
    """Detach the handler installed by :func:`setup_logging`, if any."""
    global _handler
    if _handler is None:
        return
    logging.getLogger().removeHandler(_handler)
    _handler = None


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, ensuring logging is configured.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.
    """
    setup_logging()
    return logging.getLogger(name)

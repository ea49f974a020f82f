"""
Rich logging for the relay.

One RichHandler hangs off the ``leadrelay`` package logger; module loggers
propagate to it. Messages use rich markup, so any value that comes from a
client or the lead buyer must go through ``rich.markup.escape`` first.
"""
import logging
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_traceback
from leadrelay.core.config import settings

PACKAGE_LOGGER = "leadrelay"

# Lead payloads carry SSNs and bank numbers, so never dump locals
install_traceback(show_locals=False)

_console = Console()


def _level(name: Optional[str]) -> int:
    return getattr(logging, (name or settings.log_level).upper(), logging.INFO)


def _build_handler() -> RichHandler:
    handler = RichHandler(
        console=_console,
        show_path=True,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s"))
    return handler


def configure_package_logger(level: Optional[str] = None) -> logging.Logger:
    """
    Attach the shared handler to the package logger (once) and set its level.
    Safe to call again, e.g. after settings change in tests.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_level(level))
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(_build_handler())
    # Keep uvicorn's root handlers from printing every line twice
    package_logger.propagate = False
    return package_logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a module logger under the package logger.

    Args:
        name: Logger name (typically __name__); names outside the package
              are nested under it so they share the handler
        level: Optional level override for this logger only
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(_level(level))
    return logger


app_logger = configure_package_logger()

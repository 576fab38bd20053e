"""
Logging setup shared by the genomesim CLI and library modules.

Everything prints through one rich Console so that progress bars, tables
and log records interleave cleanly. Library modules only ever call
``logging.getLogger(__name__)``; handlers are installed here.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "genomesim"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

console = Console(log_path=False)


def status(msg: str):
    """Spinner on the shared console."""
    return console.status(f"[cyan]{msg}[/cyan]", spinner="dots")


def resolve_level(level: str) -> int:
    """Numeric level for a name such as 'debug'; unknown names fall back to INFO."""
    return getattr(logging, str(level).upper(), logging.INFO)


def set_package_level(level: str) -> None:
    """Apply ``level`` to every genomesim logger created so far."""
    numeric_level = resolve_level(level)
    for name in list(logging.Logger.manager.loggerDict):
        if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
            logging.getLogger(name).setLevel(numeric_level)


def add_file_handler(log_file: str, level: str = "INFO") -> logging.FileHandler:
    """Attach a plain-text file handler to the root logger, once per path."""
    root_logger = logging.getLogger()
    target = str(Path(log_file).resolve())
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            handler.setLevel(resolve_level(level))
            return handler

    handler = logging.FileHandler(target)
    handler.setLevel(resolve_level(level))
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    return handler


def setup_rich_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Install or reconfigure the RichHandler on the root logger.

    Repeated calls only change levels, so modules can call this at import
    time and the CLI can call it again once ``--log-level`` is known.
    """
    root_logger = logging.getLogger()
    numeric_level = resolve_level(level)

    rich_handlers = [h for h in root_logger.handlers if isinstance(h, RichHandler)]
    if rich_handlers:
        for handler in rich_handlers:
            handler.setLevel(numeric_level)
    else:
        handler = RichHandler(
            rich_tracebacks=True,
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root_logger.addHandler(handler)

    root_logger.setLevel(numeric_level)
    set_package_level(level)

    if log_file:
        add_file_handler(log_file, level)

    root_logger.debug("Logging configured at %s", logging.getLevelName(numeric_level))

"""Logger setup: Rich console handler plus an append-only run log."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

from debsnap.config import LOG_DATE_FORMAT, LOG_FORMAT
from debsnap.console import TRANSCRIPT_LOGGER, console

LOGGER_NAME = "debsnap"


def setup_logger(log_file: Optional[Union[str, Path]], level: str = "INFO") -> logging.Logger:
    """
    Configure the application logger.

    Console output goes through a RichHandler at the requested level. The run
    log receives everything at DEBUG, including the transcript logger that
    carries command output and the status lines printed by the console
    helpers. The log is opened in append mode and never truncated. With no
    log_file the run is console-only.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()

    console_handler = RichHandler(console=console, rich_tracebacks=True)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.addHandler(console_handler)

    # The transcript shares the file handler but never echoes to the console.
    record = logging.getLogger(TRANSCRIPT_LOGGER)
    record.setLevel(logging.DEBUG)
    record.propagate = False
    for h in record.handlers[:]:
        record.removeHandler(h)
    if log_file is None:
        record.addHandler(logging.NullHandler())
        return logger

    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(
        log_file, mode="a", encoding="utf-8", errors="backslashreplace"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    record.addHandler(file_handler)
    logger.debug(f"Logging initialized. Log file: {log_file}")

    try:
        os.chmod(str(log_file), 0o600)
    except OSError as e:
        logger.warning(f"Could not set permissions on log file {log_file}: {e}")
    return logger


def close_logger() -> None:
    """Detach and close every handler installed by setup_logger."""
    for name in (LOGGER_NAME, TRANSCRIPT_LOGGER):
        logger = logging.getLogger(name)
        for h in logger.handlers[:]:
            logger.removeHandler(h)
            h.close()
    logging.getLogger(TRANSCRIPT_LOGGER).addHandler(logging.NullHandler())

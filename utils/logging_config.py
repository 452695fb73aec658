"""
Logging configuration for the SRT normalization application.

Every module logs through get_logger(__name__), which places it under the
"srt_handle" namespace; one setup_logging() call then configures them all.

Console output goes to stderr (stdout is kept for command results) and is
colored when stderr is a terminal. An optional log file always records
DEBUG messages, so each rule decision can be reviewed after a run even
when the console is quiet.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from .constants import DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATE_FORMAT, LOGGER_NAME


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name with ANSI escapes."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Records are shared between handlers; restore the plain level name
        plain = record.levelname
        record.levelname = f"{self.COLORS.get(plain, self.RESET)}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def verbosity_level(verbose: bool = False, debug: bool = False) -> int:
    """Map the -v/-d command-line flags to a logging level."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
    logger_name: str = LOGGER_NAME
) -> logging.Logger:
    """
    Configure the application logger.

    Calling this again replaces the handlers of the previous call.

    Args:
        level: Console logging level
        log_file: Optional file that receives every message down to DEBUG
        use_colors: Color console output when stderr is a terminal
        logger_name: Logger to configure

    Returns:
        The configured logger

    Example:
        >>> logger = setup_logging(logging.INFO, Path("srt_handle.log"))
        >>> logger.info("Normalizing 12 transcripts")
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG if log_file else level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    formatter_class = ColoredFormatter if use_colors and sys.stderr.isatty() else logging.Formatter
    console_handler.setFormatter(formatter_class(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_LOG_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the application namespace.

    Args:
        name: Usually the calling module's __name__

    Returns:
        Logger named "srt_handle.<name>" (or the name itself if already nested)
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")

"""
Utility modules.

This package contains shared utility functions and configurations:
- File I/O operations and backup utilities
- Logging configuration
- Shared constants and configurations
"""

from .file_operations import FileHandler
from .logging_config import setup_logging, get_logger
from .constants import (
    SUBTITLE_EXTENSIONS,
    ENCODING_PRIORITY,
    UTF8_BOM,
    DEFAULT_MAX_LINE_WORDS,
    DEFAULT_MIN_LINE_WORDS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RULES_TEXT,
    DEFAULT_CONFIG_NAME,
    DEFAULT_OUTPUT_SUFFIX,
    BACKUP_DIR_NAME,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_DATE_FORMAT,
    APP_NAME,
    APP_VERSION,
    APP_DESCRIPTION,
)

__all__ = [
    'FileHandler',
    'setup_logging',
    'get_logger',
    'SUBTITLE_EXTENSIONS',
    'ENCODING_PRIORITY',
    'UTF8_BOM',
    'DEFAULT_MAX_LINE_WORDS',
    'DEFAULT_MIN_LINE_WORDS',
    'DEFAULT_MAX_ITERATIONS',
    'DEFAULT_RULES_TEXT',
    'DEFAULT_CONFIG_NAME',
    'DEFAULT_OUTPUT_SUFFIX',
    'BACKUP_DIR_NAME',
    'DEFAULT_LOG_FORMAT',
    'DEFAULT_LOG_DATE_FORMAT',
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
]

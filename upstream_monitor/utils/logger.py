"""
Logging configuration utility.
"""

import logging
import sys
from typing import Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ('urllib3', 'httpx', 'httpcore', 'groq')


def setup_logging(
    level: str = 'INFO',
    format_str: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for the monitor.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_str: Log message format
        log_file: Optional file to write logs to

    Returns:
        Configured root logger
    """
    if format_str is None:
        format_str = DEFAULT_FORMAT

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_str)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so the printed report stays clean on stdout
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger

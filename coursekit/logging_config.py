"""
Logging Configuration
Sets up the 'coursekit' logger used by the helpers, the app and the fetch script.
"""
import logging
import sys
from typing import Optional

from coursekit.config import get_log_level


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'coursekit' namespace.

    Args:
        level: Logging level; defaults to COURSEKIT_LOG_LEVEL (INFO).
        log_file: Optional path to save logs to a file.
    """
    if level is None:
        level = get_log_level()

    logger = logging.getLogger("coursekit")
    logger.setLevel(level)

    # Streamlit re-runs the script on every interaction
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger

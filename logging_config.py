"""
Logging Configuration
Sets up the loggers for the growth, rendering and config packages.
"""
import logging
import sys
from typing import Optional

NAMESPACES = ('seedbloom', 'growth', 'rendering', 'config')


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to every project namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    file_handler = None
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

    for name in NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # re-running setup must not duplicate output
        logger.handlers.clear()
        logger.propagate = False
        logger.addHandler(console_handler)
        if file_handler is not None:
            logger.addHandler(file_handler)

    logger = logging.getLogger('seedbloom')
    logger.debug("Logging initialized.")
    return logger

"""
Logging Configuration

Console logging goes to stderr so stdout stays free for CLI reports. An
optional log file keeps a timestamped record of failed loads and
checkouts, which the shopper otherwise only sees inline.
"""

import logging
import os
import sys
from typing import Optional

PACKAGE_LOGGER = "storefront"

CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the storefront package logger.

    Args:
        verbose: If True, set level to DEBUG
        quiet: If True, the console only shows warnings and errors
        log_file: Optional path; the file gets every record at the package level

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if verbose else logging.INFO

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.setLevel(logging.WARNING if quiet and not verbose else level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Repeated calls replace the handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(console)

    if log_file:
        path = os.path.expanduser(log_file)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger

"""
logging_config.py — Centralized Logging Configuration for the Checkout Service

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to console and, optionally, to a file.

Features:
    • Combined console and file logging output
    • Process ID tagging for multi-process visibility
    • Standardized log format for all modules
    • Reduced verbosity for external dependencies (e.g., stripe, httpx)
"""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(level: str = "INFO", log_file: str = ""):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: taken from the settings (INFO by default)
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. Console (stdout): real-time logs, Docker/Kubernetes compatible
            2. File: only when `log_file` is set (persistent log)
        - Reduced verbosity for third-party libraries such as stripe and httpx

    Args:
        level (str): Name of the root log level (e.g. "DEBUG", "INFO").
        log_file (str): Path of the log file. An empty string disables file output.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # Reduce verbosity from external libraries
    for noisy in ("stripe", "httpx", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)

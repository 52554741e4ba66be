"""Logging configuration for the application."""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime


def setup_logging(service_name: str) -> logging.Logger:
    """
    Set up logging for a service with both console and file handlers.

    The file handler is skipped when LOG_TO_FILE is "false"; LOG_DIR picks
    the directory for it. Both are read from the environment because loggers
    are created at import time, before settings are validated.

    Args:
        service_name: Name of the service for log identification

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(service_name)
    logger.setLevel(logging.DEBUG)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if os.getenv("LOG_TO_FILE", "true").lower() not in ("0", "false", "no"):
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_handler = logging.FileHandler(
            log_dir / f"{service_name}_{timestamp}.log"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

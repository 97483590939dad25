"""
Logging setup for Zebra Proxy.

Log Format:
    2026-10-17 10:15:30 [INFO    ] zebra_proxy.handlers.tcp - Connected to printer at 10.0.0.5:9100

Usage:
    # At startup
    from zebra_proxy.logging_config import setup_logging
    setup_logging('DEBUG')

    # In modules
    logger = logging.getLogger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

APP_LOGGER = 'zebra_proxy'

LOG_FORMAT = '%(asctime)s [%(levelname)-8s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        log_level: Minimum level, as a number or a name such as "DEBUG"
        log_dir: Directory for a rotating log file; console only when None

    Returns:
        The configured "zebra_proxy" logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allow re-configuration
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_dir / f'{APP_LOGGER}.log',
            maxBytes=10 * 1024 * 1024,  # 10 MB per file
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"File logging enabled: {log_dir}")

    logger.debug(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger

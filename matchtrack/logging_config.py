"""Logging setup for the tracker command line."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def setup_logging(quiet: bool = False, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the 'matchtrack' logger for one tracker run.

    Console output goes to stdout next to the command's own report: INFO and
    up normally, WARNING and up with quiet. When log_dir is given, a
    timestamped log file there also gets the DEBUG detail from the matcher
    and the balancer (unmatched names, repair swaps).

    Args:
        quiet: Only show warnings and errors on the console (--quiet)
        log_dir: Directory for a log file (--log-dir); no file when None

    Returns:
        The configured 'matchtrack' logger
    """
    logger = logging.getLogger('matchtrack')
    console_level = logging.WARNING if quiet else logging.INFO
    logger.setLevel(logging.DEBUG if log_dir is not None else console_level)

    # Repeated runs in one process (tests) must not stack handlers
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'tracker_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)
        logger.debug(f'Logging to {log_file}')

    return logger

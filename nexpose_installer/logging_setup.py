# Path and File Name : /home/nexpose/setup/nexpose_installer/logging_setup.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Configures installer logging to stderr and an optional log file

"""
Logging configuration for the installer.

Operator-facing progress is printed; log records carry the command trail
(DEBUG) and warnings. Records go to stderr and, when requested, a log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import ConfigError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(level: str = 'WARNING', log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging to console and, optionally, to a file.

    Raises:
        ConfigError: If the log file cannot be opened
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file = Path(log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            raise ConfigError(f"Cannot open log file {log_file}: {e}")

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger('nexpose_installer')

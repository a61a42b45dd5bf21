"""
Logging utilities for FootyCast.

Every module logs through `get_logger(__name__)`. The first call configures
the root logger (stdout, timestamp, logger name, level) unless the host
application (uvicorn, streamlit, pytest) already did.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

# Third-party loggers that are too chatty at INFO for a polling service
_NOISY_LOGGERS = ("apscheduler", "urllib3")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger with the given name.

    Parameters
    ----------
    name : str | None
        Logger name. If None, the package logger "footycast" is returned.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger_name = name if name is not None else "footycast"
    logger = logging.getLogger(logger_name)

    if not logging.getLogger().handlers:
        level = os.getenv("FOOTYCAST_LOG_LEVEL", "INFO").upper()
        logging.basicConfig(level=level, format=LOG_FORMAT)
        for noisy in _NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger

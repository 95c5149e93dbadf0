"""Module that contains relevant functions for logging in seirdyn.

use_logging is the primary function that sets up and configures the global
seirdyn logger.
"""

import datetime
import logging
import os
import sys
from typing import Literal

from .custom_log_formatter import CustomLogFormatter

logger = logging.getLogger("seirdyn")

LOG_FORMAT = (
    "[%(levelname)s] %(asctime)s - %(filename)s - %(funcName)s: %(message)s"
)

_LEVELS = {
    "none": (logging.CRITICAL + 1, "NONE"),
    "debug": (logging.DEBUG, "DEBUG"),
    "info": (logging.INFO, "INFO"),
    "warn": (logging.WARN, "WARN"),
    "warning": (logging.WARN, "WARN"),
    "error": (logging.ERROR, "ERROR"),
    "critical": (logging.CRITICAL, "CRITICAL"),
}


def use_logging(
    level: Literal[
        "none", "debug", "info", "warn", "warning", "error", "critical"
    ] = "info",
    output: Literal["file", "console", "both"] = "file",
    log_path: str = "./logs",
) -> logging.Logger:
    """Set or disable logging within the seirdyn package.

    The logger instance can be retrieved from anywhere using
    logging.getLogger("seirdyn").

    Parameters
    ----------
    level : str, optional
        Log level desired. Choices from "none", "debug", "info", "warn",
        "error" and "critical". Defaults to "info".
    output : str, optional
        Output for logs. Choices from "console", "file", and "both".
        Defaults to "file".
    log_path : str, optional
        folder path to store log files. Defaults to "./logs".

    Returns
    -------
    logging.Logger
        the configured seirdyn logger.

    Notes
    -----
    Log level of NONE is considered CRITICAL + 1.
    """
    # clear logger handlers to avoid duplication in outputs
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if level.lower() in _LEVELS:
        log_level, level_name = _LEVELS[level.lower()]
    else:
        print(f"Did not recognize {level} as a valid log level. Using INFO.")
        log_level, level_name = _LEVELS["info"]

    logger.setLevel(log_level)
    formatter = CustomLogFormatter(LOG_FORMAT, datefmt="%Y-%m-%d_%H:%M:%S")

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(log_level)

    output = output.lower()
    if output.startswith("file") or output.startswith("both"):
        os.makedirs(log_path, exist_ok=True)
        start_time = datetime.datetime.now()
        logfile = os.path.join(
            log_path, f"{start_time:%Y-%m-%d_%Hh-%Mm-%Ss}.log"
        )
        file_handler = logging.FileHandler(logfile)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)
        if output.startswith("both"):
            logger.addHandler(stream_handler)
    elif output.startswith("console"):
        logger.addHandler(stream_handler)
    else:
        logger.addHandler(stream_handler)
        print(f"Did not recognize {output}. Logging to stdout.")
    print(f"Setting log level {level_name}.")
    return logger

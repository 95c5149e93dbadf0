"""Utility package to contain all utility modules."""

import logging

from . import log
from .custom_log_formatter import CustomLogFormatter
from .io import (
    derived_statistics,
    export_csv,
    load_input,
    save_output,
    trajectory_to_dataframe,
)
from .log_decorator import log_decorator

# Fetching the global logger called seirdyn
logger = logging.getLogger("seirdyn")

__all__ = [
    "log",
    "log_decorator",
    "CustomLogFormatter",
    "logger",
    "save_output",
    "load_input",
    "derived_statistics",
    "trajectory_to_dataframe",
    "export_csv",
]

"""
SVNX Logging Module

This module provides logging functionality for the SVNX CLI tool.
It includes svn command tracking, cross-platform log storage,
and automatic sanitization of repository credentials.

Key Features:
- Single log file with daily rotation
- Cross-platform log directory detection
- svn command logging with exit status and timing
- Configurable log levels and formatting
"""

from .logger import (
    get_logger,
    setup_logging,
    LogLevel,
    log_svn_call,
    log_application_event,
)
from .config import LogConfig
from .utils import sanitize_data, get_log_directory

__all__ = [
    "get_logger",
    "setup_logging",
    "log_svn_call",
    "log_application_event",
    "LogLevel",
    "LogConfig",
    "sanitize_data",
    "get_log_directory"
]

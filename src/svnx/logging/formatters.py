"""
Custom formatters for SVNX logging.

This module provides specialized formatters for svn command logging
and general application logs.
"""

import logging
from datetime import datetime
from .utils import sanitize_data, sanitize_string
from svnx.constants import SENSITIVE_KEYS


class SvnxFormatter(logging.Formatter):
    """
    Custom formatter for SVNX log entries.

    Provides structured formatting with optional components and
    automatic sanitization of sensitive data.
    """

    def __init__(
        self,
        include_timestamps: bool = True,
        include_thread_info: bool = False,
        include_process_info: bool = False,
        sanitize_sensitive: bool = True,
        sensitive_keys: tuple = None,
    ):
        self.include_timestamps = include_timestamps
        self.include_thread_info = include_thread_info
        self.include_process_info = include_process_info
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_keys = sensitive_keys or SENSITIVE_KEYS
        fmt_parts = []
        if include_timestamps:
            fmt_parts.append("%(asctime)s")
        fmt_parts.extend(["%(levelname)s", "[%(name)s]", "%(message)s"])
        if include_thread_info:
            fmt_parts.insert(-1, "[Thread:%(thread)d]")
        if include_process_info:
            fmt_parts.insert(-1, "[PID:%(process)d]")
        fmt_string = " ".join(fmt_parts)
        super().__init__(fmt=fmt_string, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record with optional sanitization.
        Args:
            record: The log record to format
        Returns:
            str: Formatted log message
        """
        if self.sanitize_sensitive and hasattr(record, "msg"):
            if isinstance(record.msg, (dict, list)):
                record.msg = sanitize_data(record.msg, self.sensitive_keys)
            elif isinstance(record.msg, str):
                record.msg = sanitize_string(record.msg)
            if isinstance(record.args, (tuple, list)):
                record.args = tuple(
                    sanitize_data(arg, self.sensitive_keys)
                    if isinstance(arg, (dict, list, str))
                    else arg
                    for arg in record.args
                )

        return super().format(record)


class CommandCallFormatter(logging.Formatter):
    """
    Specialized formatter for svn command logging.

    Creates one line per invocation with exit status and timing, plus the
    error output when the command failed.
    """

    def __init__(self, sanitize_sensitive: bool = True):
        self.sanitize_sensitive = sanitize_sensitive
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        command = getattr(record, "svn_command", "UNKNOWN")
        target = getattr(record, "svn_target", "")
        returncode = getattr(record, "svn_returncode", None)
        status = "---" if returncode is None else returncode
        duration = round(getattr(record, "svn_duration", 0) * 1000, 2)

        if self.sanitize_sensitive:
            target = sanitize_string(str(target))

        # Example: 2026-02-02 17:27:34 DEBUG [svnx.svn] svn log svn://host/repo -> 0 (120.5ms)
        log_msg = (
            f"{timestamp} {record.levelname} [{record.name}] "
            f"svn {command} {target} -> {status} ({duration}ms)"
        )

        lines = [log_msg]

        error = getattr(record, "svn_error", None)
        if error:
            if self.sanitize_sensitive:
                error = sanitize_string(str(error))
            lines.append(f"    Error: {error}")

        return "\n".join(lines)


"""
Logging configuration for SVNX CLI.

This module handles log directory resolution, log file naming and the
settings that control what ends up in the log.
"""

import os
import platform
from pathlib import Path
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass
from svnx.constants import (
    LOG_DIR_ENV,
    LOG_FILE_NAME,
    LOG_RETENTION_DAYS,
    SENSITIVE_KEYS
)


class LogLevel(Enum):
    """Log levels for SVNX logging"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class LogConfig:
    """Configuration class for SVNX logging"""

    log_filename: str = f"{LOG_FILE_NAME}.log"
    log_retention_days: int = LOG_RETENTION_DAYS

    # File handler level; the console only shows warnings and errors
    default_level: LogLevel = LogLevel.INFO
    console_level: LogLevel = LogLevel.WARNING

    include_timestamps: bool = True
    include_thread_info: bool = False
    include_process_info: bool = False

    # One line per svn invocation in the same log file
    log_svn_commands: bool = True

    sanitize_sensitive_data: bool = True
    sensitive_keys: tuple = SENSITIVE_KEYS

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "LogConfig":
        """Build a config honoring the stored ``log_level`` setting."""
        config = cls()
        level = str(settings.get("log_level") or "").upper()
        if level in LogLevel.__members__:
            config.default_level = LogLevel[level]
        return config


def get_log_directory() -> Path:
    """
    Get the log directory.

    ``SVNX_LOG_DIR`` wins when set; otherwise the platform's usual place for
    application logs is used.

    Returns:
        Path: Existing log directory
    """
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        log_dir = Path(override)
    else:
        system = platform.system().lower()
        if system == "windows":
            base_dir = Path(os.environ.get("APPDATA", ""))
            if not base_dir.exists():
                base_dir = Path.home()
            log_dir = base_dir / LOG_FILE_NAME / "logs"
        elif system == "darwin":
            log_dir = Path.home() / "Library" / "Logs" / LOG_FILE_NAME
        else:
            xdg_data_home = os.environ.get("XDG_DATA_HOME")
            base_dir = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
            log_dir = base_dir / LOG_FILE_NAME / "logs"

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir
    except OSError:
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(exist_ok=True)
        return fallback_dir


def get_log_file_path(config: Optional[LogConfig] = None) -> Path:
    """Full path of the active log file."""
    if config is None:
        config = LogConfig()
    return get_log_directory() / config.log_filename

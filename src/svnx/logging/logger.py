"""
Main logging module for SVNX CLI.

This module provides the primary logging interface, logger setup,
and integration with the console output system with daily rotation.
"""

import logging
import logging.handlers
import sys
from typing import Optional, Dict, Any, Sequence

from .config import LogConfig, LogLevel, get_log_file_path
from .formatters import SvnxFormatter, CommandCallFormatter
from .utils import cleanup_old_logs
from svnx.constants import SVN_LOGGER_NAME


# Global logger registry
_loggers: Dict[str, logging.Logger] = {}
_logging_configured = False
_log_config: Optional[LogConfig] = None


def _rotating_handler(log_file_path, config: LogConfig) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_file_path,
        when='midnight',
        interval=1,
        backupCount=config.log_retention_days,
        encoding='utf-8',
        utc=False
    )
    # Rotated files get a YYYY-MM-DD suffix
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Set up the SVNX logging system.

    Args:
        config: LogConfig instance, uses default if None
        force_reconfigure: Force reconfiguration even if already set up
    """
    global _logging_configured, _log_config

    if _logging_configured and not force_reconfigure:
        return

    if config is None:
        # Unreadable settings fall back to the default level
        try:
            from svnx.utils.config_store import ConfigStore

            config = LogConfig.from_settings(ConfigStore().get_settings())
        except OSError:
            config = LogConfig()

    _log_config = config

    log_file_path = get_log_file_path(config)

    root_logger = logging.getLogger("svnx")
    root_logger.setLevel(getattr(logging, config.default_level.value))
    root_logger.handlers.clear()

    file_handler = _rotating_handler(log_file_path, config)
    file_handler.setLevel(getattr(logging, config.default_level.value))
    file_handler.setFormatter(SvnxFormatter(
        include_timestamps=config.include_timestamps,
        include_thread_info=config.include_thread_info,
        include_process_info=config.include_process_info,
        sanitize_sensitive=config.sanitize_sensitive_data,
        sensitive_keys=config.sensitive_keys
    ))
    root_logger.addHandler(file_handler)

    # Console handler for warnings and errors (batch skips, missing content)
    if config.console_level != LogLevel.ERROR or config.default_level == LogLevel.DEBUG:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, config.console_level.value))
        console_handler.setFormatter(SvnxFormatter(
            include_timestamps=False,  # Console doesn't need timestamps
            sanitize_sensitive=config.sanitize_sensitive_data,
            sensitive_keys=config.sensitive_keys
        ))
        root_logger.addHandler(console_handler)

    # svn command logger with its own formatting
    svn_logger = logging.getLogger(SVN_LOGGER_NAME)
    svn_logger.setLevel(logging.DEBUG)  # Always capture svn invocations
    svn_logger.handlers.clear()

    if config.log_svn_commands:
        svn_handler = _rotating_handler(log_file_path, config)
        svn_handler.setLevel(logging.DEBUG)
        svn_handler.setFormatter(
            CommandCallFormatter(sanitize_sensitive=config.sanitize_sensitive_data)
        )
        svn_logger.addHandler(svn_handler)

    # Prevent propagation to avoid duplicate entries
    svn_logger.propagate = False

    try:
        cleanup_old_logs(log_file_path.parent, config.log_retention_days)
    except OSError:
        # Stale logs are retried on the next run
        pass

    _logging_configured = True

    setup_logger = get_logger("svnx.setup")
    setup_logger.info(f"Logging initialized - File: {log_file_path}, "
                      f"Level: {config.default_level.value}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified name.

    Args:
        name: Logger name (e.g., 'svnx.retrieval.pipeline')

    Returns:
        logging.Logger: Logger instance
    """
    if not _logging_configured:
        setup_logging()

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_svn_call(
    command: str,
    target: str,
    returncode: Optional[int] = None,
    duration: Optional[float] = None,
    arguments: Optional[Sequence[str]] = None,
    error: Optional[str] = None,
    logger_name: str = SVN_LOGGER_NAME
) -> None:
    """
    Log one svn invocation with structured information.

    Args:
        command: svn subcommand (log, info, cat, ...)
        target: URL or URL@peg the command ran against
        returncode: Process exit status
        duration: Wall-clock duration in seconds
        arguments: Extra command-line arguments
        error: Error output if the command failed
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)

    extra = {
        "svn_command": command,
        "svn_target": target,
        "svn_returncode": returncode,
        "svn_duration": duration or 0,
    }
    if arguments:
        extra["svn_arguments"] = list(arguments)
    if error:
        extra["svn_error"] = error

    if error or (returncode is not None and returncode != 0):
        logger.warning("svn command failed", extra=extra)
    else:
        logger.debug("svn command completed", extra=extra)


def log_application_event(
    event: str,
    level: str = "info",
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "svnx.app"
) -> None:
    """
    Log application-level events at appropriate levels.

    Args:
        event: Description of the event
        level: Log level (debug, info, warning, error)
        details: Additional event details
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)
    extra = {"app_event": event}

    if details:
        from .utils import sanitize_data
        from svnx.constants import SENSITIVE_KEYS
        extra["app_details"] = sanitize_data(details, SENSITIVE_KEYS)

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(f"Application: {event}", extra=extra)

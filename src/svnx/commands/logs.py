"""
Log management commands for SVNX CLI.

Shows the application log (including the one-line-per-invocation svn
command trace), reports where logs live, and prunes rotated log files.
"""

import time
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.syntax import Syntax
from svnx.logging import get_logger, setup_logging
from svnx.logging.config import LogConfig, get_log_file_path, get_log_directory
from svnx.logging.utils import cleanup_old_logs, format_size
from svnx.utils.console import error, info, success, warning
from svnx.constants import (
    LOG_APP_NAME,
    LOG_FILE_NAME,
    LOG_LINES_TO_SHOW,
    SVN_LOGGER_NAME,
)

app = typer.Typer(help="Manage SVNX logs")
console = Console()


def _matches(line: str, level: Optional[str], svn_only: bool) -> bool:
    if level and level.upper() not in line:
        return False
    if svn_only and f"[{SVN_LOGGER_NAME}]" not in line:
        return False
    return True


def select_lines(
    lines: List[str],
    count: int,
    level: Optional[str] = None,
    svn_only: bool = False,
) -> List[str]:
    """Return the last ``count`` lines that pass the level and svn filters"""
    selected = [line for line in lines if _matches(line, level, svn_only)]
    return selected[-count:] if count > 0 else []


@app.command("show")
def show_logs(
    lines: int = typer.Option(
        LOG_LINES_TO_SHOW, "--lines", "-n", help="Number of lines to show"
    ),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
    level: Optional[str] = typer.Option(
        None, "--level", help="Filter by log level (DEBUG, INFO, WARNING, ERROR)"
    ),
    svn_only: bool = typer.Option(
        False, "--svn", help="Only show svn command invocations"
    ),
) -> None:
    """Show recent log entries"""
    setup_logging()
    logger = get_logger("svnx.commands.logs")

    try:
        log_file = get_log_file_path()

        if not log_file.exists():
            warning(
                f"No log file found. Run some {LOG_APP_NAME} commands to generate logs."
            )
            return

        with open(log_file, "r", encoding="utf-8") as f:
            display_lines = select_lines(f.readlines(), lines, level, svn_only)

        if not display_lines:
            info("No log entries found matching the criteria.")
            return

        logger.info(f"Displaying last {len(display_lines)} lines from log file")
        syntax = Syntax("".join(display_lines), "log", theme="monokai", line_numbers=False)
        console.print(syntax)

        if follow:
            info("Following log file... (Press Ctrl+C to stop)")
            try:
                with open(log_file, "r", encoding="utf-8") as f:
                    f.seek(0, 2)
                    while True:
                        line = f.readline()
                        if not line:
                            time.sleep(0.1)
                        elif _matches(line, level, svn_only):
                            console.print(line.rstrip(), markup=False)
            except KeyboardInterrupt:
                info("\nStopped following logs.")

    except OSError as e:
        logger.error(f"Failed to show logs: {str(e)}")
        error(f"Failed to show logs: {str(e)}")
        raise typer.Exit(1)


@app.command("info")
def log_info() -> None:
    """Show log configuration and file information"""
    setup_logging()
    logger = get_logger("svnx.commands.logs")

    try:
        config = LogConfig()
        log_file = get_log_file_path(config)
        log_dir = get_log_directory()

        table = Table(
            title=f"{LOG_APP_NAME} Log Information",
            show_header=True,
            header_style="bold blue",
        )
        table.add_column("Setting", style="cyan", no_wrap=True)
        table.add_column("Value", style="white")

        table.add_row("Log Directory", str(log_dir))
        table.add_row("Log File", str(log_file))
        table.add_row("Log Level", config.default_level.value)
        table.add_row("Rotation", "Daily at midnight")
        table.add_row("Retention Days", str(config.log_retention_days))

        if log_file.exists():
            stat = log_file.stat()
            table.add_row("Current Size", format_size(stat.st_size))
            modified = datetime.fromtimestamp(stat.st_mtime)
            table.add_row("Last Modified", modified.strftime("%Y-%m-%d %H:%M:%S"))
        else:
            table.add_row("Current Size", "File not found")
            table.add_row("Last Modified", "N/A")

        rotated_files = list(log_dir.glob(f"{LOG_FILE_NAME}.log.*"))
        table.add_row("Rotated Files", str(len(rotated_files)))

        console.print(table)
        logger.info("Displayed log information")

    except OSError as e:
        logger.error(f"Failed to show log info: {str(e)}")
        error(f"Failed to show log info: {str(e)}")
        raise typer.Exit(1)


@app.command("clean")
def clean_logs(
    days: int = typer.Option(
        LogConfig().log_retention_days,
        "--days",
        help="Remove rotated logs older than this many days",
    ),
) -> None:
    """Remove old rotated log files"""
    setup_logging()
    logger = get_logger("svnx.commands.logs")

    if days < 0:
        error("--days must not be negative")
        raise typer.Exit(1)

    try:
        removed = cleanup_old_logs(get_log_directory(), days)
    except OSError as e:
        logger.error(f"Failed to clean logs: {str(e)}")
        error(f"Failed to clean logs: {str(e)}")
        raise typer.Exit(1)

    logger.info(f"Removed {removed} rotated log files older than {days} days")
    success(f"Removed {removed} rotated log file(s)")

"""
Configuration management commands.

This module contains the typer commands for viewing and changing the
stored SVNX settings.
"""

import typer
from svnx.utils.config_store import ConfigStore, DEFAULT_SETTINGS
from svnx.utils.console import success, error, info
from .settings import display_settings
from svnx.logging import setup_logging, get_logger

app = typer.Typer(help="Manage SVNX settings")
config_store = ConfigStore()


@app.command("show")
def show() -> None:
    """Show current settings"""
    display_settings(config_store.get_settings(), str(config_store.settings_file))


@app.command("set")
def set_value(
    key: str = typer.Argument(
        ..., help=f"Setting name ({', '.join(DEFAULT_SETTINGS)})"
    ),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change a stored setting"""
    setup_logging()
    logger = get_logger("svnx.commands.config")

    try:
        stored = config_store.set_setting(key, value)
    except (KeyError, ValueError) as e:
        message = e.args[0] if e.args else str(e)
        logger.error(f"Failed to set {key}: {message}")
        error(f"Failed to set {key}: {message}")
        raise typer.Exit(1)
    except OSError as e:
        logger.error(f"Failed to save settings: {str(e)}")
        error(f"Failed to save settings: {str(e)}")
        raise typer.Exit(1)

    success(f"{key} set to {stored}")
    if key == "log_level":
        info("The new log level will take effect on the next SVNX command execution.")
    logger.info(f"Setting {key} changed to {stored}")


@app.command("reset")
def reset() -> None:
    """Restore the built-in defaults"""
    setup_logging()
    logger = get_logger("svnx.commands.config")

    config_store.reset_settings()
    success("Settings reset to defaults")
    logger.info("Settings reset to defaults")

"""
User settings resolution and display.

This module resolves option values from command-line arguments, stored
settings and built-in defaults, and renders the stored settings.
"""

from typing import Any, Dict, Optional

from svnx.utils.config_store import DEFAULT_SETTINGS
from svnx.utils.console import display_panel, warning


def get_setting_value(
    arg_value: Optional[Any],
    setting_key: str,
    settings: Dict[str, Any],
) -> Any:
    """Get option value with priority: argument > settings file > default"""
    if arg_value is not None:
        return arg_value

    if settings and setting_key in settings:
        return settings[setting_key]

    return DEFAULT_SETTINGS.get(setting_key)


def display_settings(settings: Dict[str, Any], source: str) -> None:
    """Display settings, marking the ones that differ from the defaults"""
    if not settings:
        warning("No settings found")
        return

    lines = []
    for key, value in settings.items():
        marker = "" if DEFAULT_SETTINGS.get(key) == value else "  (custom)"
        lines.append(f"{key}: {value}{marker}")

    display_panel("\n".join(lines), f"Settings ({source})", "blue")

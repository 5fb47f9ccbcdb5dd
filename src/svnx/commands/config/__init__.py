"""
Configuration management module.

- config_manager: typer commands for configuration management
- settings: option value resolution and settings display

Usage:
    from svnx.commands.config import app
"""

from .config_manager import app
from .settings import get_setting_value, display_settings

__all__ = [
    'app',
    'get_setting_value',
    'display_settings',
]

import os
import json
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from svnx.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EMAIL_DOMAIN,
    DEFAULT_PREVIEW_LENGTH,
    DEFAULT_SVN_BINARY,
)
from svnx.models import ContentMode

DEFAULT_SETTINGS: Dict[str, Any] = {
    "log_level": "INFO",
    "batch_size": DEFAULT_BATCH_SIZE,
    "content_mode": ContentMode.PREVIEW.value,
    "preview_length": DEFAULT_PREVIEW_LENGTH,
    "email_domain": DEFAULT_EMAIL_DOMAIN,
    "svn_binary": DEFAULT_SVN_BINARY,
}

INT_SETTINGS = ("batch_size", "preview_length")


class ConfigStore:
    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else self._get_config_dir()
        self.settings_file = self.base_dir / "settings.json"
        self._ensure_config_dir()

    def _get_config_dir(self) -> Path:
        """Get platform-specific config directory"""
        system = platform.system()
        if system == "Windows":
            base_dir = os.environ.get("APPDATA", "")
            return Path(base_dir) / "svnx"
        elif system == "Darwin":  # macOS
            return Path.home() / "Library" / "Application Support" / "svnx"
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
            if xdg_config:
                return Path(xdg_config) / "svnx"
            return Path.home() / ".svnx"

    def _ensure_config_dir(self):
        """Ensure config directory exists"""
        os.makedirs(self.base_dir, exist_ok=True)

    def _read_settings(self) -> Dict[str, Any]:
        if not self.settings_file.exists():
            return {}
        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, IOError):
            return {}

    def get_settings(self) -> Dict[str, Any]:
        """Get user settings merged over the built-in defaults"""
        return {**DEFAULT_SETTINGS, **self._read_settings()}

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a single setting, falling back to the built-in default"""
        settings = self.get_settings()
        if key in settings:
            return settings[key]
        return default

    def set_setting(self, key: str, value: Any) -> Any:
        """
        Validate and persist a single setting.

        Returns:
            The value as stored

        Raises:
            KeyError: Unknown setting name
            ValueError: Value not valid for the setting
        """
        if key not in DEFAULT_SETTINGS:
            raise KeyError(
                f"Unknown setting '{key}'. Known settings: {', '.join(DEFAULT_SETTINGS)}"
            )

        if key in INT_SETTINGS:
            value = int(value)
            if value < 1:
                raise ValueError(f"{key} must be a positive integer")
        elif key == "content_mode":
            value = ContentMode(str(value).lower()).value
        elif key == "log_level":
            value = str(value).upper()
            if value not in ("DEBUG", "INFO", "WARNING", "ERROR"):
                raise ValueError(f"Invalid log level: {value}")

        settings = self._read_settings()
        settings[key] = value
        with open(self.settings_file, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
        return value

    def reset_settings(self) -> None:
        """Remove all user settings"""
        if self.settings_file.exists():
            self.settings_file.unlink()

"""
Shared utilities for history commands.
"""

from .base_command import BaseCommand

__all__ = ["BaseCommand"]

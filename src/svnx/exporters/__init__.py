"""
Exporters for revision streams.
"""

from .base import RevisionExporter
from .console_exporter import ConsoleRevisionExporter
from .authors_exporter import AuthorsListExporter

__all__ = [
    "RevisionExporter",
    "ConsoleRevisionExporter",
    "AuthorsListExporter",
]

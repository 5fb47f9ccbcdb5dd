"""Base class for revision exporters."""

from abc import ABC, abstractmethod
from typing import Iterable

from svnx.models import RevisionRecord


class RevisionExporter(ABC):
    """Consumes a stream of revision records"""

    @abstractmethod
    def export(self, revisions: Iterable[RevisionRecord]) -> int:
        """Consume ``revisions`` and return how many were exported."""

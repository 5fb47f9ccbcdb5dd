"""Repository client contract used by the retrieval pipeline."""

from abc import ABC, abstractmethod
from typing import BinaryIO, ContextManager, Dict, List, Optional

from svnx.models import RawFileInfo, RawLogEntry, RepositoryInfo


class RepositoryClient(ABC):
    """Abstract base class for repository clients.

    One instance serves one retrieval call and is not reentrant. Every query
    is synchronous and raises a ``RepositoryClientError`` subclass on failure.
    """

    @abstractmethod
    def get_repository_info(self) -> RepositoryInfo:
        """Describe the repository, including its latest revision."""

    @abstractmethod
    def get_log(
        self,
        start: int,
        end: int,
        include_changed_paths: bool = True,
    ) -> List[RawLogEntry]:
        """Return log entries for ``start..end`` inclusive, ascending."""

    @abstractmethod
    def get_revision_properties(self, revision: int) -> Dict[str, str]:
        pass

    @abstractmethod
    def get_file_info(self, path: str, revision: int) -> RawFileInfo:
        pass

    @abstractmethod
    def get_property(self, path: str, revision: int, name: str) -> Optional[str]:
        """Return a versioned property value, or None when it is not set."""

    @abstractmethod
    def open_content(self, path: str, revision: int) -> ContextManager[BinaryIO]:
        """Open a binary stream over a file's content at ``revision``."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

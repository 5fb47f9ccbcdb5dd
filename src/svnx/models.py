"""
Data model for revision history retrieval.

Records produced by the retrieval pipeline are frozen dataclasses created
fresh per retrieval call. The ``Raw*`` types are what a repository client
hands back before any enrichment.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from svnx.constants import DEFAULT_PREVIEW_LENGTH


class ContentMode(Enum):
    """How much file content is materialized per changed path"""

    NONE = "none"
    PREVIEW = "preview"
    FULL = "full"


class ChangeAction(Enum):
    """Action applied to a changed path"""

    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"
    REPLACE = "replace"

    @classmethod
    def from_code(cls, code: str) -> "ChangeAction":
        """Map an svn action letter (A, D, M, R) to a member."""
        try:
            return _ACTION_CODES[code.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown change action: {code!r}") from None


_ACTION_CODES = {
    "A": ChangeAction.ADD,
    "D": ChangeAction.DELETE,
    "M": ChangeAction.MODIFY,
    "R": ChangeAction.REPLACE,
}


class NodeKind(Enum):
    """Kind of node a path refers to"""

    FILE = "file"
    DIR = "dir"
    NONE = "none"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "NodeKind":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class RetrievalOptions:
    """Options for one retrieval call"""

    include_changed_paths: bool = True
    include_revision_properties: bool = True
    content_mode: ContentMode = ContentMode.PREVIEW
    preview_length: int = DEFAULT_PREVIEW_LENGTH

    def __post_init__(self):
        if not isinstance(self.content_mode, ContentMode):
            object.__setattr__(self, "content_mode", ContentMode(self.content_mode))
        if self.preview_length < 1:
            raise ValueError(
                f"preview_length must be a positive integer, got {self.preview_length}"
            )


@dataclass(frozen=True)
class FileContentInfo:
    """Size, kind and (possibly truncated) content of a file at a revision"""

    size: Optional[int] = None
    node_kind: NodeKind = NodeKind.UNKNOWN
    is_binary: bool = False
    content: Optional[str] = None  # text files only
    binary_content: Optional[bytes] = None  # binary files only


@dataclass(frozen=True)
class ChangeRecord:
    """One path touched within a revision"""

    action: ChangeAction
    path: str
    repository_path: str
    node_kind: NodeKind
    content_modified: bool = False
    properties_modified: bool = False
    copy_from_path: Optional[str] = None
    copy_from_revision: Optional[int] = None
    file_info: Optional[FileContentInfo] = None  # None for directories and deletes

    @property
    def is_copy(self) -> bool:
        return self.copy_from_path is not None


@dataclass(frozen=True)
class RevisionRecord:
    """One revision with its optional enrichment.

    ``changes`` and ``properties`` are ``None`` when they were not requested,
    which is distinct from an empty tuple or mapping.
    """

    revision: int
    author: str
    date: Optional[datetime]
    message: str
    changes: Optional[Tuple[ChangeRecord, ...]] = None
    properties: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class RawChangedPath:
    action: ChangeAction
    path: str
    node_kind: NodeKind = NodeKind.UNKNOWN
    text_modified: Optional[bool] = None
    props_modified: Optional[bool] = None
    copy_from_path: Optional[str] = None
    copy_from_revision: Optional[int] = None


@dataclass(frozen=True)
class RawLogEntry:
    revision: int
    author: str
    date: Optional[datetime]
    message: str
    changed_paths: Optional[Tuple[RawChangedPath, ...]] = None


@dataclass(frozen=True)
class RawFileInfo:
    size: Optional[int]
    node_kind: NodeKind


@dataclass(frozen=True)
class RepositoryInfo:
    url: str
    root_url: str
    latest_revision: int
    uuid: Optional[str] = None

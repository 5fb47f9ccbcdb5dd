"""
Record builders.

Turn raw log entries and changed paths reported by a repository client into
RevisionRecord and ChangeRecord objects, fetching per-path file information
and per-revision properties only when the options ask for them.
"""

from typing import Dict, Optional

from svnx.client.base import RepositoryClient
from svnx.constants import RESERVED_REVISION_PROPERTIES
from svnx.errors import RepositoryClientError
from svnx.logging import get_logger
from svnx.models import (
    ChangeAction,
    ChangeRecord,
    NodeKind,
    RawChangedPath,
    RawLogEntry,
    RetrievalOptions,
    RevisionRecord,
)

from .materializer import ContentMaterializer

logger = get_logger("svnx.retrieval.builders")


def filter_revision_properties(properties: Dict[str, str]) -> Dict[str, str]:
    """Drop the log message, author and date properties."""
    return {
        name: value
        for name, value in properties.items()
        if name not in RESERVED_REVISION_PROPERTIES
    }


class ChangeRecordBuilder:
    """Builds ChangeRecord objects for the changed paths of a revision"""

    def __init__(self, materializer: ContentMaterializer, root_url: str):
        self.materializer = materializer
        self.root_url = root_url.rstrip("/")

    def build(self, revision: int, changed_path: RawChangedPath) -> ChangeRecord:
        file_info = None
        if (
            changed_path.action != ChangeAction.DELETE
            and changed_path.node_kind == NodeKind.FILE
        ):
            file_info = self.materializer.materialize(changed_path.path, revision)

        return ChangeRecord(
            action=changed_path.action,
            path=changed_path.path,
            repository_path=f"{self.root_url}{changed_path.path}",
            node_kind=changed_path.node_kind,
            content_modified=bool(changed_path.text_modified),
            properties_modified=bool(changed_path.props_modified),
            copy_from_path=changed_path.copy_from_path,
            copy_from_revision=changed_path.copy_from_revision,
            file_info=file_info,
        )


class RevisionRecordBuilder:
    """Builds RevisionRecord objects from raw log entries"""

    def __init__(
        self,
        client: RepositoryClient,
        options: RetrievalOptions,
        change_builder: ChangeRecordBuilder,
    ):
        self.client = client
        self.options = options
        self.change_builder = change_builder

    def build(self, entry: RawLogEntry) -> RevisionRecord:
        changes = None
        if self.options.include_changed_paths:
            changes = tuple(
                self.change_builder.build(entry.revision, changed_path)
                for changed_path in (entry.changed_paths or ())
            )

        properties = None
        if self.options.include_revision_properties:
            properties = self._revision_properties(entry.revision)

        return RevisionRecord(
            revision=entry.revision,
            author=entry.author,
            date=entry.date,
            message=entry.message,
            changes=changes,
            properties=properties,
        )

    def _revision_properties(self, revision: int) -> Optional[Dict[str, str]]:
        try:
            properties = self.client.get_revision_properties(revision)
        except RepositoryClientError as e:
            logger.warning(f"Could not get revision properties for r{revision}: {e}")
            return None
        return filter_revision_properties(properties)

"""
Authors list exporter.

Collects the distinct authors of a revision stream and optionally writes
them as ``<author> <author>@<domain>`` lines, the layout used by author
mapping files for repository conversion tools.
"""

from pathlib import Path
from typing import Iterable, Optional, Set

from svnx.logging import get_logger
from svnx.models import RevisionRecord
from svnx.utils.console import error, info, plain, warning

from .base import RevisionExporter

logger = get_logger("svnx.exporters.authors_exporter")


class AuthorsListExporter(RevisionExporter):
    """Collects distinct revision authors"""

    def __init__(self):
        self.authors: Optional[Set[str]] = None

    def export(self, revisions: Iterable[RevisionRecord]) -> int:
        self.authors = set()
        count = 0
        for revision in revisions:
            self.authors.add(revision.author)
            count += 1

        info("Authors:")
        for author in self.authors:
            plain(f"  {author}")

        logger.info(f"Collected {len(self.authors)} authors from {count} revisions")
        return count

    def write_to_file(self, file_name: str, email_domain: str) -> bool:
        """
        Write one ``<author> <author>@<domain>`` line per author.

        Args:
            file_name: Target file path
            email_domain: Domain appended to each author for the email part

        Returns:
            True if the file was written, False otherwise
        """
        if self.authors is None:
            warning("No authors found. Export must be called first.")
            return False

        path = Path(file_name)
        try:
            with open(path, "w", encoding="utf-8") as f:
                for author in self.authors:
                    f.write(f"{author} {author}@{email_domain}\n")
        except OSError as e:
            logger.error(f"Failed to write authors file {path}: {e}")
            error(f"Error writing to file: {e}")
            return False

        info(f"Authors written to {path.resolve()}")
        logger.info(f"Wrote {len(self.authors)} authors to {path.resolve()}")
        return True

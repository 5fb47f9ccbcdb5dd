"""
Console exporter.

Prints each revision with its changed paths, file previews and revision
properties in a fixed human-readable layout.
"""

from typing import Iterable, List, Optional

from rich.console import Console

from svnx.models import ChangeRecord, RevisionRecord
from svnx.utils.console import console as default_console, plain

from .base import RevisionExporter

SEPARATOR = "-" * 64


def format_binary_preview(data: Optional[bytes]) -> str:
    """Format bytes as space-separated upper-case hex pairs."""
    if not data:
        return ""
    return " ".join(f"{byte:02X}" for byte in data)


def format_change(change: ChangeRecord) -> List[str]:
    lines = [
        f"  Action: {change.action.value}",
        f"  Path: {change.path}",
        f"  Repository Path: {change.repository_path}",
        f"  Node Kind: {change.node_kind.value}",
        f"  Content Modified: {change.content_modified}",
        f"  Properties Modified: {change.properties_modified}",
        f"  Copy From Path: {change.copy_from_path or ''}",
        f"  Copy From Revision: "
        f"{'' if change.copy_from_revision is None else change.copy_from_revision}",
    ]

    info = change.file_info
    if info is not None:
        size = "unknown" if info.size is None else info.size
        lines.append(f"  File Size: {size} bytes")
        lines.append(f"  File Type: {info.node_kind.value}")
        if info.is_binary:
            lines.append("  Binary file content (hex):")
            lines.append("  " + format_binary_preview(info.binary_content))
        else:
            lines.append("  Text file content:")
            lines.append("  " + (info.content or ""))

    lines.append("")
    return lines


def format_revision(revision: RevisionRecord) -> List[str]:
    """Render one revision as the lines the console exporter prints."""
    date = revision.date.isoformat() if revision.date else ""
    lines = [
        SEPARATOR,
        f"Revision: {revision.revision}",
        f"Author: {revision.author}",
        f"Date: {date}",
        f"Message: {revision.message}",
        "Changed Paths:",
    ]

    for change in revision.changes or ():
        lines.extend(format_change(change))

    if revision.properties:
        lines.append("Properties:")
        for name, value in revision.properties.items():
            lines.append(f"  {name}: {value}")

    lines.append("")
    return lines


class ConsoleRevisionExporter(RevisionExporter):
    """Prints revisions to the console"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or default_console

    def export(self, revisions: Iterable[RevisionRecord]) -> int:
        count = 0
        for revision in revisions:
            for line in format_revision(revision):
                plain(line, self.console)
            count += 1
        return count

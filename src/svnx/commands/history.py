"""
Revision history commands.

``svnx log`` prints revisions with their changed paths and file previews;
``svnx authors`` collects the distinct authors of a repository.
"""

from typing import Optional

import typer

from svnx.exporters import AuthorsListExporter, ConsoleRevisionExporter
from svnx.models import ContentMode, RetrievalOptions
from svnx.utils.console import success
from .shared.base_command import BaseCommand


class LogCommand(BaseCommand):
    """Prints revision history to the console"""

    def run(
        self,
        url: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        batch_size: Optional[int] = None,
        content: Optional[str] = None,
        preview_length: Optional[int] = None,
        include_changed_paths: bool = True,
        include_revision_properties: bool = True,
        show_progress: bool = True,
    ) -> int:
        options = self.build_options(
            content=content,
            preview_length=preview_length,
            include_changed_paths=include_changed_paths,
            include_revision_properties=include_revision_properties,
        )
        return self.run_export(
            url,
            ConsoleRevisionExporter(),
            options,
            start=start,
            end=end,
            batch_size=batch_size,
            show_progress=show_progress,
        )


class AuthorsCommand(BaseCommand):
    """Collects distinct authors and optionally writes a mapping file"""

    def run(
        self,
        url: str,
        output: Optional[str] = None,
        email_domain: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        batch_size: Optional[int] = None,
        show_progress: bool = True,
    ) -> AuthorsListExporter:
        # Authors need neither paths, properties nor content
        options = RetrievalOptions(
            include_changed_paths=False,
            include_revision_properties=False,
            content_mode=ContentMode.NONE,
        )
        exporter = AuthorsListExporter()
        self.run_export(
            url,
            exporter,
            options,
            start=start,
            end=end,
            batch_size=batch_size,
            show_progress=show_progress,
        )

        if output:
            domain = self.setting(email_domain, "email_domain")
            if not exporter.write_to_file(output, domain):
                raise typer.Exit(1)
            success(f"Authors list saved ({len(exporter.authors)} authors)")
        return exporter


def show_log(
    url: str = typer.Argument(..., help="Repository URL"),
    start: Optional[int] = typer.Option(
        None, "--start", help="First revision (default: 1)"
    ),
    end: Optional[int] = typer.Option(
        None, "--end", help="Last revision (default: latest)"
    ),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", help="Revisions per log query"
    ),
    content: Optional[str] = typer.Option(
        None, "--content", help="File content mode: none, preview or full"
    ),
    preview_length: Optional[int] = typer.Option(
        None, "--preview-length", help="Preview length in characters (bytes for binary)"
    ),
    no_paths: bool = typer.Option(
        False, "--no-paths", help="Skip changed paths (and all file content)"
    ),
    no_props: bool = typer.Option(
        False, "--no-props", help="Skip revision properties"
    ),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Show a progress bar"
    ),
) -> None:
    """Print revision history with changed paths and file previews"""
    LogCommand().run(
        url,
        start=start,
        end=end,
        batch_size=batch_size,
        content=content,
        preview_length=preview_length,
        include_changed_paths=not no_paths,
        include_revision_properties=not no_props,
        show_progress=progress,
    )


def export_authors(
    url: str = typer.Argument(..., help="Repository URL"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write '<author> <author>@<domain>' lines to this file"
    ),
    email_domain: Optional[str] = typer.Option(
        None, "--email-domain", help="Email domain for the authors file"
    ),
    start: Optional[int] = typer.Option(None, "--start", help="First revision"),
    end: Optional[int] = typer.Option(None, "--end", help="Last revision"),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", help="Revisions per log query"
    ),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Show a progress bar"
    ),
) -> None:
    """List the distinct authors of a repository"""
    AuthorsCommand().run(
        url,
        output=output,
        email_domain=email_domain,
        start=start,
        end=end,
        batch_size=batch_size,
        show_progress=progress,
    )

"""
Base command class providing common functionality.

This module provides the base class shared by the history commands:
option resolution against stored settings, pipeline construction with an
optional progress bar, and uniform error reporting.
"""

from abc import ABC
from typing import Any, Dict, Optional

import typer

from svnx.client.svn_cli import SvnCommandClient
from svnx.commands.config.settings import get_setting_value
from svnx.errors import SvnxError
from svnx.exporters.base import RevisionExporter
from svnx.logging import get_logger
from svnx.models import ContentMode, RetrievalOptions
from svnx.retrieval.pipeline import RetrievalPipeline
from svnx.utils.config_store import ConfigStore
from svnx.utils.console import display_summary, error, warning
from svnx.utils.progress import TqdmProgressListener


class BaseCommand(ABC):
    """Base class for commands that read revision history"""

    def __init__(self, config_store: Optional[ConfigStore] = None):
        self.config_store = config_store or ConfigStore()
        self.settings: Dict[str, Any] = self.config_store.get_settings()
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    def setting(self, arg_value: Optional[Any], key: str) -> Any:
        return get_setting_value(arg_value, key, self.settings)

    def build_options(
        self,
        content: Optional[str] = None,
        preview_length: Optional[int] = None,
        include_changed_paths: bool = True,
        include_revision_properties: bool = True,
    ) -> RetrievalOptions:
        """Build retrieval options, exiting with an error on invalid values"""
        mode = str(self.setting(content, "content_mode")).lower()
        try:
            return RetrievalOptions(
                include_changed_paths=include_changed_paths,
                include_revision_properties=include_revision_properties,
                content_mode=ContentMode(mode),
                preview_length=int(self.setting(preview_length, "preview_length")),
            )
        except ValueError as e:
            self.logger.error(f"Invalid retrieval options: {str(e)}")
            error(f"Invalid option: {str(e)}")
            raise typer.Exit(1)

    def create_client(self, url: str) -> SvnCommandClient:
        return SvnCommandClient(url, svn_binary=self.setting(None, "svn_binary"))

    def run_export(
        self,
        url: str,
        exporter: RevisionExporter,
        options: RetrievalOptions,
        start: Optional[int] = None,
        end: Optional[int] = None,
        batch_size: Optional[int] = None,
        show_progress: bool = True,
    ) -> int:
        """
        Stream revisions from ``url`` into ``exporter``.

        Returns:
            Number of exported revisions
        """
        batch_size = int(self.setting(batch_size, "batch_size"))
        listener = TqdmProgressListener() if show_progress else None
        pipeline = RetrievalPipeline(
            client_factory=self.create_client,
            progress_listeners=[listener] if listener else [],
        )

        self.logger.info(
            f"Starting retrieval from {url} (content: {options.content_mode.value}, "
            f"batch size: {batch_size})"
        )
        try:
            with pipeline.retrieve(
                url,
                options=options,
                start_revision=start,
                end_revision=end,
                batch_size=batch_size,
            ) as stream:
                count = exporter.export(stream)
                progress = stream.progress
        except SvnxError as e:
            self.logger.error(f"Retrieval failed for {url}: {str(e)}")
            error(f"Retrieval failed: {str(e)}")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            self.logger.warning(f"Retrieval from {url} interrupted")
            warning("Interrupted")
            raise typer.Exit(130)
        finally:
            if listener is not None:
                listener.close()

        self.logger.info(f"Exported {count} revisions from {url}")
        if show_progress:
            display_summary(
                "Retrieval Summary",
                {
                    "Repository": stream.repository.root_url,
                    "Revisions": f"{stream.start_revision}-{stream.end_revision}",
                    "Exported": count,
                    "Skipped": progress.skipped,
                    "Elapsed": progress.elapsed,
                },
            )
        return count

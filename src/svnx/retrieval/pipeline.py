"""
Retrieval pipeline.

Single entry point for reading revision history: resolves the effective
revision range, drives the batch paginator and builds revision records one
at a time as the consumer pulls them.
"""

import threading
from typing import Callable, Iterable, Iterator, Optional

from svnx.client.base import RepositoryClient
from svnx.client.svn_cli import SvnCommandClient
from svnx.constants import DEFAULT_BATCH_SIZE, DEFAULT_START_REVISION
from svnx.errors import (
    RepositoryClientError,
    RepositoryUnavailableError,
    RetrievalError,
)
from svnx.logging import get_logger
from svnx.models import RepositoryInfo, RetrievalOptions, RevisionRecord

from .builders import ChangeRecordBuilder, RevisionRecordBuilder
from .materializer import ContentMaterializer
from .paginator import BatchPaginator, BatchResult
from .progress import ProgressEstimator, ProgressListener, ProgressSnapshot, format_duration

logger = get_logger("svnx.retrieval.pipeline")

ClientFactory = Callable[[str], RepositoryClient]


class RevisionStream:
    """
    Lazy stream of RevisionRecord objects for one retrieval call.

    The stream owns the repository client of the call and closes it when
    iteration is exhausted, when iteration fails, or when ``close()`` is
    called. Each ``next()`` may block on repository queries.
    """

    def __init__(
        self,
        client: RepositoryClient,
        records: Iterator[RevisionRecord],
        repository: RepositoryInfo,
        estimator: ProgressEstimator,
        start_revision: int,
        end_revision: int,
    ):
        self._client = client
        self._records = records
        self.repository = repository
        self.estimator = estimator
        self.start_revision = start_revision
        self.end_revision = end_revision
        self.closed = False

    @property
    def progress(self) -> ProgressSnapshot:
        return self.estimator.snapshot()

    def __iter__(self) -> "RevisionStream":
        return self

    def __next__(self) -> RevisionRecord:
        if self.closed:
            raise StopIteration
        try:
            return next(self._records)
        except BaseException:
            # StopIteration included: the client is released on every exit path
            self.close()
            raise

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._records.close()
        finally:
            self._client.close()

    def __enter__(self) -> "RevisionStream":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class RetrievalPipeline:
    """Builds revision streams from a repository location"""

    def __init__(
        self,
        client_factory: ClientFactory = SvnCommandClient,
        progress_listeners: Iterable[ProgressListener] = (),
    ):
        self.client_factory = client_factory
        self.progress_listeners = list(progress_listeners)

    def retrieve(
        self,
        location: str,
        options: Optional[RetrievalOptions] = None,
        start_revision: Optional[int] = None,
        end_revision: Optional[int] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        cancel_event: Optional[threading.Event] = None,
    ) -> RevisionStream:
        """
        Start retrieving revision history.

        The repository is contacted before this returns, so an invalid or
        unreachable location fails here and never as part of iteration.

        Args:
            location: Repository URL
            options: Retrieval options, defaults when None
            start_revision: First revision, 1 when None
            end_revision: Last revision, the latest revision when None
            batch_size: Revisions per log query
            cancel_event: Checked before each batch; setting it ends the stream

        Returns:
            RevisionStream yielding RevisionRecord objects in ascending order

        Raises:
            RetrievalError: Invalid revision range or batch size
            InvalidRepositoryLocationError: Location is not a repository URL
            RepositoryUnavailableError: Repository could not be described
        """
        options = options or RetrievalOptions()
        start = DEFAULT_START_REVISION if start_revision is None else start_revision
        if batch_size < 1:
            raise RetrievalError(f"Batch size must be at least 1, got {batch_size}")
        if start < 0 or (end_revision is not None and end_revision < 0):
            raise RetrievalError("Revision numbers must not be negative")

        client = self.client_factory(location)
        try:
            repository = client.get_repository_info()
        except RepositoryUnavailableError:
            client.close()
            raise
        except RepositoryClientError as e:
            client.close()
            raise RepositoryUnavailableError(
                f"Could not resolve the latest revision of {location}: {e}"
            ) from e
        except Exception:
            client.close()
            raise

        latest = repository.latest_revision
        end = latest if end_revision is None else end_revision
        if end > latest:
            logger.warning(
                f"End revision {end} is beyond the latest revision {latest}; using {latest}"
            )
            end = latest

        logger.info(f"Total revisions: {latest}")
        logger.info(f"Processing revisions from {start} to {end}")

        estimator = ProgressEstimator(target=max(end - start + 1, 0))
        for listener in self.progress_listeners:
            estimator.add_listener(listener)
        estimator.start()

        def on_batch_complete(result: BatchResult) -> None:
            estimator.record_batch(result.count, result.elapsed_seconds, result.failed)

        paginator = BatchPaginator(
            client,
            start=start,
            end=end,
            total=latest,
            batch_size=batch_size,
            include_changed_paths=options.include_changed_paths,
            on_batch_complete=on_batch_complete,
            cancel_event=cancel_event,
        )
        materializer = ContentMaterializer(client, options)
        builder = RevisionRecordBuilder(
            client,
            options,
            ChangeRecordBuilder(materializer, repository.root_url),
        )

        return RevisionStream(
            client,
            self._records(paginator, builder, estimator),
            repository,
            estimator,
            start,
            end,
        )

    @staticmethod
    def _records(
        paginator: BatchPaginator,
        builder: RevisionRecordBuilder,
        estimator: ProgressEstimator,
    ) -> Iterator[RevisionRecord]:
        for entry in paginator:
            yield builder.build(entry)

        logger.info(
            f"Finished processing {estimator.processed} revisions in "
            f"{format_duration(estimator.elapsed_seconds)}"
        )
        if estimator.skipped:
            logger.warning(
                f"Skipped {estimator.skipped} revisions in batches that could not be retrieved"
            )


def retrieve(
    location: str,
    options: Optional[RetrievalOptions] = None,
    start_revision: Optional[int] = None,
    end_revision: Optional[int] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    cancel_event: Optional[threading.Event] = None,
) -> RevisionStream:
    """Retrieve revision history with the svn command-line client."""
    return RetrievalPipeline().retrieve(
        location,
        options=options,
        start_revision=start_revision,
        end_revision=end_revision,
        batch_size=batch_size,
        cancel_event=cancel_event,
    )

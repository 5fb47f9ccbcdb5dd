"""
Batch paginator for revision log retrieval.

Splits a revision range into consecutive batches, issues one log query per
batch and yields raw log entries lazily in ascending order. A batch whose
query fails is reported and skipped; pagination always moves on.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from svnx.client.base import RepositoryClient
from svnx.constants import DEFAULT_BATCH_SIZE, DEFAULT_START_REVISION
from svnx.errors import RepositoryClientError
from svnx.logging import get_logger
from svnx.models import RawLogEntry

logger = get_logger("svnx.retrieval.paginator")


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch"""

    start: int
    end: int
    count: int
    elapsed_seconds: float
    failed: bool = False

    @property
    def size(self) -> int:
        return self.end - self.start + 1


class BatchPaginator:
    """Lazy, forward-only iteration over ``[start, end]`` in fixed-size batches"""

    def __init__(
        self,
        client: RepositoryClient,
        start: int = DEFAULT_START_REVISION,
        end: Optional[int] = None,
        total: Optional[int] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        include_changed_paths: bool = True,
        on_batch_complete: Optional[Callable[[BatchResult], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if end is None:
            if total is None:
                raise ValueError("Either end or total must be given")
            end = total

        self.client = client
        self.start = start
        self.end = end
        self.total = total if total is not None else end
        self.batch_size = batch_size
        self.include_changed_paths = include_changed_paths
        self.on_batch_complete = on_batch_complete
        self.cancel_event = cancel_event

    def batches(self) -> Iterator[tuple]:
        """Yield the ``(batch_start, batch_end)`` ranges that will be queried."""
        cursor = self.start
        while cursor <= self.end:
            batch_end = min(cursor + self.batch_size - 1, self.end)
            yield cursor, batch_end
            cursor = batch_end + 1

    def __iter__(self) -> Iterator[RawLogEntry]:
        for batch_start, batch_end in self.batches():
            if self.cancel_event is not None and self.cancel_event.is_set():
                logger.info(
                    f"Retrieval cancelled before revisions {batch_start}-{batch_end}"
                )
                return

            started = time.monotonic()
            try:
                entries = self.client.get_log(
                    batch_start, batch_end, self.include_changed_paths
                )
            except RepositoryClientError as e:
                logger.warning(
                    f"Could not retrieve logs for revisions {batch_start}-{batch_end}. "
                    f"Skipping... ({e})"
                )
                self._complete(
                    BatchResult(
                        start=batch_start,
                        end=batch_end,
                        count=batch_end - batch_start + 1,
                        elapsed_seconds=time.monotonic() - started,
                        failed=True,
                    )
                )
                continue

            logger.debug(
                f"Retrieved {len(entries)} log entries for revisions "
                f"{batch_start}-{batch_end}"
            )
            for entry in entries:
                yield entry

            self._complete(
                BatchResult(
                    start=batch_start,
                    end=batch_end,
                    count=len(entries),
                    elapsed_seconds=time.monotonic() - started,
                )
            )

    def _complete(self, result: BatchResult) -> None:
        if self.on_batch_complete is not None:
            self.on_batch_complete(result)

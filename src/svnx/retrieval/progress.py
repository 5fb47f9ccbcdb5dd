"""
Progress estimation for paginated retrieval.

Tracks per-batch throughput with a moving average over the most recent
batches and derives elapsed/remaining time estimates. Estimation is purely
observational and never influences retrieval.
"""

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from svnx.constants import SPEED_WINDOW_SIZE
from svnx.logging import get_logger

logger = get_logger("svnx.retrieval.progress")


def format_duration(seconds: float) -> str:
    """Format seconds as hh:mm:ss."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress after a batch completes"""

    processed: int
    skipped: int
    target: int
    percent: float
    elapsed_seconds: float
    remaining_seconds: float
    average_speed: float

    @property
    def elapsed(self) -> str:
        return format_duration(self.elapsed_seconds)

    @property
    def remaining(self) -> str:
        return format_duration(self.remaining_seconds)

    def describe(self) -> str:
        return (
            f"Processed {self.processed}/{self.target}, {self.percent:.1f}% revisions. "
            f"Elapsed: {self.elapsed}, Remaining: {self.remaining}"
        )


ProgressListener = Callable[[ProgressSnapshot], None]


class ProgressEstimator:
    """Moving-average throughput and ETA over completed batches"""

    def __init__(
        self,
        target: int,
        window: int = SPEED_WINDOW_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window < 1:
            raise ValueError("window must be at least 1")
        self.target = max(int(target), 0)
        self.processed = 0
        self.skipped = 0
        self._clock = clock
        self._started_at: Optional[float] = None
        self._speeds: Deque[float] = deque(maxlen=window)
        self._last_speed = 0.0
        self._listeners: List[ProgressListener] = []

    def add_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        """Mark the beginning of the retrieval call."""
        self._started_at = self._clock()

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return max(self._clock() - self._started_at, 0.0)

    def add_sample(self, speed: Optional[float]) -> None:
        """
        Record one throughput sample in revisions per second.

        Zero and undefined samples are remembered as the latest raw sample
        but never enter the averaging window.
        """
        speed = float(speed or 0.0)
        self._last_speed = speed
        if speed > 0:
            self._speeds.append(speed)

    @property
    def average_speed(self) -> float:
        if self._speeds:
            return sum(self._speeds) / len(self._speeds)
        return self._last_speed

    def record_batch(
        self,
        revisions: int,
        elapsed_seconds: float,
        failed: bool = False,
    ) -> ProgressSnapshot:
        """
        Observe one completed batch and notify listeners.

        Args:
            revisions: Number of revisions the batch produced
            elapsed_seconds: Wall-clock time spent on the batch
            failed: The batch was skipped after a retrieval failure

        Returns:
            ProgressSnapshot after the batch
        """
        if self._started_at is None:
            self.start()

        if failed:
            self.skipped += revisions
        else:
            self.processed += revisions
            speed = revisions / elapsed_seconds if elapsed_seconds > 0 else 0.0
            self.add_sample(speed)

        snapshot = self.snapshot()
        logger.debug(snapshot.describe())
        for listener in self._listeners:
            listener(snapshot)
        return snapshot

    def snapshot(self) -> ProgressSnapshot:
        average = self.average_speed
        remaining = max(self.target - self.processed, 0)
        eta = remaining / average if average > 0 else 0.0
        percent = round(self.processed * 100 / self.target, 1) if self.target else 100.0
        return ProgressSnapshot(
            processed=self.processed,
            skipped=self.skipped,
            target=self.target,
            percent=percent,
            elapsed_seconds=self.elapsed_seconds,
            remaining_seconds=eta,
            average_speed=average,
        )

"""
Progress bar for long-running retrievals.

Renders ProgressEstimator snapshots on a tqdm bar.
"""

from typing import Optional

from tqdm import tqdm

from svnx.retrieval.progress import ProgressSnapshot


class TqdmProgressListener:
    """Receives progress snapshots and mirrors them on a tqdm bar"""

    def __init__(self, description: str = "📥 Retrieving revisions"):
        self.description = description
        self._bar: Optional[tqdm] = None

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        if self._bar is None:
            self._bar = tqdm(
                total=snapshot.target,
                desc=self.description,
                unit="rev",
                bar_format="{l_bar}{bar:40}| {n_fmt}/{total_fmt} {postfix}",
                colour="blue",
                ncols=100,
                leave=True,
            )

        done = snapshot.processed + snapshot.skipped
        self._bar.update(max(done - self._bar.n, 0))
        self._bar.set_postfix_str(
            f"elapsed {snapshot.elapsed}, remaining {snapshot.remaining}"
        )

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

"""Fan-out of one change across every participant's bracket.

Reconciliation, renames and bulk resets write one document per participant.
The writes are independent, so they run on a thread pool; the batch waits
for all of them and reports which participants failed. Every task is
idempotent, so a failed batch can simply be re-run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from tqdm import tqdm

import config
from engine.errors import PartialBatchFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BatchResult:
    total: int = 0
    succeeded: int = 0
    failed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return f"updated {self.succeeded} of {self.total} brackets"

    def raise_for_failures(self):
        """Raise PartialBatchFailure if any participant failed."""
        if self.failed:
            raise PartialBatchFailure(self)

    def to_dict(self) -> dict:
        return {"total": self.total, "succeeded": self.succeeded, "failed": list(self.failed)}


def run_batch(items: dict[str, T], task: Callable[[str, T], None],
              max_workers: int = config.DEFAULT_BATCH_WORKERS,
              show_progress: bool = False, desc: str = "Updating brackets") -> BatchResult:
    """Run task(participant_id, item) for every item and collect the outcome.

    Args:
        items: {participant_id: item}
        task: Called once per participant; raising marks that participant failed
        max_workers: Thread pool size
        show_progress: Show a tqdm progress bar
        desc: Progress bar label

    Returns:
        BatchResult with failed participant ids sorted
    """
    result = BatchResult(total=len(items))
    if not items:
        return result

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(task, pid, item): pid for pid, item in items.items()}
        completed = as_completed(futures)
        if show_progress:
            completed = tqdm(completed, total=len(futures), desc=desc, unit="bracket")

        for future in completed:
            pid = futures[future]
            try:
                future.result()
            except Exception as e:
                logger.warning("Participant %s failed: %s", pid, e)
                result.failed.append(pid)
                result.errors[pid] = str(e)
            else:
                result.succeeded += 1

    result.failed.sort()
    level = logging.INFO if result.ok else logging.WARNING
    logger.log(level, "%s: %s", desc, result.summary())
    return result

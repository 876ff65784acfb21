"""Sequential batch execution with per-target outcomes."""

import time
from typing import Callable, Optional, Sequence

from .models import BatchItem, BatchResult, CommandResult
from ..util.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BATCH_DELAY = 0.1


def run_batch(
    targets: Sequence[str],
    operation: Callable[[str], CommandResult],
    delay: float = DEFAULT_BATCH_DELAY,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """Apply ``operation`` to every target, one after another.

    A failing target is recorded and the batch carries on. ``delay`` seconds
    are waited between targets.
    """
    results = BatchResult()
    total = len(targets)

    for i, target in enumerate(targets):
        if progress_callback:
            progress_callback(i + 1, total, target)

        outcome = operation(target)
        results.items.append(BatchItem(target=target, output=outcome.output, error=outcome.error))

        if outcome.error is not None:
            logger.warning(f"Failed {i + 1}/{total}: {target}: {outcome.error}")

        if delay > 0 and i < total - 1:
            sleep(delay)

    logger.info(f"Batch completed: {results.succeeded}/{total} successful")
    return results

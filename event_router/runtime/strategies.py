# =============================================================================
# Batch Strategies
# =============================================================================
# run_concurrent: standard queues. Every record is attempted, failures are
#                 isolated, successes are deleted before the batch fails.
# run_sequential: FIFO queues and streams. Records run in arrival order and
#                 the batch stops at the first failure.
# =============================================================================

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from event_router.runtime.errors import BatchFailure

logger = logging.getLogger(__name__)

RecordHandler = Callable[[Any], Any]
Compensate = Callable[[List[Any]], None]

DEFAULT_MAX_WORKERS = 10  # SQS event source mappings deliver at most 10 messages by default


@dataclass
class BatchOutcome:
    """Result of running a handler over a batch."""
    total: int
    fulfilled: List[Any] = field(default_factory=list)
    errors: List[BaseException] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.total - len(self.fulfilled)

    @property
    def ok(self) -> bool:
        return not self.failed


def _compensate(compensate: Optional[Compensate], outcome: BatchOutcome) -> None:
    if compensate is None or not outcome.fulfilled:
        return
    logger.info(f"Compensating {len(outcome.fulfilled)} of {outcome.total} records")
    compensate(list(outcome.fulfilled))


def process_concurrently(
    records: Sequence[Any],
    handler: RecordHandler,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> BatchOutcome:
    """Run ``handler`` on every record in a thread pool and wait for all of them."""
    outcome = BatchOutcome(total=len(records))
    if not records:
        return outcome

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(records)))) as pool:
        futures = [pool.submit(handler, record) for record in records]
        # Results are gathered here, in submission order, so the accumulators
        # are only ever touched by this thread.
        for record, future in zip(records, futures):
            error = future.exception()
            if error is None:
                outcome.fulfilled.append(record)
            else:
                outcome.errors.append(error)
    return outcome


def process_sequentially(records: Sequence[Any], handler: RecordHandler) -> BatchOutcome:
    """Run ``handler`` on each record in order, stopping at the first failure."""
    outcome = BatchOutcome(total=len(records))
    for record in records:
        try:
            handler(record)
        # Same capture as Future.exception() in process_concurrently.
        except BaseException as e:
            outcome.errors.append(e)
            break
        outcome.fulfilled.append(record)
    return outcome


def run_concurrent(
    records: Sequence[Any],
    handler: RecordHandler,
    compensate: Optional[Compensate] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    label: str = "SQS batch failure",
) -> BatchOutcome:
    """
    Fan out over a batch and reconcile partial failure.

    On any failure the fulfilled records are compensated first (so they are
    not redelivered), each error is logged, and a ``BatchFailure`` reporting
    ``<failed> of <total> failed`` is raised. A compensation error
    propagates instead of the batch failure.
    """
    outcome = process_concurrently(records, handler, max_workers)
    if not outcome.errors:
        return outcome

    _compensate(compensate, outcome)

    for error in outcome.errors:
        logger.error(f"Record failed: {error!r}", exc_info=error)

    failure = BatchFailure(label, len(outcome.errors), outcome.total, outcome.errors)
    logger.error(str(failure))
    raise failure


def run_sequential(
    records: Sequence[Any],
    handler: RecordHandler,
    compensate: Optional[Compensate] = None,
    label: str = "SQS FIFO batch failure",
) -> BatchOutcome:
    """
    Process a batch in strict order.

    Records after the failing one are never attempted. The records that
    succeeded before it are compensated, then a ``BatchFailure`` counting
    every unprocessed record (failed or never attempted) is raised from the
    handler's error.
    """
    outcome = process_sequentially(records, handler)
    if not outcome.errors:
        return outcome

    _compensate(compensate, outcome)

    error = outcome.errors[0]
    logger.error(f"Record failed: {error!r}", exc_info=error)

    failure = BatchFailure(label, outcome.failed, outcome.total, outcome.errors)
    logger.error(str(failure))
    raise failure from error

from __future__ import annotations

import logging
from typing import Iterable

from sync_failures.config import get_settings
from sync_failures.failure_reasons import current_millis, job_and_attempt_metadata
from sync_failures.metrics import ATTEMPT_SUMMARIES, FAILURE_REASONS_SUMMARIZED
from sync_failures.types import AttemptFailureSummary, FailureReason, FailureType


logger = logging.getLogger(__name__)

CANCELLATION_INTERNAL_MESSAGE = "Setting attempt to FAILED because the job was cancelled"
CANCELLATION_EXTERNAL_MESSAGE = "This attempt was cancelled"


def _trace_rank(failure: FailureReason) -> int:
    return 0 if failure.from_trace_message() else 1


def _dedupe(failures: Iterable[FailureReason]) -> list[FailureReason]:
    return list(dict.fromkeys(failures))


def ordered_failures(failures: Iterable[FailureReason]) -> list[FailureReason]:
    """Order failures so trace message errors come first, then earliest timestamp first.

    The sort is stable: failures with the same trace rank and timestamp keep the
    order in which they were given.
    """
    return sorted(failures, key=lambda failure: (_trace_rank(failure), failure.timestamp))


def _record_metrics(failures: list[FailureReason], cancelled: bool) -> None:
    if not get_settings().metrics_enabled:
        return
    ATTEMPT_SUMMARIES.labels(cancelled=str(cancelled).lower()).inc()
    for failure in failures:
        # Cancellations carry a failure type but no origin.
        origin = failure.failure_origin.value if failure.failure_origin else "none"
        FAILURE_REASONS_SUMMARIZED.labels(
            origin=origin,
            from_trace=str(failure.from_trace_message()).lower(),
        ).inc()


def _summarize(failures: Iterable[FailureReason], partial_success: bool | None, cancelled: bool) -> AttemptFailureSummary:
    ordered = ordered_failures(_dedupe(failures))
    _record_metrics(ordered, cancelled)
    return AttemptFailureSummary(failures=ordered, partial_success=partial_success)


def failure_summary(failures: Iterable[FailureReason], partial_success: bool | None) -> AttemptFailureSummary:
    summary = _summarize(failures, partial_success, cancelled=False)
    logger.info("Attempt failure summary built", extra={"failure_count": len(summary.failures)})
    return summary


def failure_summary_for_cancellation(
    job_id: int,
    attempt_number: int,
    failures: list[FailureReason] | set[FailureReason],
    partial_success: bool | None,
) -> AttemptFailureSummary:
    """Summarize a cancelled attempt.

    This adds a MANUAL_CANCELLATION failure to ``failures`` in place; the
    caller's list or set holds the extra entry after the call returns.
    """
    cancellation = FailureReason(
        failure_type=FailureType.MANUAL_CANCELLATION,
        internal_message=CANCELLATION_INTERNAL_MESSAGE,
        external_message=CANCELLATION_EXTERNAL_MESSAGE,
        timestamp=current_millis(),
        metadata=job_and_attempt_metadata(job_id, attempt_number),
    )
    if isinstance(failures, set):
        failures.add(cancellation)
    else:
        failures.append(cancellation)
    summary = _summarize(failures, partial_success, cancelled=True)
    logger.info(
        "Cancelled attempt failure summary built",
        extra={"job_id": job_id, "attempt_number": attempt_number, "failure_count": len(summary.failures)},
    )
    return summary

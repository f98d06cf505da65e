from __future__ import annotations

import time
import traceback

from sync_failures.types import (
    ATTEMPT_NUMBER_METADATA_KEY,
    JOB_ID_METADATA_KEY,
    TRACE_MESSAGE_METADATA_KEY,
    FailureOrigin,
    FailureReason,
    TraceSignal,
)


SOURCE_EXTERNAL_MESSAGE = "Something went wrong within the source connector"
DESTINATION_EXTERNAL_MESSAGE = "Something went wrong within the destination connector"
REPLICATION_EXTERNAL_MESSAGE = "Something went wrong during replication"
PERSISTENCE_EXTERNAL_MESSAGE = "Something went wrong during state persistence"
NORMALIZATION_EXTERNAL_MESSAGE = "Something went wrong during normalization"
DBT_EXTERNAL_MESSAGE = "Something went wrong during dbt"
UNKNOWN_EXTERNAL_MESSAGE = "An unknown failure occurred"


def current_millis() -> int:
    return int(time.time() * 1000)


def format_stacktrace(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def job_and_attempt_metadata(job_id: int, attempt_number: int) -> dict:
    return {
        JOB_ID_METADATA_KEY: job_id,
        ATTEMPT_NUMBER_METADATA_KEY: attempt_number,
    }


def trace_message_metadata(job_id: int, attempt_number: int) -> dict:
    metadata = job_and_attempt_metadata(job_id, attempt_number)
    metadata[TRACE_MESSAGE_METADATA_KEY] = True
    return metadata


def generic_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    return FailureReason(
        internal_message=str(error),
        stacktrace=format_stacktrace(error),
        timestamp=current_millis(),
        metadata=job_and_attempt_metadata(job_id, attempt_number),
    )


def generic_trace_failure(signal: TraceSignal, job_id: int, attempt_number: int) -> FailureReason:
    return FailureReason(
        internal_message=signal.error.internal_message,
        stacktrace=signal.error.stack_trace,
        timestamp=int(signal.emitted_at),
        metadata=trace_message_metadata(job_id, attempt_number),
    )


def _with_origin(failure: FailureReason, origin: FailureOrigin, external_message: str | None) -> FailureReason:
    return failure.model_copy(update={"failure_origin": origin, "external_message": external_message})


def source_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    return _with_origin(generic_failure(error, job_id, attempt_number), FailureOrigin.SOURCE, SOURCE_EXTERNAL_MESSAGE)


def source_trace_failure(signal: TraceSignal, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_trace_failure(signal, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.SOURCE, signal.error.message)


def destination_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_failure(error, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.DESTINATION, DESTINATION_EXTERNAL_MESSAGE)


def destination_trace_failure(signal: TraceSignal, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_trace_failure(signal, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.DESTINATION, signal.error.message)


def replication_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_failure(error, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.REPLICATION, REPLICATION_EXTERNAL_MESSAGE)


def persistence_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_failure(error, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.PERSISTENCE, PERSISTENCE_EXTERNAL_MESSAGE)


def normalization_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_failure(error, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.NORMALIZATION, NORMALIZATION_EXTERNAL_MESSAGE)


def dbt_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    return _with_origin(generic_failure(error, job_id, attempt_number), FailureOrigin.DBT, DBT_EXTERNAL_MESSAGE)


def unknown_origin_failure(error: BaseException, job_id: int, attempt_number: int) -> FailureReason:
    failure = generic_failure(error, job_id, attempt_number)
    return _with_origin(failure, FailureOrigin.UNKNOWN, UNKNOWN_EXTERNAL_MESSAGE)


def trace_message_failure(
    source_signal: TraceSignal | None,
    destination_signal: TraceSignal | None,
    job_id: int,
    attempt_number: int,
) -> FailureReason | None:
    """Blame whichever connector emitted its error trace first.

    Returns None when neither side reported one. Equal emission times resolve to
    the destination.
    """
    if source_signal is None and destination_signal is None:
        return None
    if destination_signal is None:
        return source_trace_failure(source_signal, job_id, attempt_number)
    if source_signal is None:
        return destination_trace_failure(destination_signal, job_id, attempt_number)

    if source_signal.emitted_at < destination_signal.emitted_at:
        return source_trace_failure(source_signal, job_id, attempt_number)
    return destination_trace_failure(destination_signal, job_id, attempt_number)

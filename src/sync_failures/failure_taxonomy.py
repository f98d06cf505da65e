from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from sync_failures.failure_reasons import (
    dbt_failure,
    destination_failure,
    normalization_failure,
    persistence_failure,
    replication_failure,
    source_failure,
    unknown_origin_failure,
)
from sync_failures.types import FailureOrigin, FailureReason


logger = logging.getLogger(__name__)

WORKFLOW_TYPE_SYNC = "SyncWorkflow"
ACTIVITY_TYPE_REPLICATE = "Replicate"
ACTIVITY_TYPE_PERSIST = "Persist"
ACTIVITY_TYPE_NORMALIZE = "Normalize"
ACTIVITY_TYPE_DBT_RUN = "Run"


@dataclass(frozen=True)
class WorkflowActivity:
    workflow_type: str
    activity_type: str


OriginTable = Mapping[WorkflowActivity, FailureOrigin]
ErrorFailureBuilder = Callable[[BaseException, int, int], FailureReason]


DEFAULT_ORIGIN_TABLE: dict[WorkflowActivity, FailureOrigin] = {
    WorkflowActivity(WORKFLOW_TYPE_SYNC, ACTIVITY_TYPE_REPLICATE): FailureOrigin.REPLICATION,
    WorkflowActivity(WORKFLOW_TYPE_SYNC, ACTIVITY_TYPE_PERSIST): FailureOrigin.PERSISTENCE,
    WorkflowActivity(WORKFLOW_TYPE_SYNC, ACTIVITY_TYPE_NORMALIZE): FailureOrigin.NORMALIZATION,
    WorkflowActivity(WORKFLOW_TYPE_SYNC, ACTIVITY_TYPE_DBT_RUN): FailureOrigin.DBT,
}

ERROR_FAILURE_BUILDERS: dict[FailureOrigin, ErrorFailureBuilder] = {
    FailureOrigin.SOURCE: source_failure,
    FailureOrigin.DESTINATION: destination_failure,
    FailureOrigin.REPLICATION: replication_failure,
    FailureOrigin.PERSISTENCE: persistence_failure,
    FailureOrigin.NORMALIZATION: normalization_failure,
    FailureOrigin.DBT: dbt_failure,
    FailureOrigin.UNKNOWN: unknown_origin_failure,
}


def classify_failure_origin(
    workflow_type: str,
    activity_type: str,
    table: OriginTable | None = None,
) -> FailureOrigin:
    if table is None:
        # origin_table imports this module for the defaults.
        from sync_failures.origin_table import get_origin_table

        table = get_origin_table()
    origin = table.get(WorkflowActivity(workflow_type, activity_type))
    if origin is None:
        logger.debug(
            "No failure origin for workflow '%s' activity '%s'",
            workflow_type,
            activity_type,
            extra={"failure_origin": FailureOrigin.UNKNOWN.value},
        )
        return FailureOrigin.UNKNOWN
    return origin


def failure_reason_from_workflow_and_activity(
    workflow_type: str,
    activity_type: str,
    error: BaseException,
    job_id: int,
    attempt_number: int,
    table: OriginTable | None = None,
) -> FailureReason:
    # Only consulted when the connectors produced no error trace message.
    origin = classify_failure_origin(workflow_type, activity_type, table)
    return ERROR_FAILURE_BUILDERS[origin](error, job_id, attempt_number)

from __future__ import annotations

from prometheus_client import Counter


FAILURE_REASONS_SUMMARIZED = Counter(
    "sync_failure_reasons_summarized_total",
    "Failure reasons included in attempt failure summaries",
    ["origin", "from_trace"],
)
ATTEMPT_SUMMARIES = Counter(
    "sync_attempt_failure_summaries_total",
    "Attempt failure summaries built",
    ["cancelled"],
)

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


JOB_ID_METADATA_KEY = "jobId"
ATTEMPT_NUMBER_METADATA_KEY = "attemptNumber"
TRACE_MESSAGE_METADATA_KEY = "from_trace_message"


class FailureOrigin(str, Enum):
    SOURCE = "source"
    DESTINATION = "destination"
    REPLICATION = "replication"
    PERSISTENCE = "persistence"
    NORMALIZATION = "normalization"
    DBT = "dbt"
    UNKNOWN = "unknown"


class FailureType(str, Enum):
    MANUAL_CANCELLATION = "manual_cancellation"


class FailureReason(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    failure_origin: FailureOrigin | None = Field(default=None, alias="failureOrigin")
    failure_type: FailureType | None = Field(default=None, alias="failureType")
    internal_message: str | None = Field(default=None, alias="internalMessage")
    external_message: str | None = Field(default=None, alias="externalMessage")
    stacktrace: str | None = None
    timestamp: int
    metadata: dict[str, Any] | None = None

    def from_trace_message(self) -> bool:
        if not self.metadata:
            return False
        return self.metadata.get(TRACE_MESSAGE_METADATA_KEY) is True

    def __hash__(self) -> int:
        metadata = tuple(sorted((self.metadata or {}).items()))
        return hash(
            (
                self.failure_origin,
                self.failure_type,
                self.internal_message,
                self.external_message,
                self.stacktrace,
                self.timestamp,
                metadata,
            )
        )

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AttemptFailureSummary(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    failures: list[FailureReason] = Field(default_factory=list)
    partial_success: bool | None = Field(default=None, alias="partialSuccess")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TraceError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str | None = None
    internal_message: str | None = None
    stack_trace: str | None = None


class TraceSignal(BaseModel):
    """ERROR trace message emitted by a source or destination connector."""

    model_config = ConfigDict(frozen=True)

    emitted_at: float
    error: TraceError = Field(default_factory=TraceError)

"""Job snapshot and execution wire models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    extra="ignore",
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class ExecutionStatus(StrEnum):
    """Lifecycle status of one execution."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class LogLevel(StrEnum):
    """Severity of one execution log line."""

    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


class JobSnapshot(BaseModel):
    """Remote-truth state of one job as of the latest poll."""

    model_config = _WIRE_CONFIG

    name: str = Field(min_length=1)
    interval: int = Field(default=0, ge=0)
    running: bool = False
    last_run_unix: int = 0
    next_run_unix: int = 0
    err: str = ""
    is_executing: bool = False
    current_status: str = ""

    @field_validator("err", "current_status", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        """Treat absent/null text fields as empty strings.

        Args:
            value: Raw field payload.

        Returns:
            Empty string for ``None``, otherwise the raw value.
        """
        return "" if value is None else value

    @property
    def has_error(self) -> bool:
        """Whether the job currently reports a non-blank error."""
        return self.err.strip() != ""


class LogEntry(BaseModel):
    """One log line recorded during an execution."""

    model_config = _WIRE_CONFIG

    timestamp: str
    message: str
    level: LogLevel = LogLevel.INFO


class Execution(BaseModel):
    """One run of a job with its log trail."""

    model_config = _WIRE_CONFIG

    id: str = Field(min_length=1)
    job_name: str = Field(min_length=1)
    start_time: datetime
    end_time: datetime | None = None
    status: ExecutionStatus
    logs: tuple[LogEntry, ...] = ()

    @field_validator("end_time", mode="before")
    @classmethod
    def _blank_end_time(cls, value: object) -> object:
        """Treat blank end timestamps as still running.

        Args:
            value: Raw end time payload.

        Returns:
            ``None`` for blank strings, otherwise the raw value.
        """
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Attach UTC to naive timestamps so ordering never mixes kinds.

        Args:
            value: Parsed timestamp.

        Returns:
            Timezone-aware timestamp.
        """
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_validator("logs", mode="before")
    @classmethod
    def _none_as_no_logs(cls, value: object) -> object:
        """Treat null log arrays as empty.

        Args:
            value: Raw logs payload.

        Returns:
            Empty tuple for ``None``, otherwise the raw value.
        """
        return () if value is None else value

    @property
    def duration_seconds(self) -> int | None:
        """Rounded run duration, or ``None`` while still running."""
        if self.end_time is None:
            return None
        return round((self.end_time - self.start_time).total_seconds())


def to_wire(model: BaseModel) -> dict[str, object]:
    """Serialize one wire model using provider field names.

    Args:
        model: Model to serialize.

    Returns:
        JSON-compatible payload with camelCase keys.
    """
    return model.model_dump(mode="json", by_alias=True)

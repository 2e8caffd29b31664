"""Remote job provider contract, wire models, and implementations."""

from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.errors import ProviderError, ProviderErrorCode
from jobwatch.provider.http import HttpJobProvider
from jobwatch.provider.memory import InMemoryJobProvider, build_demo_provider
from jobwatch.provider.models import (
    Execution,
    ExecutionStatus,
    JobSnapshot,
    LogEntry,
    LogLevel,
    to_wire,
)

__all__ = [
    "Execution",
    "ExecutionStatus",
    "HttpJobProvider",
    "InMemoryJobProvider",
    "JobSnapshot",
    "LogEntry",
    "LogLevel",
    "ProviderError",
    "ProviderErrorCode",
    "RemoteJobProvider",
    "build_demo_provider",
    "to_wire",
]

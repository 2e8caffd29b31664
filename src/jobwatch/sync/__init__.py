"""Polling loop and shared job/execution state."""

from jobwatch.sync.poller import Poller, TickListener, TickResult
from jobwatch.sync.store import ExecutionStore, MonitorStore

__all__ = [
    "ExecutionStore",
    "MonitorStore",
    "Poller",
    "TickListener",
    "TickResult",
]

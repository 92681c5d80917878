"""Data models for procman."""

from dataclasses import dataclass
from enum import Enum


class SignalKind(Enum):
    """Termination signal requested by the operator."""

    TERMINATE = "SIGTERM"
    KILL = "SIGKILL"


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of one process, built per query."""

    pid: int
    name: str = ""
    state: str = "?"  # 'R', 'S', 'Z', 'D', etc.
    state_description: str = ""
    uid: int | None = None
    username: str = "unknown"
    ppid: int = 0
    threads: int = 0
    vm_size: int = 0  # Bytes
    vm_rss: int = 0  # Bytes
    command_line: str = ""


@dataclass(slots=True, frozen=True)
class TrackedProcess:
    """Entry in the tracking registry."""

    pid: int
    name: str
    state: str
    started_at: float  # Wall clock, for display
    started_monotonic: float


@dataclass(slots=True, frozen=True)
class TrackedView:
    """Freshly derived view of a tracked entry."""

    pid: int
    name: str
    elapsed_seconds: int
    running: bool
    state: str | None  # None once ended


@dataclass(slots=True, frozen=True)
class LoadReport:
    """Load averages and the head of the memory summary.

    Either part is None when its source could not be read.
    """

    load_avg: tuple[float, float, float] | None
    memory_lines: list[str] | None


@dataclass(slots=True, frozen=True)
class Completed:
    """Child exited normally."""

    exit_code: int


@dataclass(slots=True, frozen=True)
class Abnormal:
    """Child was terminated by a signal or timed out."""

    signal: int | None = None
    timed_out: bool = False


@dataclass(slots=True, frozen=True)
class SpawnFailed:
    """The requested program never started.

    exit_code is set when the shell itself ran and reported the failure.
    """

    reason: str
    exit_code: int | None = None


LaunchOutcome = Completed | Abnormal | SpawnFailed

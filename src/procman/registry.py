"""Tracking registry for procman."""

import logging
import time
from collections.abc import Callable

from procman.errors import CapacityExceeded
from procman.models import TrackedProcess, TrackedView
from procman.reader import ProcessReader

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1024


class TrackingRegistry:
    """
    Bounded, append-only watchlist of processes.

    Entries keep only what was true when tracking started (pid, name,
    state, start time). Liveness and elapsed time are derived on every
    call to list_tracked().
    """

    def __init__(
        self,
        reader: ProcessReader,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the TrackingRegistry.

        Args:
            reader: Reader used to resolve and re-check processes.
            capacity: Maximum number of entries. Default 1024.
            clock: Monotonic clock for elapsed time.
            wall_clock: Clock for the displayed start time.
        """
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._reader = reader
        self._capacity = capacity
        self._clock = clock
        self._wall_clock = wall_clock
        self._entries: list[TrackedProcess] = []

    @property
    def capacity(self) -> int:
        """Get the maximum number of entries."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[TrackedProcess, ...]:
        """Get the tracked entries in insertion order."""
        return tuple(self._entries)

    def track(self, pid: int) -> TrackedProcess:
        """
        Start tracking a process.

        Raises:
            CapacityExceeded: If the registry is full.
            ProcessNotFound: If pid does not resolve to a process.
        """
        if len(self._entries) >= self._capacity:
            raise CapacityExceeded(self._capacity)

        record = self._reader.read(pid)
        entry = TrackedProcess(
            pid=record.pid,
            name=record.name,
            state=record.state,
            started_at=self._wall_clock(),
            started_monotonic=self._clock(),
        )
        self._entries.append(entry)
        logger.debug("Tracking %d (%s), %d/%d", entry.pid, entry.name, len(self), self._capacity)
        return entry

    def list_tracked(self) -> list[TrackedView]:
        """Return a fresh view of every entry, in insertion order."""
        now = self._clock()
        views = []
        for entry in self._entries:
            state = self._reader.live_state(entry.pid)
            views.append(
                TrackedView(
                    pid=entry.pid,
                    name=entry.name,
                    elapsed_seconds=max(0, int(now - entry.started_monotonic)),
                    running=state is not None,
                    state=state,
                )
            )
        return views

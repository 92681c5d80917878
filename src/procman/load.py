"""System load reporter for procman."""

import logging
import os
from pathlib import Path

import psutil

from procman.models import LoadReport
from procman.reader import default_proc_root

logger = logging.getLogger(__name__)


def read_load_avg(proc_root: Path) -> tuple[float, float, float] | None:
    """Read the 1, 5 and 15 minute load averages."""
    try:
        fields = (proc_root / "loadavg").read_text().split()
        return (float(fields[0]), float(fields[1]), float(fields[2]))
    except (OSError, IndexError, ValueError) as exc:
        logger.debug("Load averages unavailable: %s", exc)
        return None


def system_load_avg() -> tuple[float, float, float] | None:
    """Return the system load averages as reported by psutil."""
    try:
        return psutil.getloadavg()
    except OSError as exc:
        logger.debug("Load averages unavailable: %s", exc)
        return None


def read_memory_lines(proc_root: Path, count: int = 3) -> list[str] | None:
    """Read the first count lines of the memory summary, unparsed."""
    try:
        with open(proc_root / "meminfo") as f:
            lines = []
            for line in f:
                if len(lines) >= count:
                    break
                lines.append(line.rstrip("\n"))
            return lines
    except OSError as exc:
        logger.debug("Memory summary unavailable: %s", exc)
        return None


def report_load(
    proc_root: str | os.PathLike[str] | None = None,
    memory_lines: int = 3,
) -> LoadReport:
    """
    Collect load averages and the memory summary head.

    On the system proc root the load averages come from psutil; any other
    root is read directly.
    """
    root = Path(proc_root if proc_root is not None else default_proc_root())
    if root == Path(default_proc_root()):
        load_avg = system_load_avg()
    else:
        load_avg = read_load_avg(root)
    return LoadReport(
        load_avg=load_avg,
        memory_lines=read_memory_lines(root, memory_lines),
    )

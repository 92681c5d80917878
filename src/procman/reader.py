"""Process metadata reader for procman.

Reads the per-process ``status`` and ``cmdline`` files exposed under the
proc filesystem. The status text is treated as a stable ``Key:<tab>value``
protocol: recognized keys are extracted, everything else is ignored, and
missing keys leave the corresponding field at its default.
"""

import logging
import os
import pwd
from collections.abc import Iterator
from pathlib import Path

import psutil

from procman.errors import ProcessNotFound
from procman.models import ProcessRecord

logger = logging.getLogger(__name__)

# Status keys the reader understands. Values are in kB for the Vm* keys.
STATUS_KEYS = ("Name", "State", "Uid", "VmSize", "VmRSS", "Pid", "PPid", "Threads")

UNKNOWN_USER = "unknown"


def default_proc_root() -> str:
    """Return the proc filesystem mount point psutil is configured with."""
    return psutil.PROCFS_PATH


def parse_status(text: str) -> dict[str, str]:
    """
    Parse a status text block into a mapping of recognized keys.

    Args:
        text: Contents of a ``/proc/<pid>/status`` file.

    Returns:
        Raw (stripped) values for every recognized key present in the text.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key in STATUS_KEYS:
            fields[key] = value.strip()
    return fields


def _first_int(value: str | None, default: int = 0) -> int:
    """Return the first whitespace-separated integer in value."""
    if not value:
        return default
    try:
        return int(value.split()[0])
    except ValueError:
        return default


def resolve_username(uid: int | None) -> str:
    """Map a numeric user id to a name, or 'unknown'."""
    if uid is None:
        return UNKNOWN_USER
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return UNKNOWN_USER


def build_record(pid: int, fields: dict[str, str], command_line: str = "") -> ProcessRecord:
    """Build a ProcessRecord from parsed status fields."""
    state_raw = fields.get("State", "")
    state, _, description = state_raw.partition(" ")

    uid_raw = fields.get("Uid")
    uid = _first_int(uid_raw, default=-1) if uid_raw else None
    if uid is not None and uid < 0:
        uid = None

    return ProcessRecord(
        pid=_first_int(fields.get("Pid"), default=pid),
        name=fields.get("Name", ""),
        state=state[:1] or "?",
        state_description=description.strip("()"),
        uid=uid,
        username=resolve_username(uid),
        ppid=_first_int(fields.get("PPid")),
        threads=_first_int(fields.get("Threads")),
        vm_size=_first_int(fields.get("VmSize")) * 1024,
        vm_rss=_first_int(fields.get("VmRSS")) * 1024,
        command_line=command_line,
    )


class ProcessReader:
    """
    Reads process metadata from a proc filesystem root.

    The reader holds no state beyond the root path; every call goes back to
    the filesystem, so results always reflect the current system.
    """

    def __init__(self, proc_root: str | os.PathLike[str] | None = None) -> None:
        """
        Initialize the ProcessReader.

        Args:
            proc_root: Directory holding per-process entries. Defaults to
                psutil's configured PROCFS_PATH.
        """
        self._root = Path(proc_root if proc_root is not None else default_proc_root())

    @property
    def proc_root(self) -> Path:
        """Get the proc filesystem root."""
        return self._root

    def list_pids(self) -> list[int]:
        """List identifiers of all processes currently exposed, ascending."""
        try:
            names = os.listdir(self._root)
        except OSError as exc:
            logger.warning("Cannot enumerate %s: %s", self._root, exc)
            return []
        return sorted(int(name) for name in names if name.isascii() and name.isdigit())

    def read_command_line(self, pid: int) -> str:
        """Return the command line of pid, or '' if unavailable."""
        try:
            raw = (self._root / str(pid) / "cmdline").read_bytes()
        except OSError:
            return ""
        args = [arg.decode(errors="replace") for arg in raw.split(b"\0") if arg]
        return " ".join(args)

    def read(self, pid: int) -> ProcessRecord:
        """
        Read the metadata of a single process.

        Raises:
            ProcessNotFound: If no status exists for pid or it cannot be read.
        """
        if pid <= 0:
            raise ProcessNotFound(pid)
        try:
            text = (self._root / str(pid) / "status").read_text(errors="replace")
        except OSError as exc:
            logger.debug("Status of %d unreadable: %s", pid, exc)
            raise ProcessNotFound(pid) from exc

        return build_record(pid, parse_status(text), self.read_command_line(pid))

    def iter_records(self) -> Iterator[ProcessRecord]:
        """
        Yield records for every listed process.

        Processes that vanish between enumeration and lookup are skipped.
        """
        for pid in self.list_pids():
            try:
                yield self.read(pid)
            except ProcessNotFound:
                # Died mid-listing or inaccessible
                continue

    def live_state(self, pid: int) -> str | None:
        """
        Check whether pid refers to a live process.

        Returns:
            The current state character, or None if the process is gone,
            a zombie, or dead.
        """
        try:
            record = self.read(pid)
        except ProcessNotFound:
            return None
        if record.state in ("Z", "X"):
            return None
        return record.state

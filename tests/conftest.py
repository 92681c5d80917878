"""Shared fixtures for procman tests."""

import subprocess
from pathlib import Path

import pytest

STATUS_TEMPLATE = """\
Name:\t{name}
Umask:\t0022
State:\t{state}
Tgid:\t{pid}
Pid:\t{pid}
PPid:\t{ppid}
Uid:\t{uid}\t{uid}\t{uid}\t{uid}
Gid:\t0\t0\t0\t0
VmSize:\t   10240 kB
VmRSS:\t    2048 kB
Threads:\t3
"""


def write_process(
    root: Path,
    pid: int,
    name: str = "worker",
    state: str = "S (sleeping)",
    ppid: int = 1,
    uid: int = 0,
    cmdline: bytes | None = None,
) -> Path:
    """Create a fake /proc/<pid> entry under root."""
    proc_dir = root / str(pid)
    proc_dir.mkdir(parents=True)
    status = STATUS_TEMPLATE.format(name=name, state=state, pid=pid, ppid=ppid, uid=uid)
    (proc_dir / "status").write_text(status)
    if cmdline is not None:
        (proc_dir / "cmdline").write_bytes(cmdline)
    return proc_dir


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    """An empty fake proc filesystem root."""
    root = tmp_path / "proc"
    root.mkdir()
    return root


@pytest.fixture
def sleeper():
    """A real long-running child process, reaped on teardown."""
    proc = subprocess.Popen(["sleep", "60"])
    try:
        yield proc
    finally:
        if proc.poll() is None:
            proc.kill()
        proc.wait(timeout=5.0)


@pytest.fixture
def make_process(proc_root: Path):
    """Factory writing fake process entries into proc_root."""

    def _make(pid: int, **kwargs) -> Path:
        return write_process(proc_root, pid, **kwargs)

    return _make

"""Shell command launcher for procman."""

import logging
import subprocess

from procman.models import Abnormal, Completed, LaunchOutcome, SpawnFailed

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/sh"

# Exit statuses POSIX shells use when the command itself could not be run
_SHELL_NOT_EXECUTABLE = 126
_SHELL_NOT_FOUND = 127


def launch(
    command: str,
    timeout: float | None = None,
    shell: str = DEFAULT_SHELL,
) -> LaunchOutcome:
    """
    Run a command through the shell and wait for it to finish.

    The command string is handed to the shell unchanged, so pipes,
    redirection and other metacharacters work as typed. The child shares
    the terminal; nothing is captured.

    Args:
        command: Shell command line.
        timeout: Seconds to wait before killing the child. None waits forever.
        shell: Shell executable used to interpret the command.

    Returns:
        Completed, Abnormal or SpawnFailed. Shell exit statuses 126 and
        127 are reported as SpawnFailed carrying that exit code, even when
        the command ran and chose that status itself.
    """
    try:
        proc = subprocess.Popen([shell, "-c", command])
    except OSError as exc:
        logger.warning("Spawn of %r failed: %s", command, exc)
        return SpawnFailed(reason=exc.strerror or str(exc))

    logger.debug("Launched pid %d: %r", proc.pid, command)
    try:
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        returncode = proc.wait()
        logger.warning("Pid %d exceeded %ss timeout, killed", proc.pid, timeout)
        return Abnormal(signal=-returncode if returncode < 0 else None, timed_out=True)

    logger.debug("Pid %d exited with %d", proc.pid, returncode)
    if returncode < 0:
        return Abnormal(signal=-returncode)
    if returncode == _SHELL_NOT_FOUND:
        return SpawnFailed(reason="command not found", exit_code=returncode)
    if returncode == _SHELL_NOT_EXECUTABLE:
        return SpawnFailed(reason="command not executable", exit_code=returncode)
    return Completed(exit_code=returncode)

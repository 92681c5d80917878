"""Signal delivery for procman."""

import logging

import psutil

from procman.errors import DeliveryError
from procman.models import SignalKind

logger = logging.getLogger(__name__)

_KILL_NAMES = {"SIGKILL", "KILL", "9"}


def parse_signal_kind(text: str) -> SignalKind:
    """Interpret operator input as a SignalKind; anything unrecognized is TERMINATE."""
    if text.strip().upper() in _KILL_NAMES:
        return SignalKind.KILL
    return SignalKind.TERMINATE


def terminate(pid: int, kind: SignalKind = SignalKind.TERMINATE) -> None:
    """
    Send a termination signal to a process.

    The call returns once the kernel has accepted the signal; it does not
    wait for the process to exit.

    Args:
        pid: Target process identifier.
        kind: TERMINATE (SIGTERM) or KILL (SIGKILL).

    Raises:
        DeliveryError: If the process does not exist or permission is denied.
    """
    try:
        proc = psutil.Process(pid)
        if kind is SignalKind.KILL:
            proc.kill()
        else:
            proc.terminate()
    except psutil.NoSuchProcess as exc:
        logger.warning("Signal %s to %d failed: no such process", kind.value, pid)
        raise DeliveryError(pid, kind.value, "no such process") from exc
    except psutil.AccessDenied as exc:
        logger.warning("Signal %s to %d failed: permission denied", kind.value, pid)
        raise DeliveryError(pid, kind.value, "permission denied") from exc
    except ValueError as exc:
        # psutil rejects negative pids before touching the kernel
        raise DeliveryError(pid, kind.value, str(exc)) from exc

    logger.debug("Sent %s to %d", kind.value, pid)

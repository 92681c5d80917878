"""Exceptions raised by procman components."""


class ProcmanError(Exception):
    """Base class for all procman errors."""


class ProcessNotFound(ProcmanError):
    """No metadata exists for the given process identifier."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"Process {pid} not found")
        self.pid = pid


class DeliveryError(ProcmanError):
    """The kernel rejected a signal."""

    def __init__(self, pid: int, signal: str, reason: str) -> None:
        super().__init__(f"Error terminating process {pid} with {signal}: {reason}")
        self.pid = pid
        self.signal = signal
        self.reason = reason


class CapacityExceeded(ProcmanError):
    """The tracking registry is full."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"Maximum tracking limit reached ({capacity})")
        self.capacity = capacity


class MalformedInput(ProcmanError):
    """Operator input could not be interpreted."""

    def __init__(self, text: str, expected: str) -> None:
        super().__init__(f"Invalid input {text!r}: expected {expected}")
        self.text = text
        self.expected = expected

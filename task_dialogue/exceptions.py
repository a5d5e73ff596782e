"""
Package Exceptions

Errors that are allowed to cross component boundaries. Oracle and action
failures never appear here: they are converted into "no intent" or an
ERROR ActionResult where they happen.
"""


class DialogueError(Exception):
    """Base class for all task_dialogue errors."""
    pass


class RegistryValidationError(DialogueError):
    """Raised at startup when the tool catalog or handler wiring is inconsistent."""
    pass


class StateStoreError(DialogueError):
    """Raised when the state store cannot be read or written."""
    pass


class OperationTimeoutError(TimeoutError):
    """Raised when an oracle or action call exceeds its time limit."""

    def __init__(self, operation_name: str, timeout_seconds: float):
        self.operation_name = operation_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{operation_name} timed out after {timeout_seconds:g}s.")

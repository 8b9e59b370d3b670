"""Exception hierarchy shared by the checker, the step runner and the CLI."""


class SnapshotError(Exception):
    """Base exception for backup and restore errors."""

    pass


class MissingDependencyError(SnapshotError):
    """Raised when a required tool is absent and could not be installed."""

    pass


class SourceAbsentError(SnapshotError):
    """Raised when an optional source or backed-up artifact does not exist."""

    pass


class ActionFailureError(SnapshotError):
    """Raised when an external command returns a failure."""

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode


class StepOrderError(SnapshotError):
    """Raised when a step must follow a step that does not precede it."""

    pass

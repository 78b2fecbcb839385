"""Typed failures raised by the vault data layer and its collaborators."""

from pathlib import Path


class ObsctlError(Exception):
    """Base error for obsctl failures surfaced to a front end."""


class VaultIOError(ObsctlError):
    """Raised when a vault file or directory cannot be read, written or created."""

    def __init__(self, action: str, path: Path | str, cause: OSError | None = None):
        self.action = action
        self.path = Path(path)
        self.cause = cause
        message = f"{action} {self.path}"
        if cause is not None:
            message = f"{message}: {cause.strerror or cause}"
        super().__init__(message)


class TaskNotFoundError(ObsctlError, LookupError):
    """Raised when a task id (or title) has no matching record in the ledger."""

    def __init__(self, task_id: int | None = None, title: str | None = None):
        self.task_id = task_id
        self.title = title
        if task_id is not None:
            message = f"task #{task_id} was not found"
        else:
            message = f"task {title!r} was not found"
        super().__init__(message)


class InvalidDateError(ObsctlError, ValueError):
    """Raised when a journal date is not a valid YYYY-MM-DD string."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid date format: {value}")


class InvalidStatusError(ObsctlError, ValueError):
    """Raised when a task status word is not recognised."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown status: {value}")


class ConfigError(ObsctlError):
    """Raised when the obsctl config file is unreadable or invalid."""


class SearchError(ObsctlError):
    """Raised when an external search tool is missing or fails."""

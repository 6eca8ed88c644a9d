"""Custom exceptions for slashsync."""
from enum import Enum


class ReconcilePhase(str, Enum):
    """Stage of a reconciliation pass."""

    FETCH = "fetch"
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


class SlashSyncError(Exception):
    """Base exception for slashsync."""

    pass


class InvalidDescriptorError(SlashSyncError):
    """Command definition is missing a name or has malformed options."""

    pass


class DuplicateNameError(SlashSyncError):
    """Command name already queued or cached in the same scope."""

    def __init__(self, name: str, scope: str = "global"):
        super().__init__(f"Command '{name}' already exists in scope '{scope}'")
        self.name = name
        self.scope = scope


class StoreBusyError(SlashSyncError):
    """A reconciliation is already running on this store."""

    pass


class TransportError(SlashSyncError):
    """HTTP request to the commands API failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ReconcileError(SlashSyncError):
    """Wraps a transport failure raised during reconciliation."""

    def __init__(
        self,
        cause: Exception,
        phase: ReconcilePhase,
        command_name: str | None = None,
        report=None,
    ):
        target = f" '{command_name}'" if command_name else ""
        super().__init__(f"{phase.value}{target} failed: {cause}")
        self.cause = cause
        self.phase = phase
        self.command_name = command_name
        self.report = report

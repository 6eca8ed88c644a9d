"""Per-command outcomes of a reconciliation pass."""
from dataclasses import dataclass, field
from typing import Any

from slashsync.exceptions import ReconcileError, ReconcilePhase

from .models import CommandDescriptor


@dataclass
class OperationResult:
    """Outcome of one create, delete or update call."""

    name: str
    phase: ReconcilePhase
    descriptor: CommandDescriptor | None = None
    response: Any = None
    error: Exception | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ReconcileReport:
    """Itemized results of reconciling one scope."""

    scope: str
    results: list[OperationResult] = field(default_factory=list)

    def _names(self, phase: ReconcilePhase) -> list[str]:
        return [
            r.name for r in self.results
            if r.phase == phase and r.ok and not r.skipped
        ]

    @property
    def created(self) -> list[str]:
        return self._names(ReconcilePhase.CREATE)

    @property
    def deleted(self) -> list[str]:
        return self._names(ReconcilePhase.DELETE)

    @property
    def updated(self) -> list[str]:
        return self._names(ReconcilePhase.UPDATE)

    @property
    def skipped(self) -> list[str]:
        return [r.name for r in self.results if r.skipped]

    @property
    def failed(self) -> list[OperationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        """Raise ReconcileError for the first failed operation, if any."""
        failed = self.failed
        if failed:
            first = failed[0]
            raise ReconcileError(
                first.error,
                first.phase,
                command_name=first.name,
                report=self,
            ) from first.error

    def summary(self) -> str:
        """One-line description for logs."""
        return (
            f"[{self.scope}] created={len(self.created)} "
            f"updated={len(self.updated)} deleted={len(self.deleted)} "
            f"skipped={len(self.skipped)} failed={len(self.failed)}"
        )

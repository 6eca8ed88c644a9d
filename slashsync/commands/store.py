"""Reconciliation store for application commands."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Mapping, Protocol

from slashsync.exceptions import (
    DuplicateNameError,
    InvalidDescriptorError,
    ReconcileError,
    ReconcilePhase,
    StoreBusyError,
    TransportError,
)

from .models import CommandDefinition, CommandDescriptor, create_descriptor
from .results import OperationResult, ReconcileReport

logger = logging.getLogger(__name__)


class CommandsTransport(Protocol):
    """HTTP collaborator used by the store."""

    async def get(self, path: str) -> Any: ...

    async def post(self, path: str, body: dict[str, Any]) -> Any: ...

    async def patch(self, path: str, body: dict[str, Any]) -> Any: ...

    async def delete(self, path: str) -> Any: ...


@dataclass(frozen=True)
class CommandScope:
    """Global command set or one guild's command set."""

    application_id: str
    guild_id: str | None = None

    @property
    def key(self) -> str:
        return self.guild_id or "global"

    def endpoint(self, command_id: str | None = None) -> str:
        """Build the commands endpoint path, optionally for one command."""
        if self.guild_id:
            base = f"/applications/{self.application_id}/guilds/{self.guild_id}/commands"
        else:
            base = f"/applications/{self.application_id}/commands"
        return f"{base}/{command_id}" if command_id else base


@dataclass(frozen=True)
class ReconcilePlan:
    """Names to create, delete and update, computed before any call."""

    create: frozenset[str]
    delete: frozenset[str]
    update: frozenset[str]


class CommandsStore:
    """Stores queued commands and reconciles them with the remote list."""

    def __init__(
        self,
        api: CommandsTransport,
        scope: CommandScope,
        skip_unchanged: bool = False,
    ):
        """Initialize the store.

        Args:
            api: Transport exposing get/post/patch/delete coroutines.
            scope: Scope whose endpoint this store targets.
            skip_unchanged: Don't PATCH commands that match the remote state.
        """
        self.api = api
        self.scope = scope
        self.skip_unchanged = skip_unchanged
        self.queue: list[CommandDescriptor] = []
        self.cache: dict[str, CommandDescriptor] = {}
        self._busy = False

    @property
    def busy(self) -> bool:
        """Whether a reconciliation is in flight."""
        return self._busy

    def find(self, name: str) -> CommandDescriptor | None:
        """Get a queued or cached command by name."""
        for descriptor in reversed(self.queue):
            if descriptor.name == name:
                return descriptor
        for descriptor in self.cache.values():
            if descriptor.name == name:
                return descriptor
        return None

    def add_to_queue(
        self, item: CommandDefinition | CommandDescriptor
    ) -> "CommandsStore":
        """Queue a command for the next reconcile().

        Raises:
            InvalidDescriptorError: If item is not a definition or descriptor.
            DuplicateNameError: If the name is already queued or cached.
        """
        descriptor = create_descriptor(item)
        if self.find(descriptor.name) is not None:
            raise DuplicateNameError(descriptor.name, self.scope.key)

        self.queue.append(descriptor)
        return self

    def discard(self, name: str) -> bool:
        """Forget a command locally so it can be declared again.

        A discarded command that still exists remotely is deleted by the
        next reconcile() unless it is queued again.
        """
        before = len(self.queue) + len(self.cache)
        self.queue = [d for d in self.queue if d.name != name]
        self.cache = {k: d for k, d in self.cache.items() if d.name != name}
        return len(self.queue) + len(self.cache) != before

    async def fetch_remote(self) -> list[CommandDescriptor]:
        """Fetch the remote commands and cache them.

        Cached descriptors are refreshed in place, so callers holding a
        reference see the new snapshot.

        Raises:
            ReconcileError: If the request fails or returns a command
                without id or name.
        """
        try:
            data = await self.api.get(self.scope.endpoint())
        except Exception as e:
            logger.error(f"[{self.scope.key}] Failed to fetch commands: {e}")
            raise ReconcileError(e, ReconcilePhase.FETCH) from e

        # Accept both a bare list and a {"data": [...]} envelope
        if isinstance(data, Mapping):
            data = data.get("data")

        items = data or []
        for item in items:
            if not isinstance(item, Mapping) or not item.get("id") or not item.get("name"):
                error = InvalidDescriptorError(f"Remote command is missing id or name: {item!r}")
                logger.error(f"[{self.scope.key}] {error}")
                raise ReconcileError(error, ReconcilePhase.FETCH) from error

        remote = []
        for item in items:
            remote_id = str(item["id"])
            if remote_id in self.cache:
                descriptor = self.cache[remote_id]
                descriptor.hydrate(item)
            else:
                descriptor = CommandDescriptor.from_remote(item)
                self.cache[descriptor.remote_id] = descriptor
            remote.append(descriptor)

        # Observed-only commands that vanished remotely; declared ones are kept
        # so reconcile() can recreate them
        remote_ids = {d.remote_id for d in remote}
        for remote_id in [k for k, d in self.cache.items() if not d.managed]:
            if remote_id not in remote_ids:
                logger.debug(f"[{self.scope.key}] Dropping '{self.cache[remote_id].name}', gone remotely")
                del self.cache[remote_id]

        logger.debug(f"[{self.scope.key}] Fetched {len(remote)} remote commands")
        return remote

    def _desired(self) -> dict[str, CommandDescriptor]:
        """Queued commands plus locally declared commands already cached."""
        desired = {d.name: d for d in self.cache.values() if d.managed}
        # Later queue entries win on duplicate names
        for descriptor in self.queue:
            desired[descriptor.name] = descriptor
        return desired

    def plan(
        self, remote: list[CommandDescriptor]
    ) -> tuple[ReconcilePlan, dict[str, CommandDescriptor], dict[str, CommandDescriptor]]:
        """Diff desired state against a fetched remote set.

        Returns:
            The plan, desired descriptors by name, remote descriptors by name.
        """
        desired = self._desired()
        remote_by_name = {d.name: d for d in remote}
        queued_names = {d.name for d in self.queue}

        plan = ReconcilePlan(
            create=frozenset(desired.keys() - remote_by_name.keys()),
            delete=frozenset(remote_by_name.keys() - desired.keys()),
            update=frozenset(queued_names & remote_by_name.keys()),
        )
        return plan, desired, remote_by_name

    async def _call(
        self,
        phase: ReconcilePhase,
        descriptor: CommandDescriptor,
        request: Awaitable[Any],
    ) -> OperationResult:
        """Await one API call and record its outcome."""
        try:
            response = await request
        except Exception as e:
            logger.error(f"[{self.scope.key}] {phase.value} '{descriptor.name}' failed: {e}")
            return OperationResult(descriptor.name, phase, descriptor, error=e)

        if phase is not ReconcilePhase.DELETE and not (
            isinstance(response, Mapping) and response.get("id")
        ):
            error = TransportError(f"{phase.value} response has no command id: {response!r}")
            logger.error(f"[{self.scope.key}] {error}")
            return OperationResult(descriptor.name, phase, descriptor, response, error=error)

        logger.info(f"[{self.scope.key}] {phase.value} '{descriptor.name}'")
        return OperationResult(descriptor.name, phase, descriptor, response)

    async def _create(self, descriptor: CommandDescriptor) -> OperationResult:
        return await self._call(
            ReconcilePhase.CREATE,
            descriptor,
            self.api.post(self.scope.endpoint(), descriptor.serialize_for_upload()),
        )

    async def _delete(self, descriptor: CommandDescriptor) -> OperationResult:
        return await self._call(
            ReconcilePhase.DELETE,
            descriptor,
            self.api.delete(self.scope.endpoint(descriptor.remote_id)),
        )

    async def _update(
        self, descriptor: CommandDescriptor, remote: CommandDescriptor
    ) -> OperationResult:
        descriptor.remote_id = remote.remote_id
        descriptor.remote_snapshot = remote.remote_snapshot

        changes = descriptor.changed_fields()
        if not changes:
            if self.skip_unchanged:
                logger.debug(f"[{self.scope.key}] '{descriptor.name}' unchanged, skipping")
                return OperationResult(
                    descriptor.name, ReconcilePhase.UPDATE, descriptor, skipped=True
                )
            changes = descriptor.serialize_for_upload()

        return await self._call(
            ReconcilePhase.UPDATE,
            descriptor,
            self.api.patch(self.scope.endpoint(descriptor.remote_id), changes),
        )

    def _drain(self, name: str) -> None:
        self.queue = [d for d in self.queue if d.name != name]

    def _apply(
        self,
        results: list[OperationResult],
        desired: dict[str, CommandDescriptor],
        remote_by_name: dict[str, CommandDescriptor],
    ) -> None:
        """Fold successful outcomes into the queue and cache."""
        for result in results:
            if not result.ok:
                continue
            descriptor = result.descriptor

            if result.phase is ReconcilePhase.CREATE:
                # A declared command recreated after vanishing remotely
                if descriptor.remote_id and self.cache.get(descriptor.remote_id) is descriptor:
                    del self.cache[descriptor.remote_id]
                descriptor.hydrate(result.response)
                self._drain(descriptor.name)
                self.cache[descriptor.remote_id] = descriptor

            elif result.phase is ReconcilePhase.DELETE:
                self.cache.pop(descriptor.remote_id, None)

            else:
                if result.response is not None:
                    descriptor.hydrate(result.response)
                self._drain(descriptor.name)
                self.cache[descriptor.remote_id] = descriptor

        # Declared commands recreated remotely under a new id
        for name, descriptor in desired.items():
            remote = remote_by_name.get(name)
            if (
                descriptor.managed
                and remote is not None
                and remote is not descriptor
                and descriptor.remote_id in self.cache
                and descriptor.remote_id != remote.remote_id
                and self.cache[descriptor.remote_id] is descriptor
            ):
                del self.cache[descriptor.remote_id]
                descriptor.hydrate(remote.remote_snapshot)
                self.cache[descriptor.remote_id] = descriptor

    async def reconcile(self, raise_on_error: bool = True) -> ReconcileReport:
        """Bring the remote command list in line with the queue.

        Creates queued commands missing remotely, deletes remote commands
        that are not declared, and updates the ones present on both sides.
        All calls run concurrently; only successful calls change the queue
        and cache, so failed ones are retried by the next reconcile().

        Args:
            raise_on_error: Raise ReconcileError if any call failed.

        Returns:
            Report with one result per command operation.

        Raises:
            StoreBusyError: If a reconcile() is already running on this store.
            ReconcileError: If the fetch fails, or any call fails and
                raise_on_error is set.
        """
        if self._busy:
            raise StoreBusyError(f"Reconciliation already running for scope '{self.scope.key}'")

        self._busy = True
        try:
            remote = await self.fetch_remote()
            plan, desired, remote_by_name = self.plan(remote)
            logger.info(
                f"[{self.scope.key}] Reconciling: {len(plan.create)} to create, "
                f"{len(plan.delete)} to delete, {len(plan.update)} to update"
            )

            operations = [self._create(desired[name]) for name in sorted(plan.create)]
            operations += [self._delete(remote_by_name[name]) for name in sorted(plan.delete)]
            operations += [
                self._update(desired[name], remote_by_name[name])
                for name in sorted(plan.update)
            ]
            results = list(await asyncio.gather(*operations))

            self._apply(results, desired, remote_by_name)
        finally:
            self._busy = False

        report = ReconcileReport(scope=self.scope.key, results=results)
        logger.info(report.summary())
        if raise_on_error:
            report.raise_for_failures()
        return report

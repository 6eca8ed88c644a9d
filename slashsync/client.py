"""Application-level entry point tying stores to one transport."""
import logging

from slashsync.api import DiscordAPI
from slashsync.commands.results import ReconcileReport
from slashsync.commands.store import CommandScope, CommandsStore, CommandsTransport
from slashsync.config.settings import Config

logger = logging.getLogger(__name__)


class SlashSyncClient:
    """Owns the global command store and one store per guild."""

    def __init__(
        self,
        application_id: str,
        api: CommandsTransport,
        skip_unchanged: bool = False,
    ):
        """Initialize with application id and transport.

        Args:
            application_id: Discord application id.
            api: Transport shared by every store.
            skip_unchanged: Passed on to each store.
        """
        self.application_id = str(application_id)
        self.api = api
        self.skip_unchanged = skip_unchanged
        self.commands = CommandsStore(
            api, CommandScope(self.application_id), skip_unchanged=skip_unchanged
        )
        self._guilds: dict[str, CommandsStore] = {}

    @classmethod
    def from_config(cls, config: Config) -> "SlashSyncClient":
        """Build a client with a DiscordAPI transport from settings."""
        api = DiscordAPI(
            token=config.bot_token,
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
        )
        return cls(config.application_id, api, skip_unchanged=config.sync.skip_unchanged)

    def guild(self, guild_id: str | int) -> CommandsStore:
        """Get (or create) the store for a guild."""
        guild_id = str(guild_id)
        if guild_id not in self._guilds:
            self._guilds[guild_id] = CommandsStore(
                self.api,
                CommandScope(self.application_id, guild_id),
                skip_unchanged=self.skip_unchanged,
            )
        return self._guilds[guild_id]

    @property
    def stores(self) -> list[CommandsStore]:
        """Global store followed by guild stores."""
        return [self.commands, *self._guilds.values()]

    async def sync_all(self, raise_on_error: bool = True) -> dict[str, ReconcileReport]:
        """Reconcile every store one after another.

        Args:
            raise_on_error: Stop at the first scope with a failed call.

        Returns:
            Report per scope key.
        """
        reports = {}
        for store in self.stores:
            reports[store.scope.key] = await store.reconcile(raise_on_error=raise_on_error)
        return reports

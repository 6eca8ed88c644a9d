"""slashsync entry point."""
import asyncio
import logging
import os

from dotenv import load_dotenv

from slashsync.client import SlashSyncClient
from slashsync.commands.discovery import load_command_file, populate
from slashsync.config.settings import load_config
from slashsync.exceptions import SlashSyncError

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


async def run_sync(config_path: str | None = None) -> dict | None:
    """Load settings and declared commands, then reconcile every scope.

    Returns:
        Reports per scope, or None if setup or reconciliation failed.
    """
    load_dotenv()

    config = load_config(config_path or os.getenv("SLASHSYNC_CONFIG"))
    config.bot_token = os.getenv("DISCORD_BOT_TOKEN", "")
    if not config.application_id:
        config.application_id = os.getenv("DISCORD_APPLICATION_ID", "")

    if not config.bot_token:
        logger.error("DISCORD_BOT_TOKEN environment variable required")
        return None
    if not config.application_id:
        logger.error("application_id must be set in config or DISCORD_APPLICATION_ID")
        return None

    client = SlashSyncClient.from_config(config)
    declarations = load_command_file(config.sync.commands_file)
    queued = populate(client, declarations)
    logger.info(f"Queued {queued} commands for {len(client.stores)} scopes")

    try:
        reports = await client.sync_all()
    except SlashSyncError as e:
        logger.error(f"Sync failed: {e}")
        return None

    for report in reports.values():
        logger.info(report.summary())
    return reports


def main() -> None:
    """Main entry point."""
    reports = asyncio.run(run_sync())
    if reports is None:
        raise SystemExit(1)


if __name__ == "__main__":
    main()

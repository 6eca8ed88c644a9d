"""Configuration settings."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.slashsync/config.yaml")
DEFAULT_COMMANDS_FILE = "~/.slashsync/commands.yaml"


@dataclass
class APIConfig:
    """Discord HTTP API settings."""

    base_url: str = "https://discord.com/api/v10"
    timeout_seconds: float = 30.0


@dataclass
class SyncConfig:
    """Reconciliation settings."""

    skip_unchanged: bool = False  # don't PATCH commands matching remote state
    commands_file: str = DEFAULT_COMMANDS_FILE


@dataclass
class Config:
    """Main configuration."""

    application_id: str = ""
    api: APIConfig = field(default_factory=APIConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    bot_token: str = ""  # from DISCORD_BOT_TOKEN, never read from YAML

    def is_complete(self) -> bool:
        """Check that credentials needed for API calls are set."""
        return bool(self.application_id and self.bot_token)


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file."""
    if path is None:
        path = DEFAULT_CONFIG_PATH.expanduser()
    else:
        path = Path(path).expanduser()

    if not path.exists():
        logger.info(f"No config file at {path}, using defaults")
        return _parse_config({})

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse config dictionary into Config object."""
    app_id = data.get("application_id", "")
    config = Config(application_id=str(app_id) if app_id else "")

    if "api" in data:
        config.api = APIConfig(
            base_url=data["api"].get("base_url", "https://discord.com/api/v10"),
            timeout_seconds=float(data["api"].get("timeout_seconds", 30.0)),
        )

    sync_data = data.get("sync", {})
    commands_file = sync_data.get("commands_file", DEFAULT_COMMANDS_FILE)
    config.sync = SyncConfig(
        skip_unchanged=bool(sync_data.get("skip_unchanged", False)),
        commands_file=str(Path(commands_file).expanduser()),
    )

    return config

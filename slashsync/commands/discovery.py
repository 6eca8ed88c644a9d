"""Load declared commands from a YAML file."""
import logging
from pathlib import Path
from typing import Any

import yaml

from slashsync.exceptions import InvalidDescriptorError

from .models import CommandDefinition

logger = logging.getLogger(__name__)


def _parse_entries(entries: Any, scope: str) -> list[CommandDefinition]:
    """Parse a list of command mappings, skipping invalid ones."""
    if not isinstance(entries, list):
        logger.warning(f"Commands for scope '{scope}' must be a list, skipping")
        return []

    definitions = []
    for entry in entries:
        try:
            definitions.append(CommandDefinition.from_dict(entry))
        except InvalidDescriptorError as e:
            logger.warning(f"Skipping command in scope '{scope}': {e}")
    return definitions


def load_command_file(path: Path | str) -> dict[str | None, list[CommandDefinition]]:
    """Read command declarations grouped by scope.

    File layout:

        global:
          - name: ping
            description: Check latency
        guilds:
          "123456789":
            - name: deploy
              description: Deploy a build

    Args:
        path: Path to the YAML file.

    Returns:
        Mapping of guild id (None for global) to definitions. Empty if the
        file does not exist.
    """
    path = Path(path).expanduser()
    if not path.exists():
        logger.info(f"No command file at {path}")
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        logger.warning(f"Command file {path} must contain a mapping, ignoring it")
        return {}

    declarations: dict[str | None, list[CommandDefinition]] = {}

    if "global" in data:
        declarations[None] = _parse_entries(data["global"], "global")

    for guild_id, entries in (data.get("guilds") or {}).items():
        declarations[str(guild_id)] = _parse_entries(entries, str(guild_id))

    total = sum(len(v) for v in declarations.values())
    logger.info(f"Loaded {total} commands in {len(declarations)} scopes from {path}")
    return declarations


def populate(client, declarations: dict[str | None, list[CommandDefinition]]) -> int:
    """Queue declared commands on the client's stores.

    Args:
        client: SlashSyncClient owning the stores.
        declarations: Output of load_command_file().

    Returns:
        Number of commands queued.
    """
    count = 0
    for guild_id, definitions in declarations.items():
        store = client.guild(guild_id) if guild_id else client.commands
        for definition in definitions:
            store.add_to_queue(definition)
            count += 1
    return count

"""Discord HTTP transport."""
from .client import DiscordAPI

__all__ = ["DiscordAPI"]

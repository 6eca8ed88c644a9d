"""Synchronize declared slash commands with the Discord API."""
from .client import SlashSyncClient
from .commands import (
    CommandDefinition,
    CommandDescriptor,
    CommandOptionType,
    CommandScope,
    CommandsStore,
    ReconcileReport,
    create_descriptor,
)
from .exceptions import (
    DuplicateNameError,
    InvalidDescriptorError,
    ReconcileError,
    ReconcilePhase,
    SlashSyncError,
    StoreBusyError,
    TransportError,
)

__all__ = [
    "SlashSyncClient",
    "CommandDefinition",
    "CommandDescriptor",
    "CommandOptionType",
    "CommandScope",
    "CommandsStore",
    "ReconcileReport",
    "create_descriptor",
    "DuplicateNameError",
    "InvalidDescriptorError",
    "ReconcileError",
    "ReconcilePhase",
    "SlashSyncError",
    "StoreBusyError",
    "TransportError",
]

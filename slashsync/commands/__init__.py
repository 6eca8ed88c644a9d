"""Application command models and reconciliation."""
from .models import (
    CommandDefinition,
    CommandDescriptor,
    CommandOptionType,
    create_descriptor,
)
from .results import OperationResult, ReconcileReport
from .store import CommandScope, CommandsStore, ReconcilePlan
from .discovery import load_command_file, populate

__all__ = [
    "CommandDefinition",
    "CommandDescriptor",
    "CommandOptionType",
    "create_descriptor",
    "OperationResult",
    "ReconcileReport",
    "CommandScope",
    "CommandsStore",
    "ReconcilePlan",
    "load_command_file",
    "populate",
]

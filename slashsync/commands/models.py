"""Data models for application commands."""
import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

from slashsync.exceptions import InvalidDescriptorError

# Fields sent when creating or editing a command
UPLOAD_FIELDS = ("name", "description", "options")


class CommandOptionType(IntEnum):
    """Discord application command option types."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


def _check_options(options: Any, path: str = "options") -> None:
    """Check the structural shape of an option list.

    Only names and types are looked at; per-type rules are left to the API.
    """
    if not isinstance(options, list):
        raise InvalidDescriptorError(f"{path} must be a list, got {type(options).__name__}")

    valid_types = {t.value for t in CommandOptionType}
    for i, option in enumerate(options):
        where = f"{path}[{i}]"
        if not isinstance(option, Mapping):
            raise InvalidDescriptorError(f"{where} must be a mapping")
        if not isinstance(option.get("name"), str) or not option["name"]:
            raise InvalidDescriptorError(f"{where} is missing a name")
        if option.get("type") not in valid_types:
            raise InvalidDescriptorError(
                f"{where} has unknown type {option.get('type')!r}"
            )
        if "options" in option:
            _check_options(option["options"], f"{where}.options")


@dataclass(frozen=True)
class CommandDefinition:
    """A locally declared slash command."""

    name: str
    description: str = ""
    options: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidDescriptorError("Command definition requires a name")
        _check_options(self.options)
        # Detach from the caller's list so later mutation can't bypass the check
        object.__setattr__(self, "options", copy.deepcopy(self.options))

    def __hash__(self):
        return hash(self.name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CommandDefinition":
        """Build a definition from a plain mapping."""
        if not isinstance(data, Mapping):
            raise InvalidDescriptorError(
                f"Command definition must be a mapping, got {type(data).__name__}"
            )
        return cls(
            name=data.get("name"),
            description=data.get("description") or "",
            options=data.get("options") or [],
        )

    def to_payload(self) -> dict[str, Any]:
        """Convert to the API create/edit payload."""
        return {
            "name": self.name,
            "description": self.description,
            "options": copy.deepcopy(self.options),
        }


class CommandDescriptor:
    """A command, optionally bound to its remote identity.

    Descriptors compare equal by name: the remote id is unknown until the
    command has been created.
    """

    def __init__(
        self,
        local_definition: CommandDefinition | None = None,
        remote_id: str | None = None,
        remote_snapshot: dict[str, Any] | None = None,
    ):
        if local_definition is None and not remote_snapshot:
            raise InvalidDescriptorError(
                "Descriptor needs a local definition or a remote representation"
            )
        if local_definition is not None and not isinstance(local_definition, CommandDefinition):
            raise InvalidDescriptorError(
                f"Expected CommandDefinition, got {type(local_definition).__name__}"
            )
        self.local_definition = local_definition
        self.remote_id = remote_id
        self.remote_snapshot = remote_snapshot

    @classmethod
    def from_remote(cls, data: Mapping[str, Any]) -> "CommandDescriptor":
        """Hydrate a descriptor from a remote command representation."""
        if not isinstance(data, Mapping):
            raise InvalidDescriptorError(f"Remote command must be a mapping: {data!r}")
        descriptor = cls(remote_snapshot=dict(data))
        descriptor.hydrate(data)
        return descriptor

    @property
    def name(self) -> str:
        """Command name."""
        if self.local_definition is not None:
            return self.local_definition.name
        return self.remote_snapshot["name"]

    @property
    def managed(self) -> bool:
        """Whether this command was declared locally."""
        return self.local_definition is not None

    def hydrate(self, remote: Mapping[str, Any]) -> None:
        """Bind this descriptor to a remote representation."""
        if not isinstance(remote, Mapping) or not remote.get("id") or not remote.get("name"):
            raise InvalidDescriptorError(f"Remote command is missing id or name: {remote!r}")
        self.remote_id = str(remote["id"])
        self.remote_snapshot = copy.deepcopy(dict(remote))

    def serialize_for_upload(self) -> dict[str, Any]:
        """Build the API payload, without remote-only fields."""
        if self.local_definition is not None:
            return self.local_definition.to_payload()
        return {
            "name": self.remote_snapshot["name"],
            "description": self.remote_snapshot.get("description", ""),
            "options": copy.deepcopy(self.remote_snapshot.get("options") or []),
        }

    def changed_fields(self) -> dict[str, Any]:
        """Get upload fields that differ from the last seen remote state."""
        payload = self.serialize_for_upload()
        if not self.remote_snapshot:
            return payload

        changes = {}
        for key in UPLOAD_FIELDS:
            remote_value = self.remote_snapshot.get(key)
            if key == "options":
                remote_value = remote_value or []
            elif key == "description":
                remote_value = remote_value or ""
            if payload[key] != remote_value:
                changes[key] = payload[key]
        return changes

    def __eq__(self, other):
        if not isinstance(other, CommandDescriptor):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"CommandDescriptor(name={self.name!r}, remote_id={self.remote_id!r})"


def create_descriptor(item: CommandDefinition | CommandDescriptor) -> CommandDescriptor:
    """Turn a definition or descriptor into a descriptor.

    Args:
        item: A CommandDefinition to wrap, or a ready CommandDescriptor.

    A descriptor without a local definition gets one frozen from its
    snapshot, so its content stays the desired state once it is queued.

    Returns:
        The descriptor to queue.

    Raises:
        InvalidDescriptorError: For any other input.
    """
    if isinstance(item, CommandDescriptor):
        if item.local_definition is None:
            item.local_definition = CommandDefinition.from_dict(item.serialize_for_upload())
        return item
    if isinstance(item, CommandDefinition):
        return CommandDescriptor(local_definition=item)
    raise InvalidDescriptorError(
        f"Expected CommandDefinition or CommandDescriptor, got {type(item).__name__}"
    )

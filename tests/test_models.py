"""Test command models."""
import pytest

from slashsync.commands.models import (
    CommandDefinition,
    CommandDescriptor,
    CommandOptionType,
    create_descriptor,
)
from slashsync.exceptions import InvalidDescriptorError


def test_command_definition_creation():
    """CommandDefinition can be created with all fields."""
    definition = CommandDefinition(
        name="echo",
        description="Repeat a message",
        options=[{"name": "text", "description": "Text", "type": CommandOptionType.STRING}],
    )

    assert definition.name == "echo"
    assert definition.description == "Repeat a message"
    assert definition.options[0]["type"] == 3


def test_command_definition_defaults():
    """CommandDefinition has empty description and options by default."""
    definition = CommandDefinition(name="ping")

    assert definition.description == ""
    assert definition.options == []


@pytest.mark.parametrize("name", ["", "   ", None])
def test_command_definition_requires_name(name):
    """A missing or blank name is rejected."""
    with pytest.raises(InvalidDescriptorError):
        CommandDefinition(name=name)


def test_command_definition_rejects_non_list_options():
    """Options must be a list."""
    with pytest.raises(InvalidDescriptorError):
        CommandDefinition(name="ping", options={"name": "x", "type": 3})


def test_command_definition_rejects_unknown_option_type():
    """Option types must be known values."""
    with pytest.raises(InvalidDescriptorError, match="unknown type"):
        CommandDefinition(name="ping", options=[{"name": "x", "type": 42}])


def test_command_definition_rejects_unnamed_option():
    """Every option needs a name."""
    with pytest.raises(InvalidDescriptorError, match="missing a name"):
        CommandDefinition(name="ping", options=[{"type": 3}])


def test_command_definition_checks_nested_options():
    """Sub-command options are checked too."""
    with pytest.raises(InvalidDescriptorError, match=r"options\[0\]\.options\[0\]"):
        CommandDefinition(
            name="admin",
            options=[{
                "name": "ban",
                "type": CommandOptionType.SUB_COMMAND,
                "options": [{"name": "user", "type": "user"}],
            }],
        )


def test_command_definition_from_dict():
    """from_dict builds a definition from a plain mapping."""
    definition = CommandDefinition.from_dict({"name": "ping", "description": "Ping"})

    assert definition == CommandDefinition("ping", "Ping")


def test_command_definition_from_dict_rejects_non_mapping():
    """from_dict only takes mappings."""
    with pytest.raises(InvalidDescriptorError):
        CommandDefinition.from_dict(["ping"])


def test_descriptor_from_local_definition():
    """A local descriptor has no remote identity yet."""
    descriptor = CommandDescriptor(CommandDefinition("ping"))

    assert descriptor.name == "ping"
    assert descriptor.remote_id is None
    assert descriptor.remote_snapshot is None
    assert descriptor.managed is True


def test_descriptor_from_remote():
    """from_remote assigns remote id and snapshot."""
    descriptor = CommandDescriptor.from_remote(
        {"id": 123, "name": "ping", "description": "Ping", "version": "1"}
    )

    assert descriptor.name == "ping"
    assert descriptor.remote_id == "123"
    assert descriptor.remote_snapshot["version"] == "1"
    assert descriptor.managed is False


@pytest.mark.parametrize("data", [{}, {"name": "ping"}, {"id": "1"}, "ping"])
def test_descriptor_from_remote_requires_id_and_name(data):
    """Remote representations need both id and name."""
    with pytest.raises(InvalidDescriptorError):
        CommandDescriptor.from_remote(data)


def test_descriptor_requires_definition_or_remote():
    """A descriptor cannot be empty."""
    with pytest.raises(InvalidDescriptorError):
        CommandDescriptor()


def test_serialize_for_upload_excludes_remote_fields():
    """Upload payload only has name, description and options."""
    descriptor = CommandDescriptor(CommandDefinition("ping", "Ping"))
    descriptor.hydrate({"id": "1", "application_id": "app", "name": "ping", "version": "5"})

    assert descriptor.serialize_for_upload() == {
        "name": "ping",
        "description": "Ping",
        "options": [],
    }


def test_serialize_for_upload_from_remote_only():
    """A descriptor seen only remotely serializes from its snapshot."""
    descriptor = CommandDescriptor.from_remote(
        {"id": "1", "name": "old", "description": "Old", "guild_id": "42"}
    )

    assert descriptor.serialize_for_upload() == {
        "name": "old",
        "description": "Old",
        "options": [],
    }


def test_changed_fields():
    """changed_fields lists only the fields that drifted."""
    descriptor = CommandDescriptor(CommandDefinition("ping", "v2"))
    descriptor.hydrate({"id": "1", "name": "ping", "description": "v1"})

    assert descriptor.changed_fields() == {"description": "v2"}


def test_changed_fields_without_snapshot_is_full_payload():
    """Without a snapshot every field counts as changed."""
    descriptor = CommandDescriptor(CommandDefinition("ping", "Ping"))

    assert descriptor.changed_fields() == descriptor.serialize_for_upload()


def test_descriptor_equality_by_name():
    """Descriptors are equal when names match, regardless of id."""
    local = CommandDescriptor(CommandDefinition("ping", "local"))
    remote = CommandDescriptor.from_remote({"id": "1", "name": "ping", "description": "x"})
    other = CommandDescriptor(CommandDefinition("pong"))

    assert local == remote
    assert hash(local) == hash(remote)
    assert local != other


def test_create_descriptor_wraps_definition():
    """create_descriptor wraps a definition."""
    descriptor = create_descriptor(CommandDefinition("ping"))

    assert isinstance(descriptor, CommandDescriptor)
    assert descriptor.name == "ping"


def test_create_descriptor_passes_descriptor_through():
    """create_descriptor returns descriptors unchanged."""
    descriptor = CommandDescriptor(CommandDefinition("ping"))

    assert create_descriptor(descriptor) is descriptor


@pytest.mark.parametrize("item", [{"name": "ping"}, "ping", None, CommandDefinition])
def test_create_descriptor_rejects_other_input(item):
    """Anything else is an invalid descriptor."""
    with pytest.raises(InvalidDescriptorError):
        create_descriptor(item)


def test_create_descriptor_freezes_snapshot_of_bare_descriptor():
    """A descriptor without definition is given one from its snapshot."""
    descriptor = CommandDescriptor.from_remote({"id": "7", "name": "ping", "description": "v2"})

    result = create_descriptor(descriptor)

    assert result is descriptor
    assert result.managed is True
    assert result.local_definition == CommandDefinition("ping", "v2")
    result.hydrate({"id": "1", "name": "ping", "description": "v1"})
    assert result.changed_fields() == {"description": "v2"}


def test_command_definition_copies_options():
    """Mutating the caller's option list does not affect the definition."""
    options = [{"name": "text", "type": CommandOptionType.STRING}]
    definition = CommandDefinition("echo", options=options)

    options[0]["type"] = 99
    options.append({"name": "bad", "type": 99})

    assert definition.options == [{"name": "text", "type": 3}]


def test_command_definition_is_hashable():
    """Definitions hash by name."""
    definition = CommandDefinition("echo", options=[{"name": "text", "type": 3}])

    assert hash(definition) == hash(CommandDefinition("echo"))
    assert {definition} == {CommandDefinition("echo", options=[{"name": "text", "type": 3}])}

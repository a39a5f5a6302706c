import pytest

from kvdb.compute import (
    CommandID,
    Compute,
    ComputeError,
    EmptyCommandError,
    InvalidArgumentsNumberError,
    Query,
    UnknownCommandError,
    arguments_number,
    command_id_from_name,
)


@pytest.fixture
def compute():
    return Compute()


@pytest.mark.parametrize("cmd", ["", "   ", "\t  \n  "])
def test_parse_empty_command(compute, cmd):
    with pytest.raises(EmptyCommandError) as info:
        compute.parse(cmd)
    assert str(info.value) == "empty command"


@pytest.mark.parametrize("cmd", ["UNKNOWN", "INVALID arg1 arg2", "randomcommand", "123"])
def test_parse_unknown_command(compute, cmd):
    with pytest.raises(UnknownCommandError) as info:
        compute.parse(cmd)
    assert str(info.value) == "unknown command"


@pytest.mark.parametrize(
    "cmd",
    [
        "SET key",
        "GET",
        "DEL",
        "GET key extra_arg",
        "SET key value extra_arg",
        "DEL key extra_arg",
    ],
)
def test_parse_invalid_arguments_number(compute, cmd):
    with pytest.raises(InvalidArgumentsNumberError) as info:
        compute.parse(cmd)
    assert str(info.value) == "invalid arguments number"


@pytest.mark.parametrize(
    "cmd, command_id, arguments",
    [
        ("GET key", CommandID.GET, ("key",)),
        ("SET key value", CommandID.SET, ("key", "value")),
        ("DEL key", CommandID.DEL, ("key",)),
    ],
)
def test_parse_valid_commands(compute, cmd, command_id, arguments):
    query = compute.parse(cmd)
    assert query == Query(command_id, arguments)
    assert query.command_id == command_id
    assert query.arguments == arguments


@pytest.mark.parametrize(
    "cmd",
    ["GET    key1", "   GET key1", "GET key1   ", "  GET   key1  ", "\tGET\t\tkey1\t"],
)
def test_parse_whitespace_handling(compute, cmd):
    query = compute.parse(cmd)
    assert query.command_id == CommandID.GET
    assert query.arguments == ("key1",)


@pytest.mark.parametrize("cmd", ["get key1", "GeT key1"])
def test_parse_case_sensitive_rejects(compute, cmd):
    with pytest.raises(UnknownCommandError):
        compute.parse(cmd)


def test_parse_case_sensitive_accepts_uppercase(compute):
    query = compute.parse("GET key1")
    assert query.command_id == CommandID.GET
    assert query.arguments == ("key1",)


def test_parse_accepts_bytes(compute):
    query = compute.parse(b"SET key value\n")
    assert query == Query(CommandID.SET, ("key", "value"))


def test_errors_share_base_class():
    for exc in (EmptyCommandError(), UnknownCommandError(), InvalidArgumentsNumberError()):
        assert isinstance(exc, ComputeError)
    assert "empty command" in str(EmptyCommandError())
    assert "unknown command" in str(UnknownCommandError())
    assert "invalid arguments number" in str(InvalidArgumentsNumberError())


def test_command_name_lookup():
    assert command_id_from_name("SET") == CommandID.SET
    assert command_id_from_name("GET") == CommandID.GET
    assert command_id_from_name("DEL") == CommandID.DEL
    assert command_id_from_name("set") == CommandID.UNKNOWN


def test_arguments_number():
    assert arguments_number(CommandID.SET) == 2
    assert arguments_number(CommandID.GET) == 1
    assert arguments_number(CommandID.DEL) == 1
    assert arguments_number(CommandID.UNKNOWN) == 0
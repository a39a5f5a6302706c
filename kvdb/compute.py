"""Parsing of text commands into queries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class CommandID(IntEnum):
    UNKNOWN = 0
    SET = 1
    GET = 2
    DEL = 3


_NAMES = {
    "SET": CommandID.SET,
    "GET": CommandID.GET,
    "DEL": CommandID.DEL,
}

_ARGUMENTS = {
    CommandID.SET: 2,
    CommandID.GET: 1,
    CommandID.DEL: 1,
}

# Unicode white space as understood by the wire protocol.
_WHITESPACE = re.compile(
    "[\t\n\v\f\r \x85\xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+"
)


def command_id_from_name(name: str) -> CommandID:
    """Map a command name to its id; names are case-sensitive."""
    return _NAMES.get(name, CommandID.UNKNOWN)


def arguments_number(command_id: CommandID) -> int:
    """Number of arguments a command takes; zero for an unknown command."""
    return _ARGUMENTS.get(command_id, 0)


@dataclass(frozen=True)
class Query:
    command_id: CommandID
    arguments: tuple[str, ...] = ()


class ComputeError(ValueError):
    """A command could not be parsed."""


class EmptyCommandError(ComputeError):
    def __init__(self) -> None:
        super().__init__("empty command")


class UnknownCommandError(ComputeError):
    def __init__(self) -> None:
        super().__init__("unknown command")


class InvalidArgumentsNumberError(ComputeError):
    def __init__(self) -> None:
        super().__init__("invalid arguments number")


def _as_text(cmd: Union[str, bytes]) -> str:
    if isinstance(cmd, (bytes, bytearray, memoryview)):
        return bytes(cmd).decode("utf-8", errors="surrogateescape")
    return cmd


class Compute:
    """Turns raw command text into a validated :class:`Query`."""

    def parse(self, cmd: Union[str, bytes]) -> Query:
        fields = [part for part in _WHITESPACE.split(_as_text(cmd)) if part]
        if not fields:
            raise EmptyCommandError()
        command_id = command_id_from_name(fields[0])
        if command_id is CommandID.UNKNOWN:
            raise UnknownCommandError()
        arguments = tuple(fields[1:])
        if len(arguments) != arguments_number(command_id):
            raise InvalidArgumentsNumberError()
        return Query(command_id, arguments)
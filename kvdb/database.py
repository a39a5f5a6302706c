"""Request handling: parse a command and run it against storage."""

from __future__ import annotations

from . import logger
from .compute import CommandID, Compute, ComputeError, Query
from .configuration import Config
from .in_memory import EngineError
from .storage import Storage

_OK = b"OK"
_INTERNAL_ERROR = b"Internal error"


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


class Database:
    """Answers raw request bytes with raw response bytes."""

    def __init__(self, cfg: Config) -> None:
        self._compute = Compute()
        self._storage = Storage(cfg.engine)
        self.started = False

    def start(self) -> None:
        """Mark the database as ready to serve requests."""
        self.started = True

    def handle_request(self, data: bytes) -> bytes:
        try:
            query = self._compute.parse(data)
        except ComputeError as exc:
            return _encode(str(exc))
        handlers = {
            CommandID.GET: self.handle_get_request,
            CommandID.SET: self.handle_set_request,
            CommandID.DEL: self.handle_del_request,
        }
        handler = handlers.get(query.command_id)
        if handler is None:
            logger.error("Compute layer is incorrect and returns an unknown command")
            return _INTERNAL_ERROR
        return handler(query)

    def handle_get_request(self, query: Query) -> bytes:
        try:
            return _encode(self._storage.get(query.arguments[0]))
        except EngineError as exc:
            return _encode(str(exc))

    def handle_set_request(self, query: Query) -> bytes:
        key, value = query.arguments[0], query.arguments[1]
        try:
            self._storage.set(key, value)
        except EngineError as exc:
            return _encode(str(exc))
        return _OK

    def handle_del_request(self, query: Query) -> bytes:
        try:
            self._storage.delete(query.arguments[0])
        except EngineError as exc:
            return _encode(str(exc))
        return _OK
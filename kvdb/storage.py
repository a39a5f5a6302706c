"""Storage layer choosing and delegating to a configured engine."""

from __future__ import annotations

from typing import Protocol

from .configuration import ENGINE_IN_MEMORY, EngineConfig
from .in_memory import InMemoryEngine


class UnknownEngineError(ValueError):
    def __init__(self) -> None:
        super().__init__("unknown engine type")


class Engine(Protocol):
    def get(self, key: str) -> str: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class Storage:
    """Front for the engine named in the configuration."""

    def __init__(self, cfg: EngineConfig) -> None:
        if cfg.type == ENGINE_IN_MEMORY:
            self._engine: Engine = InMemoryEngine()
        else:
            raise UnknownEngineError()

    def get(self, key: str) -> str:
        return self._engine.get(key)

    def set(self, key: str, value: str) -> None:
        self._engine.set(key, value)

    def delete(self, key: str) -> None:
        self._engine.delete(key)
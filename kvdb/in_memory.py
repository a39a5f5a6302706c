"""A thread-safe key-value engine kept in process memory."""

from __future__ import annotations

import threading


class EngineError(Exception):
    """A storage engine operation failed."""


class KeyNotFoundError(EngineError, LookupError):
    def __init__(self) -> None:
        super().__init__("key not found")


class EmptyKeyError(EngineError, ValueError):
    def __init__(self) -> None:
        super().__init__("key cannot be empty")


class EmptyValueError(EngineError, ValueError):
    def __init__(self) -> None:
        super().__init__("value cannot be empty")


class InMemoryEngine:
    """String keys mapped to non-empty string values, guarded by a lock."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str:
        with self._lock:
            value = self._data.get(key, "")
        if not value:
            raise KeyNotFoundError()
        return value

    def set(self, key: str, value: str) -> None:
        if not key:
            raise EmptyKeyError()
        if not value:
            raise EmptyValueError()
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        """Remove ``key``; removing a missing key is not an error."""
        with self._lock:
            self._data.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data
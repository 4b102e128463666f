"""Key/value storage: the Storage protocol, backends, and change notification."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class Storage(Protocol):
    def get(self, key: str) -> str | None: ...

    def store(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStorage:
    def __init__(self) -> None:
        self._cache: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._cache.get(key)

    def store(self, key: str, value: str) -> None:
        self._cache[key] = value

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)


class JsonFileStorage:
    """String values kept in a single JSON object file.

    A missing or unreadable file reads as empty; writes replace the file atomically.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError):
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def store(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# ── Change notification ─────────────────────────────────────────────


@dataclass(frozen=True)
class StorageChange:
    key: str


StorageListener = Callable[[StorageChange], None]


class Subscription:
    def __init__(self, dispose: Callable[[], None]):
        self._dispose = dispose
        self._disposed = False

    def dispose(self) -> None:
        if not self._disposed:
            self._disposed = True
            self._dispose()


class ObservableStorage:
    """Wraps any Storage and notifies subscribers after each successful mutation."""

    def __init__(self, backend: Storage):
        self.backend = backend
        self._subscribers: list[StorageListener] = []

    def on_did_change(self, callback: StorageListener) -> Subscription:
        self._subscribers.append(callback)
        return Subscription(lambda: self._subscribers.remove(callback))

    def _fire(self, key: str) -> None:
        change = StorageChange(key)
        for subscriber in list(self._subscribers):
            subscriber(change)

    def get(self, key: str) -> str | None:
        return self.backend.get(key)

    def store(self, key: str, value: str) -> None:
        self.backend.store(key, value)
        self._fire(key)

    def delete(self, key: str) -> None:
        self.backend.delete(key)
        self._fire(key)

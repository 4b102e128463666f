"""Secret storage wrapper around any Storage backend."""

from __future__ import annotations

import logging

from .base import Storage

logger = logging.getLogger(__name__)


class SecretStorage:
    """Storage for secrets. Must be initialised with a backend before use.

    Values are never logged.
    """

    def __init__(self) -> None:
        self._backend: Storage | None = None

    @property
    def storage(self) -> Storage:
        if self._backend is None:
            raise RuntimeError("SecretStorage used before init()")
        return self._backend

    def init(self, backend: Storage) -> Storage:
        if self._backend is None:
            self._backend = backend
            logger.info("Secret storage initialized")
        return self._backend

    def get(self, key: str) -> str | None:
        if not key:
            return None
        try:
            return self.storage.get(key)
        except OSError as e:
            logger.error("Failed to read secret %s: %s", key, e)
            return None

    def store(self, key: str, value: str) -> None:
        if not value:
            return
        self.storage.store(key, value)

    def delete(self, key: str) -> None:
        logger.info("Deleting secret %s", key)
        self.storage.delete(key)

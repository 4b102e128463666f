"""Global state: JSON-encoded values over a Storage backend, with defaults."""

from __future__ import annotations

import json
import logging
from typing import Any

from .base import Storage

logger = logging.getLogger(__name__)

GLOBAL_STATE_DEFAULTS: dict[str, Any] = {
    "workspaceRoots": [],
}


class StateManager:
    def __init__(self, storage: Storage):
        self.storage = storage

    def get_global_state_key(self, key: str) -> Any:
        raw = self.storage.get(key)
        if raw is None:
            return _default(key)
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed state value for %s", key)
            return _default(key)

    def set_global_state_key(self, key: str, value: Any) -> None:
        if value is None:
            self.storage.delete(key)
        else:
            self.storage.store(key, json.dumps(value))


def _default(key: str) -> Any:
    value = GLOBAL_STATE_DEFAULTS.get(key)
    # fresh copy so callers can't mutate the defaults
    return json.loads(json.dumps(value)) if value is not None else None

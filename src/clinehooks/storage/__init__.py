"""Storage: key/value backends, change notification, secrets and global state."""

from .base import (
    InMemoryStorage,
    JsonFileStorage,
    ObservableStorage,
    Storage,
    StorageChange,
    Subscription,
)
from .secrets import SecretStorage
from .state import GLOBAL_STATE_DEFAULTS, StateManager

__all__ = [
    "GLOBAL_STATE_DEFAULTS",
    "InMemoryStorage",
    "JsonFileStorage",
    "ObservableStorage",
    "SecretStorage",
    "StateManager",
    "Storage",
    "StorageChange",
    "Subscription",
]

"""Hook discovery: directory resolution, descriptor lookup, directory sources."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from .models import HookDescriptor, HookDirectory, HookScope, ScopeRoot

if TYPE_CHECKING:
    from clinehooks.storage import StateManager

logger = logging.getLogger(__name__)

HOOKS_SUBDIR = Path(".clinerules") / "hooks"

WORKSPACE_ROOTS_KEY = "workspaceRoots"


def resolve_hook_dirs(scope_roots: Iterable[ScopeRoot]) -> list[HookDirectory]:
    """Append the hooks subdirectory to each root. Input order is kept."""
    return [HookDirectory(scope=root.scope, path=Path(root.path) / HOOKS_SUBDIR) for root in scope_roots]


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_hooks(hook_name: str, directories: Iterable[HookDirectory]) -> list[HookDescriptor]:
    """Return one descriptor per directory holding an executable named *hook_name*."""
    found: list[HookDescriptor] = []
    seen: set[Path] = set()
    for directory in directories:
        key = Path(os.path.abspath(directory.path))
        if key in seen:
            continue
        seen.add(key)
        candidate = key / hook_name
        try:
            if not candidate.exists():
                continue
            usable = _is_executable(candidate)
        except OSError as e:
            logger.warning("Skipping hook %s: cannot inspect %s: %s", hook_name, candidate, e)
            continue
        if not usable:
            logger.warning("Skipping hook %s: %s is not an executable file", hook_name, candidate)
            continue
        found.append(HookDescriptor(hook_name=hook_name, scope=directory.scope, path=candidate))
    return found


# ── Directory sources ───────────────────────────────────────────────


class HookDirectorySource(Protocol):
    def list_hook_dirs(self) -> list[HookDirectory]: ...

    def workspace_roots(self) -> list[Path]: ...


class StaticHookDirectorySource:
    """A fixed, already-resolved list of hook directories."""

    def __init__(self, directories: Sequence[HookDirectory], workspaces: Sequence[Path] = ()):
        self.directories = list(directories)
        self.workspaces = [Path(p) for p in workspaces]

    def list_hook_dirs(self) -> list[HookDirectory]:
        return list(self.directories)

    def workspace_roots(self) -> list[Path]:
        return list(self.workspaces)


def workspace_root_path(entry: object) -> str:
    if isinstance(entry, dict):
        return str(entry.get("path") or "")
    if isinstance(entry, (str, os.PathLike)):
        return os.fspath(entry)
    return ""


class StateHookDirectorySource:
    """Global root first, then every workspace root recorded in global state."""

    def __init__(
        self,
        state: StateManager,
        global_root: Path | None,
        extra_workspaces: Sequence[Path] = (),
    ):
        self.state = state
        self.global_root = global_root
        self.extra_workspaces = list(extra_workspaces)

    def workspace_roots(self) -> list[Path]:
        entries = self.state.get_global_state_key(WORKSPACE_ROOTS_KEY) or []
        roots = [Path(p) for p in (workspace_root_path(e) for e in entries) if p]
        roots.extend(self.extra_workspaces)
        return roots

    def scope_roots(self) -> list[ScopeRoot]:
        roots: list[ScopeRoot] = []
        if self.global_root is not None:
            roots.append(ScopeRoot(HookScope.GLOBAL, self.global_root))
        roots.extend(ScopeRoot(HookScope.WORKSPACE, p) for p in self.workspace_roots())
        return roots

    def list_hook_dirs(self) -> list[HookDirectory]:
        return resolve_hook_dirs(self.scope_roots())

"""Hook data models: requests, responses, descriptors, scopes and policies."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any


class HookScope(IntEnum):
    """Precedence tier of a hook directory. Lower values combine first."""

    GLOBAL = 0
    WORKSPACE = 1


class HookPolicy(Enum):
    BLOCKING = "blocking"
    FIRE_AND_FORGET = "fire-and-forget"


# One entry per hook name. Unknown names are treated as blocking.
HOOK_POLICIES: dict[str, HookPolicy] = {
    "TaskStart": HookPolicy.BLOCKING,
    "TaskResume": HookPolicy.BLOCKING,
    "UserPromptSubmit": HookPolicy.BLOCKING,
    "PreToolUse": HookPolicy.BLOCKING,
    "PostToolUse": HookPolicy.BLOCKING,
    "PreCompact": HookPolicy.BLOCKING,
    "TaskCancel": HookPolicy.FIRE_AND_FORGET,
    "TaskComplete": HookPolicy.FIRE_AND_FORGET,
}

HOOK_NAMES = tuple(HOOK_POLICIES)

# Keys the engine owns; a caller request cannot override them.
ENVELOPE_KEYS = ("hookName", "clineVersion", "timestamp", "taskId", "workspaceRoots")


def policy_for(hook_name: str) -> HookPolicy:
    return HOOK_POLICIES.get(hook_name, HookPolicy.BLOCKING)


def payload_key(hook_name: str) -> str:
    """Wire key of the hook-specific payload: ``TaskCancel`` -> ``taskCancel``."""
    if not hook_name:
        return hook_name
    return hook_name[0].lower() + hook_name[1:]


@dataclass(frozen=True)
class ScopeRoot:
    """A base path tagged with the scope it belongs to."""

    scope: HookScope
    path: Path


@dataclass(frozen=True)
class HookDirectory:
    scope: HookScope
    path: Path


@dataclass(frozen=True)
class HookDescriptor:
    """A discovered, invocable hook script."""

    hook_name: str
    scope: HookScope
    path: Path


@dataclass
class HookRequest:
    """Envelope written to every hook script on stdin."""

    hook_name: str
    cline_version: str
    timestamp: str
    task_id: str = ""
    workspace_roots: list[str] = field(default_factory=list)
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        hook_name: str,
        request: Mapping[str, Any],
        cline_version: str,
        timestamp: str,
        workspace_roots: list[str] | None = None,
    ) -> HookRequest:
        """Merge a caller request (``taskId`` + hook-specific keys) with envelope fields."""
        payload = {k: v for k, v in request.items() if k not in ENVELOPE_KEYS}
        roots = workspace_roots
        if roots is None:
            roots = [str(r) for r in request.get("workspaceRoots", [])]
        return cls(
            hook_name=hook_name,
            cline_version=cline_version,
            timestamp=timestamp,
            task_id=str(request.get("taskId") or ""),
            workspace_roots=list(roots),
            payload=payload,
        )

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "hookName": self.hook_name,
            "clineVersion": self.cline_version,
            "timestamp": self.timestamp,
            "taskId": self.task_id,
            "workspaceRoots": list(self.workspace_roots),
        }
        for key, value in self.payload.items():
            if key not in ENVELOPE_KEYS:
                data[key] = value
        return data

    def serialize(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False, separators=(",", ":"))


@dataclass
class HookResponse:
    """What a single hook script reported on stdout."""

    should_continue: bool = True
    context_modification: str = ""
    error_message: str = ""

    def to_wire(self) -> dict[str, Any]:
        return {
            "shouldContinue": self.should_continue,
            "contextModification": self.context_modification,
            "errorMessage": self.error_message,
        }


@dataclass
class AggregateResult(HookResponse):
    """Combined decision of every hook script that ran for one event."""

    policy: HookPolicy = HookPolicy.BLOCKING

    @property
    def halts_action(self) -> bool:
        return self.policy is HookPolicy.BLOCKING and not self.should_continue

"""Hooks: discover, run and combine external lifecycle hook scripts."""

from .combiner import combine_results
from .discovery import (
    HOOKS_SUBDIR,
    HookDirectorySource,
    StateHookDirectorySource,
    StaticHookDirectorySource,
    find_hooks,
    resolve_hook_dirs,
)
from .engine import HookFactory, HookRunner
from .errors import HookError, HookExecutionError, HookOutputError, HookTimeoutError
from .invoker import ProcessInvoker, ProcessResult
from .models import (
    HOOK_NAMES,
    HOOK_POLICIES,
    AggregateResult,
    HookDescriptor,
    HookDirectory,
    HookPolicy,
    HookRequest,
    HookResponse,
    HookScope,
    ScopeRoot,
    payload_key,
    policy_for,
)
from .parser import parse_hook_output

__all__ = [
    "HOOKS_SUBDIR",
    "HOOK_NAMES",
    "HOOK_POLICIES",
    "AggregateResult",
    "HookDescriptor",
    "HookDirectory",
    "HookDirectorySource",
    "HookError",
    "HookExecutionError",
    "HookFactory",
    "HookOutputError",
    "HookPolicy",
    "HookRequest",
    "HookResponse",
    "HookRunner",
    "HookScope",
    "HookTimeoutError",
    "ProcessInvoker",
    "ProcessResult",
    "ScopeRoot",
    "StateHookDirectorySource",
    "StaticHookDirectorySource",
    "combine_results",
    "find_hooks",
    "parse_hook_output",
    "payload_key",
    "policy_for",
    "resolve_hook_dirs",
]

"""Hook error kinds: HookError, HookExecutionError, HookTimeoutError, HookOutputError."""

from __future__ import annotations


class HookError(Exception):
    """Base class for hook engine errors."""


class HookExecutionError(HookError):
    """A hook script exited nonzero, timed out, or produced unusable output."""

    def __init__(self, hook_name: str, message: str):
        super().__init__(message)
        self.hook_name = hook_name


class HookTimeoutError(HookExecutionError):
    def __init__(self, hook_name: str, timeout: float):
        super().__init__(hook_name, f"Hook {hook_name} timed out after {timeout:g}s")
        self.timeout = timeout


class HookOutputError(HookExecutionError):
    def __init__(self, hook_name: str, reason: str):
        super().__init__(hook_name, f"Failed to parse hook output from {hook_name}: {reason}")
        self.reason = reason

"""Hook output parsing: exit status + stdout -> HookResponse."""

from __future__ import annotations

import json

from .errors import HookExecutionError, HookOutputError
from .models import HookResponse

MAX_STDERR_CHARS = 500


def _optional_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


def parse_hook_output(hook_name: str, exit_code: int, stdout: str, stderr: str = "") -> HookResponse:
    """Decode one script's output. Raises HookExecutionError on any failure."""
    if exit_code != 0:
        message = f"Hook {hook_name} exited with code {exit_code}"
        detail = stderr.strip()
        if detail:
            message += f": {detail[-MAX_STDERR_CHARS:]}"
        raise HookExecutionError(hook_name, message)

    text = stdout.strip()
    if not text:
        raise HookOutputError(hook_name, "no output")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise HookOutputError(hook_name, str(e)) from e
    if not isinstance(data, dict):
        raise HookOutputError(hook_name, f"expected a JSON object, got {type(data).__name__}")

    should_continue = data.get("shouldContinue", True)
    if should_continue is None:
        should_continue = True
    if not isinstance(should_continue, bool):
        raise HookOutputError(hook_name, "shouldContinue must be a boolean")
    try:
        context = _optional_str(data, "contextModification")
        error = _optional_str(data, "errorMessage")
    except ValueError as e:
        raise HookOutputError(hook_name, str(e)) from e

    return HookResponse(should_continue=should_continue, context_modification=context, error_message=error)

"""Process invoker: run one hook script with the request on stdin."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Protocol

from .errors import HookExecutionError, HookTimeoutError
from .models import HookDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# How long to wait for pipes to drain after the process group is killed.
KILL_GRACE = 1.0


@dataclass(frozen=True)
class ProcessResult:
    exit_code: int
    stdout: str
    stderr: str


class HookTransport(Protocol):
    def invoke(self, descriptor: HookDescriptor, serialized_request: str) -> ProcessResult: ...


class ProcessInvoker:
    """Spawn the descriptor's executable, feed stdin, capture stdout/stderr.

    Output is not interpreted here. A child that outlives ``timeout`` is killed
    together with anything it spawned, and ``HookTimeoutError`` is raised.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def invoke(self, descriptor: HookDescriptor, serialized_request: str) -> ProcessResult:
        logger.debug("Running hook %s (%s): %s", descriptor.hook_name, descriptor.scope.name, descriptor.path)
        try:
            proc = subprocess.Popen(
                [str(descriptor.path)],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            raise HookExecutionError(
                descriptor.hook_name, f"Failed to start hook {descriptor.hook_name} ({descriptor.path}): {e}"
            ) from e

        try:
            stdout, stderr = proc.communicate(serialized_request, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            _kill(proc)
            _reap(proc)
            logger.warning("Hook %s timed out after %ss: %s", descriptor.hook_name, self.timeout, descriptor.path)
            raise HookTimeoutError(descriptor.hook_name, self.timeout) from None
        except BaseException:
            _kill(proc)
            proc.wait()
            raise

        logger.debug("Hook %s exited with code %s", descriptor.hook_name, proc.returncode)
        return ProcessResult(exit_code=proc.returncode, stdout=stdout, stderr=stderr)


def _kill(proc: subprocess.Popen) -> None:
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except (ProcessLookupError, PermissionError):
            pass
    proc.kill()


def _reap(proc: subprocess.Popen) -> None:
    """Wait for a killed child without blocking on pipes held by escaped descendants."""
    try:
        proc.communicate(timeout=KILL_GRACE)
    except subprocess.TimeoutExpired:
        # A descendant in another session still holds stdout/stderr open.
        for pipe in (proc.stdout, proc.stderr):
            if pipe is not None:
                pipe.close()
        proc.wait()

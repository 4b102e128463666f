"""Hook engine: HookFactory builds HookRunners bound to discovered scripts."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from clinehooks.core.config import Config, load_config
from clinehooks.storage import JsonFileStorage, StateManager

from .combiner import combine_results
from .discovery import HookDirectorySource, StateHookDirectorySource, find_hooks
from .invoker import HookTransport, ProcessInvoker, ProcessResult
from .models import AggregateResult, HookDescriptor, HookRequest, HookResponse
from .parser import parse_hook_output

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def _timestamp(clock: Callable[[], float]) -> str:
    return str(int(clock() * 1000))


class HookRunner:
    """Runs every script discovered for one hook name and combines the results.

    The descriptor list is fixed at construction; nothing else is kept
    between ``run`` calls.
    """

    def __init__(
        self,
        hook_name: str,
        descriptors: Sequence[HookDescriptor],
        invoker: HookTransport,
        cline_version: str,
        workspace_roots: Sequence[str] = (),
        clock: Callable[[], float] = time.time,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._hook_name = hook_name
        self._descriptors = tuple(descriptors)
        self._invoker = invoker
        self._cline_version = cline_version
        self._workspace_roots = tuple(workspace_roots)
        self._clock = clock
        self._max_workers = max(1, max_workers)

    @property
    def hook_name(self) -> str:
        return self._hook_name

    @property
    def descriptors(self) -> tuple[HookDescriptor, ...]:
        return self._descriptors

    @property
    def has_hooks(self) -> bool:
        return bool(self._descriptors)

    def build_request(self, request: Mapping[str, Any]) -> HookRequest:
        roots = request.get("workspaceRoots")
        if roots is None:
            roots = self._workspace_roots
        return HookRequest.build(
            self._hook_name,
            request,
            cline_version=self._cline_version,
            timestamp=_timestamp(self._clock),
            workspace_roots=[str(r) for r in roots],
        )

    def run(self, request: Mapping[str, Any] | None = None) -> AggregateResult:
        """Invoke all scripts with *request* and return the combined decision.

        Raises HookExecutionError if any script fails; nothing is combined then.
        """
        if not self._descriptors:
            logger.debug("No %s hooks found", self._hook_name)
            return combine_results(self._hook_name, [])

        payload = self.build_request(request or {}).serialize()
        responses = self._execute(payload)
        return combine_results(self._hook_name, responses)

    def _run_one(self, descriptor: HookDescriptor, payload: str) -> HookResponse:
        result: ProcessResult = self._invoker.invoke(descriptor, payload)
        return parse_hook_output(descriptor.hook_name, result.exit_code, result.stdout, result.stderr)

    def _execute(self, payload: str) -> list[HookResponse]:
        if len(self._descriptors) == 1 or self._max_workers == 1:
            return [self._run_one(d, payload) for d in self._descriptors]

        workers = min(self._max_workers, len(self._descriptors))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="hook") as pool:
            futures = [pool.submit(self._run_one, d, payload) for d in self._descriptors]
        # All children have finished here; collect in descriptor order so the
        # first failing descriptor's error is the one raised.
        return [f.result() for f in futures]


class HookFactory:
    """Creates a HookRunner per hook name, re-discovering scripts on every call."""

    def __init__(
        self,
        config: Config | None = None,
        directory_source: HookDirectorySource | None = None,
        invoker: HookTransport | None = None,
        clock: Callable[[], float] = time.time,
        max_workers: int | None = None,
    ):
        self.config = config or load_config()
        self.directory_source = directory_source or _default_source(self.config)
        self.invoker = invoker or ProcessInvoker(timeout=self.config.hook_timeout)
        self.clock = clock
        self.max_workers = max_workers if max_workers is not None else self.config.max_workers

    def create(self, hook_name: str) -> HookRunner:
        directories = self.directory_source.list_hook_dirs()
        descriptors = find_hooks(hook_name, directories)
        logger.debug("Resolved %d %s hook(s) from %d director(ies)", len(descriptors), hook_name, len(directories))
        return HookRunner(
            hook_name,
            descriptors,
            invoker=self.invoker,
            cline_version=self.config.cline_version,
            workspace_roots=[str(p) for p in self.directory_source.workspace_roots()],
            clock=self.clock,
            max_workers=self.max_workers,
        )


def _default_source(config: Config) -> StateHookDirectorySource:
    state = StateManager(JsonFileStorage(config.state_file))
    return StateHookDirectorySource(state, config.global_root)

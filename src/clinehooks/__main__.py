"""CLI entry point: run hooks, inspect discovery, manage workspace roots."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .core.config import Config, load_config
from .hooks import (
    HOOK_NAMES,
    HookExecutionError,
    HookFactory,
    StateHookDirectorySource,
    find_hooks,
    payload_key,
    policy_for,
)
from .hooks.discovery import WORKSPACE_ROOTS_KEY, workspace_root_path
from .storage import JsonFileStorage, StateManager

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _state(config: Config) -> StateManager:
    return StateManager(JsonFileStorage(config.state_file))


def _source(config: Config, workspaces: tuple[str, ...]) -> StateHookDirectorySource:
    extra = [Path(w).resolve() for w in workspaces]
    return StateHookDirectorySource(_state(config), config.global_root, extra_workspaces=extra)


def _parse_payload(value: str | None) -> dict | None:
    if value is None:
        return None
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--payload") from e
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--payload")
    return data


# ── CLI ─────────────────────────────────────────────────────────────


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--global-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding settings.json and state.json",
)
@click.version_option(__version__, prog_name="clinehooks")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, global_dir: Path | None):
    """clinehooks: run lifecycle hook scripts."""
    _setup_logging(verbose)
    ctx.obj = load_config(verbose=verbose, global_dir=global_dir)


@cli.command()
@click.argument("hook_name")
@click.option("--task-id", default="", help="Task identifier sent as taskId")
@click.option("--payload", default=None, help="Hook-specific payload as a JSON object")
@click.option("--workspace", "-w", multiple=True, type=click.Path(exists=True, file_okay=False), help="Extra workspace root (repeatable)")
@click.option("--timeout", type=float, default=None, help="Per-script timeout in seconds")
@click.pass_obj
def run(config: Config, hook_name: str, task_id: str, payload: str | None, workspace: tuple[str, ...], timeout: float | None):
    """Run HOOK_NAME and print the combined result as JSON."""
    if timeout:
        config.hook_timeout = timeout
    request: dict = {"taskId": task_id}
    data = _parse_payload(payload)
    if data is not None:
        request[payload_key(hook_name)] = data

    factory = HookFactory(config, directory_source=_source(config, workspace))
    runner = factory.create(hook_name)
    try:
        result = runner.run(request)
    except HookExecutionError as e:
        err_console.print(f"error: {e}", style="bold red", markup=False, highlight=False)
        sys.exit(1)

    click.echo(json.dumps(result.to_wire(), indent=2))
    if result.halts_action:
        sys.exit(2)


@cli.command("list")
@click.argument("hook_name")
@click.option("--workspace", "-w", multiple=True, type=click.Path(exists=True, file_okay=False), help="Extra workspace root (repeatable)")
@click.pass_obj
def list_hooks(config: Config, hook_name: str, workspace: tuple[str, ...]):
    """Show the scripts that would run for HOOK_NAME, in combination order."""
    directories = _source(config, workspace).list_hook_dirs()
    descriptors = find_hooks(hook_name, directories)
    if not descriptors:
        console.print(f"No {hook_name} hooks found", style="dim")
        for d in directories:
            console.print(f"  searched {d.path}", style="dim")
        return
    table = Table(title=f"{hook_name} ({policy_for(hook_name).value})")
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Scope", no_wrap=True)
    table.add_column("Path", overflow="fold")
    for i, d in enumerate(descriptors, 1):
        table.add_row(str(i), d.scope.name.lower(), str(d.path))
    console.print(table)


@cli.command()
def events():
    """List known hook names and their policies."""
    for name in HOOK_NAMES:
        console.print(f"  {name:<18} {policy_for(name).value}")


@cli.group()
def workspace():
    """Manage the workspace roots searched for hooks."""


def _roots(state: StateManager) -> list[str]:
    entries = state.get_global_state_key(WORKSPACE_ROOTS_KEY) or []
    return [p for p in (workspace_root_path(e) for e in entries) if p]


@workspace.command("show")
@click.pass_obj
def workspace_show(config: Config):
    roots = _roots(_state(config))
    if not roots:
        console.print("No workspace roots configured", style="dim")
    for root in roots:
        click.echo(root)


@workspace.command("add")
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.pass_obj
def workspace_add(config: Config, path: str):
    state = _state(config)
    roots = _roots(state)
    resolved = str(Path(path).resolve())
    if resolved in roots:
        console.print(f"Already registered: {resolved}", style="dim")
        return
    roots.append(resolved)
    state.set_global_state_key(WORKSPACE_ROOTS_KEY, [{"path": r} for r in roots])
    console.print(f"Added {resolved}")


@workspace.command("remove")
@click.argument("path")
@click.pass_obj
def workspace_remove(config: Config, path: str):
    state = _state(config)
    roots = _roots(state)
    target = str(Path(path).resolve())
    remaining = [r for r in roots if r not in (path, target)]
    if len(remaining) == len(roots):
        err_console.print(f"Not registered: {path}", style="bold")
        sys.exit(1)
    state.set_global_state_key(WORKSPACE_ROOTS_KEY, [{"path": r} for r in remaining])
    console.print(f"Removed {path}")


def main():
    cli()


if __name__ == "__main__":
    main()
